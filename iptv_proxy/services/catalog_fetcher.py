"""
Remote Catalog Fetcher

Retrieves the channel catalog (with timelines for the guide window) from the
remote API, serving it from the local cache while the cache is fresh.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from iptv_proxy.errors import FetchFailed
from iptv_proxy.services.cache_store import CacheStore
from iptv_proxy.utils.timezone import calculate_query_window


logger = logging.getLogger(__name__)


class CatalogFetcher:
    """Fetches the raw channel dataset for the configured EPG window."""

    def __init__(
        self,
        api_url: str,
        cache: CacheStore,
        *,
        epg_hours: int,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.api_url = api_url
        self.cache = cache
        self.epg_hours = epg_hours
        self.timeout = timeout
        self._transport = transport
        self._now = now

    async def fetch(self) -> list[dict[str, Any]]:
        """
        Return the channel dataset.

        Returns:
            Decoded JSON list of channel objects

        Raises:
            FetchFailed: On network/timeout errors, non-200 responses or
                undecodable bodies. No retry is attempted here.
        """
        logger.info("Grabbing channel catalog from %s", self.api_url)

        record = await self.cache.read()
        if record is not None:
            return record.payload

        start, stop = calculate_query_window(self._now(), self.epg_hours)
        params = {"start": start, "stop": stop}
        logger.debug("API query window: %s -> %s", start, stop)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(self.api_url, params=params)
        except httpx.HTTPError as exc:
            logger.error("Failed to fetch from API: %s: %s", type(exc).__name__, exc)
            raise FetchFailed(f"Request to channel API failed: {type(exc).__name__}: {exc}") from exc

        if response.status_code != 200:
            logger.error("API returned status %s", response.status_code)
            raise FetchFailed(
                f"API returned status {response.status_code}",
                status_code=response.status_code,
            )

        body = response.text
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as exc:
            logger.error("Failed to parse API response: %s", exc)
            raise FetchFailed(f"Failed to parse API response: {exc}", status_code=200) from exc

        if not isinstance(payload, list):
            logger.error("API response is %s, expected a list", type(payload).__name__)
            raise FetchFailed(
                f"Unexpected API response type: {type(payload).__name__}",
                status_code=200,
            )

        try:
            await self.cache.write(body)
        except OSError as exc:
            logger.warning("Failed to update cache %s: %s", self.cache.path, exc)

        logger.info("Fetched %s channels from API", len(payload))
        return payload
