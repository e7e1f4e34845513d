"""
Local Cache Store

Persists the raw channel API payload as a single JSON file. The file's
modification time is the write timestamp; a record is only served while it is
younger than the configured TTL.
"""
import json
import logging
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import aiofiles
import aiofiles.os

from iptv_proxy.errors import CacheCorrupt
from iptv_proxy.services.fetch_types import CacheRecord
from iptv_proxy.utils.file_operations import atomic_write_text


logger = logging.getLogger(__name__)


class CacheStore:
    """Reads and writes the timestamped catalog cache file."""

    def __init__(
        self,
        path: Path | str,
        ttl: timedelta,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.path = Path(path)
        self.ttl = ttl
        self._clock = clock

    async def read(self) -> CacheRecord | None:
        """
        Return the cached payload if present and fresh.

        A missing, stale or unreadable file is a cache miss, never an error.
        """
        try:
            stat = await aiofiles.os.stat(self.path)
        except FileNotFoundError:
            logger.debug("No cache file at %s", self.path)
            return None

        age_seconds = self._clock() - stat.st_mtime
        if age_seconds >= self.ttl.total_seconds():
            logger.debug(
                "Cache %s is stale (%.1f minutes old)", self.path, age_seconds / 60
            )
            return None

        try:
            payload = await self._load()
        except CacheCorrupt as exc:
            logger.warning("Cache file corrupted, ignoring it: %s", exc)
            return None

        logger.info("Using %s (%.1f minutes old)", self.path, age_seconds / 60)
        return CacheRecord(
            payload=payload,
            written_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )

    async def write(self, payload_text: str) -> None:
        """Persist the raw payload, replacing the previous cache atomically."""
        await atomic_write_text(self.path, payload_text)
        logger.debug("Cache updated successfully: %s", self.path)

    async def _load(self):
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
            return json.loads(content)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CacheCorrupt(f"{self.path}: {exc}") from exc
