"""
Update Orchestrator

Runs the full synchronization sequence (fetch, normalize, filter, generate,
publish, back up) under the single-flight guard. Used by both the scheduler
and the manual refresh endpoint.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Awaitable, Callable

from iptv_proxy.errors import FetchFailed
from iptv_proxy.favorites import FavoritesFilter
from iptv_proxy.services.catalog_fetcher import CatalogFetcher
from iptv_proxy.services.catalog_parser_service import load_channels
from iptv_proxy.services.fetch_types import Channel, Snapshot, UpdateOutcome
from iptv_proxy.services.guide_service import generate_guide
from iptv_proxy.services.playlist_service import generate_playlist
from iptv_proxy.services.snapshot_store import SnapshotStore
from iptv_proxy.services.update_coordinator import UpdateCoordinator
from iptv_proxy.utils.file_operations import atomic_write_text
from iptv_proxy.utils.logging_helpers import log_section_end, log_section_start


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BackupPaths:
    playlist: Path
    guide: Path


class UpdateOrchestrator:
    """Sequences one update attempt and publishes its result."""

    def __init__(
        self,
        fetcher: CatalogFetcher,
        store: SnapshotStore,
        favorites_loader: Callable[[], Awaitable[FavoritesFilter]],
        *,
        backups: BackupPaths | None = None,
        guide_language: str = "en",
        update_timeout: float | None = None,
        coordinator: UpdateCoordinator | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.store = store
        self.favorites_loader = favorites_loader
        self.backups = backups
        self.guide_language = guide_language
        self._timeout = update_timeout if update_timeout and update_timeout > 0 else None
        self.coordinator = coordinator or UpdateCoordinator()

    def is_updating(self) -> bool:
        return self.coordinator.is_updating()

    async def run_update(self) -> UpdateOutcome:
        """
        Run one update attempt unless another is already in flight.

        Returns:
            busy if rejected, success with the new last_update, or failed with
            the error description. The previous snapshot is kept on failure.
        """
        return await self.coordinator.execute(self._guarded_update)

    async def scheduled_update(self) -> None:
        """Timer entry point: never raises, nothing is queued when busy."""
        logger.info("Scheduled update triggered")
        try:
            outcome = await self.run_update()
        except Exception as e:
            logger.error(f"Exception in scheduled update: {e}", exc_info=True)
            return

        if outcome.status == "busy":
            logger.warning("Scheduled update skipped: previous update still running")
        elif outcome.status == "failed":
            logger.error(f"Scheduled update failed: {outcome.error}")

    async def _guarded_update(self) -> UpdateOutcome:
        log_section_start(logger, "data update")
        try:
            if self._timeout:
                snapshot = await asyncio.wait_for(self._build_snapshot(), timeout=self._timeout)
            else:
                snapshot = await self._build_snapshot()
        except FetchFailed as exc:
            detail = f" (HTTP {exc.status_code})" if exc.status_code else ""
            logger.error("Failed to update data: %s%s", exc, detail)
            return UpdateOutcome(status="failed", error=str(exc))
        except asyncio.TimeoutError:
            logger.error("Update did not finish within %ss, giving up", self._timeout)
            return UpdateOutcome(status="failed", error=f"Update timed out after {self._timeout}s")
        except Exception as exc:  # Catch-all to keep serving the previous snapshot
            logger.error("Unexpected error during update: %s", exc, exc_info=True)
            return UpdateOutcome(status="failed", error=str(exc))

        self.store.publish(snapshot)
        await self._write_backups(snapshot)
        log_section_end(logger, "data update")

        return UpdateOutcome(
            status="success",
            last_update=snapshot.last_update,
            channels_count=len(snapshot.channels),
        )

    async def _build_snapshot(self) -> Snapshot:
        payload = await self.fetcher.fetch()

        channels = load_channels(payload)
        favorites = await self.favorites_loader()
        channels = favorites.apply(channels)

        # Generation is CPU bound; keep the event loop free to serve the old snapshot
        loop = asyncio.get_running_loop()
        playlist_text, guide_text = await loop.run_in_executor(
            None, self._generate, channels
        )

        return Snapshot(
            channels=tuple(channels),
            playlist_text=playlist_text,
            guide_text=guide_text,
            last_update=datetime.now(timezone.utc),
        )

    def _generate(self, channels: list[Channel]) -> tuple[str, str]:
        return (
            generate_playlist(channels),
            generate_guide(channels, language=self.guide_language),
        )

    async def _write_backups(self, snapshot: Snapshot) -> None:
        if not self.backups:
            return
        for path, content in (
            (self.backups.playlist, snapshot.playlist_text),
            (self.backups.guide, snapshot.guide_text),
        ):
            try:
                await atomic_write_text(path, content)
            except OSError as e:
                logger.warning(f"Failed to write backup {path}: {e}")
