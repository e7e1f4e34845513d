"""
Dependency wiring

Builds the process-wide pipeline objects from settings and exposes them as
FastAPI dependencies, so tests can swap them via app.dependency_overrides.
"""
import logging
from datetime import timedelta
from pathlib import Path

from iptv_proxy.config import CustomSettings, settings
from iptv_proxy.favorites import FavoritesFilter
from iptv_proxy.services.cache_store import CacheStore
from iptv_proxy.services.catalog_fetcher import CatalogFetcher
from iptv_proxy.services.scheduler_service import UpdateScheduler
from iptv_proxy.services.snapshot_store import SnapshotStore, get_snapshot_store
from iptv_proxy.services.update_service import BackupPaths, UpdateOrchestrator


logger = logging.getLogger(__name__)


def build_orchestrator(config: CustomSettings, store: SnapshotStore) -> UpdateOrchestrator:
    """
    Assemble the update pipeline from configuration.

    Args:
        config: Loaded settings
        store: Snapshot store the orchestrator publishes into

    Returns:
        A ready UpdateOrchestrator
    """
    cache = CacheStore(config.cache_file, ttl=timedelta(minutes=config.update_interval))
    fetcher = CatalogFetcher(
        config.api_url,
        cache,
        epg_hours=config.epg_hours,
        timeout=config.fetch_timeout_sec,
    )
    favorites_path = config.favorites_path

    return UpdateOrchestrator(
        fetcher,
        store,
        lambda: FavoritesFilter.from_file(favorites_path),
        backups=BackupPaths(
            playlist=Path(config.playlist_backup_path),
            guide=Path(config.guide_backup_path),
        ),
        guide_language=config.guide_language,
        update_timeout=config.update_timeout_sec,
    )


_orchestrator: UpdateOrchestrator | None = None
_scheduler: UpdateScheduler | None = None


def get_orchestrator() -> UpdateOrchestrator:
    """Get or create the global orchestrator."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = build_orchestrator(settings, get_snapshot_store())
        logger.debug("Update orchestrator created")
    return _orchestrator


def get_scheduler() -> UpdateScheduler:
    """Get or create the global update scheduler."""
    global _scheduler
    if _scheduler is None:
        _scheduler = UpdateScheduler(
            get_orchestrator().scheduled_update,
            interval_minutes=settings.update_interval,
        )
    return _scheduler


def get_settings() -> CustomSettings:
    return settings


def reset_dependencies() -> None:
    """
    Drop the global pipeline objects (mainly for testing).

    WARNING: Only use this in test environments!
    """
    global _orchestrator, _scheduler
    _orchestrator = None
    _scheduler = None
