"""
Update Coordination

Manages update operation coordination with concurrency protection.
Overlapping triggers are rejected with a "busy" outcome instead of queued.
"""
import asyncio
import logging
from typing import Awaitable, Callable

from iptv_proxy.services.fetch_types import UpdateOutcome


logger = logging.getLogger(__name__)


class UpdateCoordinator:
    """
    Coordinates catalog updates to prevent concurrent executions.

    Uses an internal asyncio.Lock to ensure only one update runs at a time.
    The lock is checked and acquired without yielding to the event loop, so
    two triggers can never both start an update.
    """

    def __init__(self):
        """Initialize the update coordinator with a lock."""
        self._update_lock = asyncio.Lock()

    async def execute(self, update_func: Callable[[], Awaitable[UpdateOutcome]]) -> UpdateOutcome:
        """
        Execute an update operation with concurrency protection.

        Args:
            update_func: Async function running the full update sequence

        Returns:
            Result from update_func, or a busy outcome if an update is running

        Raises:
            Any exception raised by update_func (the lock is released first)
        """
        if self._update_lock.locked():
            logger.warning("Update already in progress, skipping this request")
            return UpdateOutcome(
                status="busy",
                error="Update already in progress",
            )

        async with self._update_lock:
            return await update_func()

    def is_updating(self) -> bool:
        """
        Check if an update operation is currently in progress.

        Returns:
            True if an update is running, False otherwise
        """
        return self._update_lock.locked()
