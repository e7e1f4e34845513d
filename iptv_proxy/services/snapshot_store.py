"""
Published Snapshot

Holds the last successfully generated playlist/guide pair. Snapshots are frozen
and swapped in with a single assignment, so readers always see a complete one.
"""
import logging

from iptv_proxy.services.fetch_types import Snapshot


logger = logging.getLogger(__name__)


class SnapshotStore:
    """Owner of the currently published snapshot."""

    def __init__(self, initial: Snapshot | None = None):
        self._current = initial or Snapshot()
        self._version = 0

    @property
    def current(self) -> Snapshot:
        """The most recently published snapshot (empty before the first update)."""
        return self._current

    @property
    def version(self) -> int:
        """Number of snapshots published so far."""
        return self._version

    def publish(self, snapshot: Snapshot) -> None:
        """Replace the current snapshot wholesale."""
        self._current = snapshot
        self._version += 1
        logger.debug(
            "Published snapshot v%s (%s channels)", self._version, len(snapshot.channels)
        )


# Global singleton instance
_store: SnapshotStore | None = None


def get_snapshot_store() -> SnapshotStore:
    """
    Get or create the global snapshot store singleton.

    Returns:
        The global SnapshotStore instance
    """
    global _store
    if _store is None:
        _store = SnapshotStore()
    return _store


def reset_snapshot_store() -> None:
    """
    Reset the snapshot store (mainly for testing).

    WARNING: Only use this in test environments!
    """
    global _store
    _store = None
