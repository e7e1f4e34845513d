"""
Shared dataclasses used across the synchronization pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal


@dataclass(frozen=True, slots=True)
class Programme:
    """A single scheduled programme on a channel timeline."""
    start: datetime
    stop: datetime
    title: str | None = None
    description: str | None = None
    genre: str | None = None
    poster_url: str | None = None


@dataclass(frozen=True, slots=True)
class Channel:
    """
    A catalog channel as returned by the remote API, normalized.

    id is the API's `_id` (falling back to `id`, then the slug); alt_id keeps
    a separate `id` value when the payload carries both.
    """
    slug: str
    id: str
    name: str
    category: str | None = None
    logo_url: str | None = None
    is_streamable: bool = False
    stream_url: str | None = None
    programmes: tuple[Programme, ...] = ()
    alt_id: str | None = None


@dataclass(frozen=True, slots=True)
class CacheRecord:
    """Decoded cache payload and the time it was written."""
    payload: Any
    written_at: datetime


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Published set of derived artifacts, replaced wholesale on each update."""
    channels: tuple[Channel, ...] = ()
    playlist_text: str = ""
    guide_text: str = ""
    last_update: datetime | None = None


@dataclass(slots=True)
class UpdateOutcome:
    """Terminal result of a single update attempt."""
    status: Literal["success", "failed", "busy"]
    last_update: datetime | None = None
    channels_count: int = 0
    error: str | None = None


__all__ = ["CacheRecord", "Channel", "Programme", "Snapshot", "UpdateOutcome"]
