from typing import Any, Optional
import logging

from iptv_proxy.errors import ChannelGenerationError, ProgrammeGenerationError
from iptv_proxy.services.fetch_types import Channel, Programme
from iptv_proxy.utils.timezone import DateFormatError, parse_iso8601_to_utc

logger = logging.getLogger(__name__)


def load_channels(payload: Any) -> list[Channel]:
    """
    Normalize the raw channel API payload

    Args:
        payload: Decoded JSON returned by the channel API (a list of channel objects)

    Returns:
        List of channels in payload order. Entries that cannot be normalized
        are logged and skipped.

    Raises:
        ValueError: If the payload itself is not a list
    """
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of channels, got {type(payload).__name__}")

    channels = []
    for index, raw in enumerate(payload):
        try:
            channels.append(parse_channel(raw))
        except ChannelGenerationError as e:
            logger.warning(f"Skipping channel #{index}: {e}")

    logger.info(f"Catalog normalized: {len(channels)}/{len(payload)} channels")
    return channels


def parse_channel(raw: Any) -> Channel:
    """Parse a single channel object, raising ChannelGenerationError if unusable"""
    if not isinstance(raw, dict):
        raise ChannelGenerationError(f"channel entry is {type(raw).__name__}, not an object")

    slug = raw.get('slug')
    name = raw.get('name')
    if not slug or not name:
        raise ChannelGenerationError(f"channel missing slug or name (slug={slug!r}, name={name!r})")

    channel_id = str(raw.get('_id') or raw.get('id') or slug)
    alt_id = str(raw['id']) if raw.get('_id') and raw.get('id') else None
    if alt_id == channel_id:
        alt_id = None

    programmes = []
    for programme in raw.get('timelines') or []:
        try:
            programmes.append(parse_programme(programme))
        except ProgrammeGenerationError as e:
            logger.debug(f"Skipping programme on {slug}: {e}")

    return Channel(
        slug=str(slug),
        id=channel_id,
        name=str(name),
        category=raw.get('category') or None,
        logo_url=_get_path(raw, 'colorLogoPNG', 'path'),
        is_streamable=bool(raw.get('isStitched')),
        stream_url=_get_stream_url(raw),
        programmes=tuple(programmes),
        alt_id=alt_id,
    )


def parse_programme(raw: Any) -> Programme:
    """Parse a single timeline entry, raising ProgrammeGenerationError if unusable"""
    if not isinstance(raw, dict):
        raise ProgrammeGenerationError(f"timeline entry is {type(raw).__name__}, not an object")

    try:
        start = parse_iso8601_to_utc(raw.get('start'))
        stop = parse_iso8601_to_utc(raw.get('stop'))
    except DateFormatError as e:
        raise ProgrammeGenerationError(str(e)) from e

    if start >= stop:
        raise ProgrammeGenerationError(f"start {start.isoformat()} is not before stop {stop.isoformat()}")

    episode = raw.get('episode') if isinstance(raw.get('episode'), dict) else {}

    return Programme(
        start=start,
        stop=stop,
        title=raw.get('title') or None,
        description=episode.get('description') or None,
        genre=episode.get('genre') or None,
        poster_url=_get_path(episode, 'poster', 'path'),
    )


def _get_path(element: dict, key: str, attr: str) -> Optional[str]:
    """Safely extract a nested string like element[key][attr]"""
    child = element.get(key)
    if not isinstance(child, dict):
        return None
    value = child.get(attr)
    return value if isinstance(value, str) and value else None


def _get_stream_url(raw: dict) -> Optional[str]:
    """Return the first stitched stream URL, if any"""
    stitched = raw.get('stitched')
    if not isinstance(stitched, dict):
        return None
    urls = stitched.get('urls')
    if not isinstance(urls, list) or not urls or not isinstance(urls[0], dict):
        return None
    url = urls[0].get('url')
    return url if isinstance(url, str) and url else None
