"""
Playlist Generator

Builds the M3U playlist served to media players. Each stream URL gets a fresh
device/session identity on every generation.
"""
import logging
from typing import Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit
from uuid import uuid1, uuid4

from iptv_proxy.errors import ChannelGenerationError
from iptv_proxy.services.fetch_types import Channel


logger = logging.getLogger(__name__)

PLAYLIST_HEADER = "#EXTM3U"
DEFAULT_GROUP = "General"

# Client identity sent to the stitcher; deviceId and sid are filled per channel
CLIENT_PARAMS = {
    "advertisingId": "",
    "appName": "web",
    "appVersion": "unknown",
    "appStoreUrl": "",
    "architecture": "",
    "buildVersion": "",
    "clientTime": "0",
    "deviceDNT": "0",
    "deviceId": "",
    "deviceMake": "Chrome",
    "deviceModel": "web",
    "deviceType": "web",
    "deviceVersion": "unknown",
    "includeExtendedEvents": "false",
    "sid": "",
    "userId": "",
    "serverSideAds": "true",
}


def build_stream_url(template: str | None) -> str:
    """
    Rewrite a channel stream URL with a fresh client identity

    Existing query parameters are kept, repeated keys included. Client identity
    parameters replace any existing values and are appended at the end.

    Raises:
        ChannelGenerationError: If the template is missing or not an HTTP(S) URL
    """
    if not template:
        raise ChannelGenerationError("channel has no stream URL")

    try:
        parts = urlsplit(template)
    except ValueError as exc:
        raise ChannelGenerationError(f"invalid stream URL: {exc}") from exc

    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ChannelGenerationError(f"stream URL is not an HTTP URL: {template!r}")

    overrides = dict(CLIENT_PARAMS, deviceId=str(uuid1()), sid=str(uuid4()))

    pairs = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in overrides
    ]
    pairs.extend(overrides.items())

    return urlunsplit(parts._replace(query=urlencode(pairs)))


def build_entry(channel: Channel) -> str:
    """Render the #EXTINF line and URL for a single channel"""
    url = build_stream_url(channel.stream_url)

    attrs = [f'tvg-id="{channel.slug}"']
    if channel.logo_url:
        attrs.append(f'tvg-logo="{channel.logo_url}"')
    attrs.append(f'group-title="{channel.category or DEFAULT_GROUP}"')

    return f"#EXTINF:0 {' '.join(attrs)}, {channel.name}\n{url}\n"


def generate_playlist(channels: Sequence[Channel]) -> str:
    """
    Generate the M3U playlist for all streamable channels

    Args:
        channels: Channels in output order

    Returns:
        Playlist text, always starting with the #EXTM3U header. Channels that
        fail to render are logged and left out.
    """
    logger.info("Generating M3U8 playlist...")

    entries = [PLAYLIST_HEADER]
    skipped = 0
    for channel in channels:
        if not channel.is_streamable:
            continue

        try:
            entries.append(build_entry(channel))
        except ChannelGenerationError as e:
            skipped += 1
            logger.error(f"Failed to process channel {channel.name}: {e}")

    count = len(entries) - 1
    logger.info(f"Generated M3U8 with {count} channels ({skipped} skipped)")
    return "\n".join(entries) + "\n"
