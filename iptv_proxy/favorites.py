"""
Favorites filter

Restricts the published catalog to a user-maintained list of channels. The
favorites file is either a JSON array of strings or plain text with one entry
per line (or comma separated); blank lines and '#' comments are ignored.
"""
import json
import logging
from pathlib import Path
from typing import Iterable

import aiofiles
import aiofiles.os

from iptv_proxy.services.fetch_types import Channel


logger = logging.getLogger(__name__)


async def load_favorites(path: Path | str) -> list[str]:
    """
    Read favorite match terms from a file

    Args:
        path: Favorites file path

    Returns:
        List of terms; empty when the file is missing or unreadable
    """
    favorites_path = Path(path)
    if not await aiofiles.os.path.exists(favorites_path):
        return []

    try:
        async with aiofiles.open(favorites_path, "r", encoding="utf-8") as f:
            content = await f.read()
        if content.strip().startswith("["):
            data = json.loads(content)
            if not isinstance(data, list):
                raise ValueError("favorites JSON must be an array")
            terms = [str(item).strip() for item in data if str(item).strip()]
        else:
            terms = [
                line.strip()
                for line in content.replace(",", "\n").splitlines()
                if line.strip() and not line.strip().startswith("#")
            ]
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.error(f"Failed to load favorites from {favorites_path}: {e}")
        return []

    logger.info(f"Loaded {len(terms)} favorites from {favorites_path}")
    return terms


class FavoritesFilter:
    """
    Callable channel predicate built from a list of favorite terms.

    An empty filter accepts every channel. Otherwise a channel matches when any
    term equals its slug, name or one of its ids, or is contained in its slug or
    name (case-insensitive).
    """

    def __init__(self, terms: Iterable[str] = ()):
        self.terms = [term for term in terms if term]
        self._lowered = [term.lower() for term in self.terms]

    def is_empty(self) -> bool:
        return not self.terms

    def __call__(self, channel: Channel) -> bool:
        if self.is_empty():
            return True

        slug = channel.slug.lower()
        name = channel.name.lower()
        exact = {slug, name, channel.id.lower()}
        if channel.alt_id:
            exact.add(channel.alt_id.lower())
        return any(
            term in exact or term in slug or term in name
            for term in self._lowered
        )

    def apply(self, channels: Iterable[Channel]) -> list[Channel]:
        """Filter channels, logging a summary of the active favorites"""
        channels = list(channels)
        if self.is_empty():
            logger.debug(f"No favorites specified, loading all {len(channels)} channels")
            return channels

        selected = [channel for channel in channels if self(channel)]
        logger.info(
            f"Favorites filter active ({len(self.terms)} terms): "
            f"{len(selected)}/{len(channels)} channels selected"
        )
        logger.debug(f"Favorite terms: {', '.join(self.terms)}")
        return selected

    @classmethod
    async def from_file(cls, path: Path | str) -> "FavoritesFilter":
        return cls(await load_favorites(path))
