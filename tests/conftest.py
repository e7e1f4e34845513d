from datetime import datetime, timedelta, timezone

import pytest

from iptv_proxy.dependencies import reset_dependencies
from iptv_proxy.services.fetch_types import Channel, Programme
from iptv_proxy.services.snapshot_store import reset_snapshot_store


BASE_TIME = datetime(2025, 10, 9, 12, 0, tzinfo=timezone.utc)


def make_programme(offset_hours: int = 0, **overrides) -> Programme:
    start = BASE_TIME + timedelta(hours=offset_hours)
    values = {
        "start": start,
        "stop": start + timedelta(minutes=30),
        "title": f"Show {offset_hours}",
        "description": "An episode",
        "genre": "News",
        "poster_url": "http://images.example.com/poster.jpg",
    }
    values.update(overrides)
    return Programme(**values)


def make_channel(slug: str = "evening-news", **overrides) -> Channel:
    values = {
        "slug": slug,
        "id": f"id-{slug}",
        "name": slug.replace("-", " ").title(),
        "category": "News",
        "logo_url": f"http://images.example.com/{slug}.png",
        "is_streamable": True,
        "stream_url": f"http://stitcher.example.com/stitch/hls/channel/{slug}/master.m3u8?terminate=false&deviceId=old",
        "programmes": (make_programme(0), make_programme(1)),
    }
    values.update(overrides)
    return Channel(**values)


def make_raw_channel(slug: str = "evening-news", name: str = "Evening News", **overrides) -> dict:
    raw = {
        "_id": f"id-{slug}",
        "slug": slug,
        "name": name,
        "category": "News",
        "isStitched": True,
        "colorLogoPNG": {"path": f"http://images.example.com/{slug}.png"},
        "stitched": {
            "urls": [
                {"type": "hls", "url": f"http://stitcher.example.com/stitch/hls/channel/{slug}/master.m3u8?terminate=false"}
            ]
        },
        "timelines": [
            {
                "start": "2025-10-09T12:00:00.000Z",
                "stop": "2025-10-09T12:30:00.000Z",
                "title": "Headlines",
                "episode": {
                    "description": "Top stories",
                    "genre": "News",
                    "poster": {"path": "http://images.example.com/headlines.jpg"},
                },
            },
            {
                "start": "2025-10-09T12:30:00.000Z",
                "stop": "2025-10-09T13:00:00.000Z",
                "title": "Weather",
                "episode": {},
            },
        ],
    }
    raw.update(overrides)
    return raw


@pytest.fixture
def raw_catalog() -> list[dict]:
    return [
        make_raw_channel("evening-news", "Evening News"),
        make_raw_channel("sports-hub", "Sports Hub", category="Sports"),
        make_raw_channel("offline-movies", "Offline Movies", isStitched=False),
    ]


@pytest.fixture(autouse=True)
def reset_globals():
    yield
    reset_snapshot_store()
    reset_dependencies()
