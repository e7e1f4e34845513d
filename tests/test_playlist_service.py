"""Tests for M3U8 playlist generation."""
from urllib.parse import parse_qs, urlsplit
from uuid import UUID

from conftest import make_channel
from iptv_proxy.services.playlist_service import (
    DEFAULT_GROUP,
    PLAYLIST_HEADER,
    build_stream_url,
    generate_playlist,
)


def _urls(playlist: str) -> list[str]:
    return [line for line in playlist.splitlines() if line.startswith("http")]


def _extinf(playlist: str) -> list[str]:
    return [line for line in playlist.splitlines() if line.startswith("#EXTINF")]


class TestGeneratePlaylist:

    def test_one_entry_per_streamable_channel(self):
        channels = [
            make_channel("evening-news"),
            make_channel("offline", is_streamable=False),
            make_channel("sports-hub"),
        ]

        playlist = generate_playlist(channels)

        assert playlist.startswith(PLAYLIST_HEADER + "\n")
        assert len(_extinf(playlist)) == 2
        assert 'tvg-id="evening-news"' in _extinf(playlist)[0]
        assert 'tvg-id="sports-hub"' in _extinf(playlist)[1]

    def test_entry_metadata_line(self):
        channel = make_channel("evening-news", name="Evening News")

        line = _extinf(generate_playlist([channel]))[0]

        assert line == (
            '#EXTINF:0 tvg-id="evening-news" '
            'tvg-logo="http://images.example.com/evening-news.png" '
            'group-title="News", Evening News'
        )

    def test_missing_logo_and_category(self):
        channel = make_channel("plain", logo_url=None, category=None)

        line = _extinf(generate_playlist([channel]))[0]

        assert "tvg-logo" not in line
        assert f'group-title="{DEFAULT_GROUP}"' in line

    def test_malformed_channels_are_skipped(self):
        channels = [
            make_channel("no-url", stream_url=None),
            make_channel("good"),
            make_channel("bad-scheme", stream_url="ftp://example.com/stream"),
        ]

        playlist = generate_playlist(channels)

        assert len(_extinf(playlist)) == 1
        assert 'tvg-id="good"' in playlist

    def test_no_streamable_channels_yields_header_only(self):
        playlist = generate_playlist([make_channel("offline", is_streamable=False)])

        assert playlist == PLAYLIST_HEADER + "\n"

    def test_identifiers_are_fresh_per_channel_and_call(self):
        channels = [make_channel("a"), make_channel("b")]

        first = [parse_qs(urlsplit(url).query) for url in _urls(generate_playlist(channels))]
        second = [parse_qs(urlsplit(url).query) for url in _urls(generate_playlist(channels))]

        device_ids = {q["deviceId"][0] for q in first + second}
        session_ids = {q["sid"][0] for q in first + second}
        assert len(device_ids) == 4
        assert len(session_ids) == 4
        assert "old" not in device_ids


class TestBuildStreamUrl:

    def test_overwrites_client_parameters_and_keeps_others(self):
        url = build_stream_url(
            "https://stitcher.example.com/master.m3u8?terminate=false&appName=tv&deviceMake=Roku"
        )
        parts = urlsplit(url)
        query = parse_qs(parts.query, keep_blank_values=True)

        assert parts.scheme == "https"
        assert parts.path == "/master.m3u8"
        assert query["terminate"] == ["false"]
        assert query["appName"] == ["web"]
        assert query["deviceMake"] == ["Chrome"]
        assert query["serverSideAds"] == ["true"]
        assert query["userId"] == [""]
        assert UUID(query["deviceId"][0]).version == 1
        assert UUID(query["sid"][0]).version == 4

    def test_repeated_parameters_are_kept(self):
        url = build_stream_url(
            "https://stitcher.example.com/master.m3u8?tag=a&tag=b&deviceId=old&deviceId=older"
        )
        query = parse_qs(urlsplit(url).query, keep_blank_values=True)

        assert query["tag"] == ["a", "b"]
        assert len(query["deviceId"]) == 1
        assert query["deviceId"][0] not in ("old", "older")
