"""Tests for the favorites loader and predicate."""
import json

import pytest

from conftest import make_channel
from iptv_proxy.favorites import FavoritesFilter, load_favorites


class TestFavoritesFilter:

    def test_empty_filter_accepts_everything(self):
        favorites = FavoritesFilter()

        assert favorites.is_empty()
        assert favorites(make_channel("anything"))

    def test_substring_match_on_name(self):
        favorites = FavoritesFilter(["news"])

        assert favorites(make_channel("channel-1", name="Evening News"))
        assert not favorites(make_channel("channel-2", name="Sports Hub"))

    def test_case_insensitive_slug_substring(self):
        favorites = FavoritesFilter(["SPORTS"])

        assert favorites(make_channel("sports-hub", name="Hub"))

    def test_exact_id_match(self):
        favorites = FavoritesFilter(["5f1ab"])

        assert favorites(make_channel("movies", name="Movies", id="5F1AB"))
        assert not favorites(make_channel("movies", name="Movies", id="5f1abc"))

    def test_exact_match_on_either_api_id(self):
        channel = make_channel("movies", name="Movies", id="5f1ab", alt_id="legacy-42")

        assert FavoritesFilter(["5f1ab"])(channel)
        assert FavoritesFilter(["LEGACY-42"])(channel)
        assert not FavoritesFilter(["legacy"])(channel)

    def test_apply_keeps_order(self):
        channels = [
            make_channel("sports-hub", name="Sports Hub"),
            make_channel("evening-news", name="Evening News"),
            make_channel("morning-news", name="Morning News"),
        ]

        selected = FavoritesFilter(["news"]).apply(channels)

        assert [c.slug for c in selected] == ["evening-news", "morning-news"]


class TestLoadFavorites:

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        assert await load_favorites(tmp_path / "nope") == []

    @pytest.mark.asyncio
    async def test_text_format(self, tmp_path):
        path = tmp_path / "favorites"
        path.write_text("# my channels\nnews\n\nsports-hub, cooking\n", encoding="utf-8")

        assert await load_favorites(path) == ["news", "sports-hub", "cooking"]

    @pytest.mark.asyncio
    async def test_json_format(self, tmp_path):
        path = tmp_path / "favorites.json"
        path.write_text(json.dumps(["news", " movies "]), encoding="utf-8")

        assert await load_favorites(path) == ["news", "movies"]

    @pytest.mark.asyncio
    async def test_invalid_json_is_treated_as_empty(self, tmp_path):
        path = tmp_path / "favorites.json"
        path.write_text("[broken", encoding="utf-8")

        assert await load_favorites(path) == []
        assert (await FavoritesFilter.from_file(path)).is_empty()
