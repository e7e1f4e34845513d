"""Tests for XMLTV guide generation."""
from lxml import etree

from conftest import make_channel, make_programme
from iptv_proxy.services.guide_service import GENERATOR_NAME, NO_TITLE, generate_guide


def _parse(guide: str) -> etree._Element:
    return etree.fromstring(guide.encode("utf-8"))


class TestGenerateGuide:

    def test_channels_come_before_programmes(self):
        channels = [make_channel("a"), make_channel("b"), make_channel("c")]

        root = _parse(generate_guide(channels))
        tags = [child.tag for child in root]

        assert root.tag == "tv"
        assert root.get("generator-info-name") == GENERATOR_NAME
        assert tags == ["channel"] * 3 + ["programme"] * 6

    def test_one_programme_per_streamable_pair(self):
        channels = [
            make_channel("a"),
            make_channel("offline", is_streamable=False),
            make_channel("empty", programmes=()),
        ]

        root = _parse(generate_guide(channels))

        assert [c.get("id") for c in root.findall("channel")] == ["a", "empty"]
        assert {p.get("channel") for p in root.findall("programme")} == {"a"}
        assert len(root.findall("programme")) == 2

    def test_channel_declaration(self):
        root = _parse(generate_guide([
            make_channel("a", name="Alpha"),
            make_channel("b", logo_url=None),
        ]))
        first, second = root.findall("channel")

        assert first.findtext("display-name") == "Alpha"
        assert first.find("icon").get("src") == "http://images.example.com/a.png"
        assert second.find("icon") is None

    def test_programme_fields(self):
        channel = make_channel("a", programmes=(make_programme(0, title="Headlines"),))

        programme = _parse(generate_guide([channel], language="es")).find("programme")

        assert programme.get("start") == "20251009120000 +0000"
        assert programme.get("stop") == "20251009123000 +0000"
        assert programme.get("channel") == "a"
        assert programme.findtext("title") == "Headlines"
        assert programme.find("title").get("lang") == "es"
        assert programme.findtext("desc") == "An episode"
        assert programme.findtext("category") == "News"
        assert programme.find("icon").get("src") == "http://images.example.com/poster.jpg"

    def test_optional_programme_fields(self):
        bare = make_programme(0, title=None, description=None, genre=None, poster_url=None)
        channel = make_channel("a", programmes=(bare,))

        programme = _parse(generate_guide([channel])).find("programme")

        assert programme.findtext("title") == NO_TITLE
        assert programme.find("desc") is not None
        assert not programme.findtext("desc")
        assert programme.find("category") is None
        assert programme.find("icon") is None

    def test_unrenderable_programme_is_skipped(self):
        programmes = (
            make_programme(0, title="Good"),
            make_programme(1, title="Bad\x00title"),
            make_programme(2, description="Also bad \x07"),
            make_programme(3, title="Still good"),
        )
        channel = make_channel("a", programmes=programmes)

        root = _parse(generate_guide([channel]))

        titles = [p.findtext("title") for p in root.findall("programme")]
        assert titles == ["Good", "Still good"]

    def test_output_has_xml_declaration(self):
        guide = generate_guide([])

        assert guide.startswith("<?xml version='1.0' encoding='UTF-8'?>")
        assert len(_parse(guide)) == 0

    def test_unrenderable_channel_is_skipped_with_its_programmes(self):
        channels = [
            make_channel("good"),
            make_channel("bad", name="Bad\x0bName"),
            make_channel("bad-logo", logo_url="http://images.example.com/\x01.png"),
        ]

        root = _parse(generate_guide(channels))

        assert [c.get("id") for c in root.findall("channel")] == ["good"]
        assert {p.get("channel") for p in root.findall("programme")} == {"good"}
        assert len(root.findall("programme")) == 2
