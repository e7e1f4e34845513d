"""
Guide Generator

Builds the XMLTV program guide. XMLTV requires every <channel> element to come
before the first <programme>, so channels and programmes are written in two
passes over the channel list.
"""
import logging
from typing import Sequence

from lxml import etree # type: ignore

from iptv_proxy.errors import ChannelGenerationError, ProgrammeGenerationError
from iptv_proxy.services.fetch_types import Channel, Programme
from iptv_proxy.utils.timezone import format_xmltv_time

logger = logging.getLogger(__name__)

GENERATOR_NAME = "iptv-proxy"
NO_TITLE = "No title"


def generate_guide(channels: Sequence[Channel], language: str = "en") -> str:
    """
    Generate the XMLTV document for all streamable channels

    Args:
        channels: Channels (with embedded timelines) in output order
        language: Value of the lang attribute on title/desc/category

    Returns:
        Pretty-printed XMLTV document with an XML declaration. Channels and
        programmes that fail to render are logged and left out.
    """
    logger.info("Generating EPG XML...")

    root = etree.Element('tv', {'generator-info-name': GENERATOR_NAME})

    declared = []
    for channel in channels:
        if not channel.is_streamable:
            continue
        try:
            root.append(_build_channel(channel))
            declared.append(channel)
        except ChannelGenerationError as e:
            logger.error(f"Failed to process channel {channel.slug!r}: {e}")

    programme_count = 0
    skipped = 0
    for channel in declared:
        for programme in channel.programmes:
            try:
                root.append(_build_programme(channel, programme, language))
                programme_count += 1
            except ProgrammeGenerationError as e:
                skipped += 1
                logger.error(f"Failed to process programme in {channel.name}: {e}")

    logger.info(
        f"Generated EPG with {len(declared)} channels and {programme_count} programmes ({skipped} skipped)"
    )

    return etree.tostring(
        root,
        pretty_print=True,
        xml_declaration=True,
        encoding='UTF-8'
    ).decode('utf-8')


def _build_channel(channel: Channel) -> etree._Element:
    """
    Build a detached <channel> declaration

    Raises:
        ChannelGenerationError: If any field is rejected by lxml
    """
    try:
        element = etree.Element('channel', {'id': channel.slug})
        etree.SubElement(element, 'display-name').text = channel.name
        if channel.logo_url:
            etree.SubElement(element, 'icon', {'src': channel.logo_url})
    except (ValueError, TypeError) as e:
        raise ChannelGenerationError(str(e)) from e
    return element


def _build_programme(channel: Channel, programme: Programme, language: str) -> etree._Element:
    """
    Build a detached <programme> element

    Raises:
        ProgrammeGenerationError: If the programme cannot be rendered
    """
    try:
        element = etree.Element('programme', {
            'start': format_xmltv_time(programme.start),
            'stop': format_xmltv_time(programme.stop),
            'channel': channel.slug,
        })
        etree.SubElement(element, 'title', {'lang': language}).text = programme.title or NO_TITLE
        etree.SubElement(element, 'desc', {'lang': language}).text = programme.description or ''

        if programme.genre:
            etree.SubElement(element, 'category', {'lang': language}).text = programme.genre

        if programme.poster_url:
            etree.SubElement(element, 'icon', {'src': programme.poster_url})
    except (ValueError, TypeError) as e:
        raise ProgrammeGenerationError(f"{programme.title!r} at {programme.start.isoformat()}: {e}") from e
    return element
