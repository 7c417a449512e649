"""
Builder tests for marker resolution.
"""

from __future__ import annotations

from telefmt import FormattedString, b, fmt, i, link, mention, pre, u
from telefmt.builder import FormattedStringBuilder, TagFactory
from telefmt.models import EntityTag, EntityType, MessageEntity, User


def _entity(entity_type: EntityType, offset: int, length: int, **payload) -> MessageEntity:
    return MessageEntity(type=entity_type, offset=offset, length=length, **payload)


def test_fmt_builds_bold_and_italic():
    value = fmt(b, "Hello", b, " ", i, "World", i)
    assert value.text == "Hello World"
    assert value.entities == [_entity(EntityType.BOLD, 0, 5), _entity(EntityType.ITALIC, 6, 5)]


def test_fmt_matches_helper_composition():
    """
    Markers and helpers describe the same value.
    """
    helper = FormattedString.bold("Hello").plain(" ").italic("World")
    assert fmt(b, "Hello", b, " ", i, "World", i) == helper


def test_closer_payload_is_discarded():
    value = fmt(link("https://a"), "site", link("https://b"))
    assert value.entities == [_entity(EntityType.TEXT_LINK, 0, 4, url="https://a")]


def test_repeated_markers_toggle_in_order():
    """
    A second marker of the same type closes the first pending one.
    """
    value = fmt(b, "a", b, "b", b, "c", b)
    assert value.entities == [_entity(EntityType.BOLD, 0, 1), _entity(EntityType.BOLD, 2, 1)]


def test_pending_entities_close_at_end():
    value = fmt(u, "under", b, "both")
    assert value.text == "underboth"
    assert value.entities == [_entity(EntityType.UNDERLINE, 0, 9), _entity(EntityType.BOLD, 5, 4)]


def test_crossing_markers_are_not_validated():
    value = fmt(b, "a", i, "b", b, "c", i)
    assert value.entities == [_entity(EntityType.BOLD, 0, 2), _entity(EntityType.ITALIC, 1, 2)]


def test_empty_entity_is_kept():
    assert fmt("x", b, b, "y").entities == [_entity(EntityType.BOLD, 1, 0)]


def test_fragments_keep_their_entities():
    inner = FormattedString.italic("in")
    value = fmt("<", b, inner, b, ">")
    assert value.text == "<in>"
    assert value == FormattedString("<in>", [_entity(EntityType.BOLD, 1, 2), _entity(EntityType.ITALIC, 1, 2)])


def test_payload_markers():
    value = fmt(pre("python"), "x = 1", pre, mention({"id": 3}), "Bo", mention)
    assert value.entities == [
        _entity(EntityType.PRE, 0, 5, language="python"),
        _entity(EntityType.TEXT_MENTION, 5, 2, user=User(id=3)),
    ]


def test_non_text_parts_render_with_str():
    assert fmt("n=", 5).text == "n=5"


def test_builder_reports_open_state():
    builder = FormattedStringBuilder()
    builder.add_marker(EntityTag(type=EntityType.CODE))
    assert builder.is_open(EntityType.CODE)
    builder.add_text("ab")
    assert builder.length == 2
    builder.add_marker(EntityTag(type=EntityType.CODE))
    assert not builder.is_open(EntityType.CODE)
    assert builder.build().entities == [_entity(EntityType.CODE, 0, 2)]


def test_tag_factory_repr():
    assert repr(TagFactory(EntityType.SPOILER)) == "TagFactory('spoiler')"
