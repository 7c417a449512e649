"""
Formatted string value tests: views, composition, slicing and helpers.
"""

from __future__ import annotations

import pytest

from telefmt import FormattedString
from telefmt.models import EntityType, MessageEntity, User

SMILE = "\U0001F600"


def _entity(entity_type: EntityType, offset: int, length: int, **payload) -> MessageEntity:
    return MessageEntity(type=entity_type, offset=offset, length=length, **payload)


def test_views_share_text_and_entities():
    """
    Alternate field names expose the same text and entity bag.
    """
    value = FormattedString("hi", [{"type": "bold", "offset": 0, "length": 2}])
    assert value.text == value.caption == value.explanation == value.message_text == "hi"
    assert value.entities == value.caption_entities == value.explanation_entities
    assert value.entities == [_entity(EntityType.BOLD, 0, 2)]
    value.entities.clear()
    assert len(value.raw_entities) == 1


def test_length_counts_code_units():
    assert len(FormattedString(f"a{SMILE}")) == 3
    assert FormattedString().length == 0


def test_equality_is_order_independent():
    first = FormattedString("ab", [_entity(EntityType.BOLD, 0, 1), _entity(EntityType.ITALIC, 1, 1)])
    second = FormattedString("ab", [_entity(EntityType.ITALIC, 1, 1), _entity(EntityType.BOLD, 0, 1)])
    assert first == second
    assert first != FormattedString("ab")
    assert FormattedString("ab") != "ab"


def test_values_are_not_hashable():
    with pytest.raises(TypeError):
        hash(FormattedString("x"))


def test_concat_merges_adjacent_entities():
    """
    Concatenating two bold pieces yields one bold run.
    """
    left = FormattedString.bold("Hello")
    right = FormattedString.bold("World")
    combined = left.concat(right, "!")
    assert combined.text == "HelloWorld!"
    assert combined.entities == [_entity(EntityType.BOLD, 0, 10)]
    assert left.concat() == left
    assert (left + right) == combined.slice(0, 10)
    assert ("x" + left).entities == [_entity(EntityType.BOLD, 1, 5)]


def test_concat_keeps_dissimilar_entities_apart():
    combined = FormattedString.bold("ab").concat(FormattedString.italic("cd"))
    assert combined.entities == [_entity(EntityType.BOLD, 0, 2), _entity(EntityType.ITALIC, 2, 2)]


def test_helpers_append_without_merging():
    value = FormattedString.bold("ab").bold("cd")
    assert value.entities == [_entity(EntityType.BOLD, 0, 2), _entity(EntityType.BOLD, 2, 2)]


def test_join_consolidates_neighbours():
    joined = FormattedString.join([FormattedString.bold("ab"), FormattedString.bold("cd")])
    assert joined.text == "abcd"
    assert joined.entities == [_entity(EntityType.BOLD, 0, 4)]


def test_join_with_separator():
    joined = FormattedString.join(["a", "b", "c"], FormattedString.italic(", "))
    assert joined.text == "a, b, c"
    assert joined.entities == [_entity(EntityType.ITALIC, 1, 2), _entity(EntityType.ITALIC, 4, 2)]


def test_join_edge_cases():
    """
    Joining nothing yields empty text; a single item comes back unchanged.
    """
    assert FormattedString.join([]) == FormattedString()
    single = FormattedString("ab", [_entity(EntityType.BOLD, 0, 1), _entity(EntityType.BOLD, 1, 1)])
    assert FormattedString.join([single]) is single


def test_slice_truncates_and_rebases():
    value = FormattedString("Hello World", [_entity(EntityType.BOLD, 0, 5), _entity(EntityType.ITALIC, 6, 5)])
    part = value.slice(3, 8)
    assert part.text == "lo Wo"
    assert part.entities == [_entity(EntityType.BOLD, 0, 2), _entity(EntityType.ITALIC, 3, 2)]
    assert value.slice(5, 6).entities == []


def test_slice_clamps_bounds():
    value = FormattedString.bold("abc")
    assert value.slice(-4, 99) == value
    assert value.slice(2, 1).text == ""
    assert value.slice(10).text == ""
    assert value.slice() == value


def test_slice_full_range_is_identity():
    value = FormattedString("x").bold(f"y{SMILE}").link("z", "https://z")
    assert value.slice(0, value.length) == value


def test_slice_keeps_zero_length_entity_inside_range():
    value = FormattedString("abc", [_entity(EntityType.BOLD, 1, 0)])
    assert value.slice(1, 3).entities == [_entity(EntityType.BOLD, 0, 0)]
    assert value.slice(2, 3).entities == []


def test_zero_length_entity_lands_in_one_slice():
    """
    An empty entity at a cut point belongs to the slice that starts there.
    """
    value = FormattedString("ab", [_entity(EntityType.BOLD, 1, 0)])
    assert value.slice(0, 1).entities == []
    assert value.slice(1, 2).entities == [_entity(EntityType.BOLD, 0, 0)]
    at_end = FormattedString("ab", [_entity(EntityType.BOLD, 2, 0)])
    assert at_end.slice(0, 2) == at_end
    assert at_end.slice(2).entities == [_entity(EntityType.BOLD, 0, 0)]
    assert at_end.slice(1, 2).entities == [_entity(EntityType.BOLD, 1, 0)]


def test_slice_through_surrogate_pair_rejoins():
    value = FormattedString.bold(SMILE)
    head = value.slice(0, 1)
    tail = value.slice(1)
    assert head.length == 1
    joined = FormattedString.join([head, tail])
    assert joined.text == SMILE
    assert joined.entities == [_entity(EntityType.BOLD, 0, 2)]


def test_class_helper_builds_instance_helper_appends():
    """
    Helpers build a new value on the class and append on an instance.
    """
    built = FormattedString.bold("Hello").plain(" ").italic("World")
    assert built.text == "Hello World"
    assert built.entities == [_entity(EntityType.BOLD, 0, 5), _entity(EntityType.ITALIC, 6, 5)]
    assert FormattedString.b("x") == FormattedString.bold("x")


def test_helpers_attach_payloads():
    value = (
        FormattedString.pre("print(1)", "python")
        .link("site", "https://example.com")
        .custom_emoji("*", "42")
        .mention("Ann", {"id": 7, "first_name": "Ann"})
    )
    assert value.entities == [
        _entity(EntityType.PRE, 0, 8, language="python"),
        _entity(EntityType.TEXT_LINK, 8, 4, url="https://example.com"),
        _entity(EntityType.CUSTOM_EMOJI, 12, 1, custom_emoji_id="42"),
        _entity(EntityType.TEXT_MENTION, 13, 3, user=User(id=7, first_name="Ann")),
    ]


def test_nested_helpers_keep_inner_entities():
    value = FormattedString.bold(FormattedString.italic("ab"))
    assert value == FormattedString("ab", [_entity(EntityType.BOLD, 0, 2), _entity(EntityType.ITALIC, 0, 2)])


def test_blockquote_helpers():
    value = FormattedString.blockquote("q").expandable_blockquote("long")
    assert value.entities == [
        _entity(EntityType.BLOCKQUOTE, 0, 1),
        _entity(EntityType.EXPANDABLE_BLOCKQUOTE, 1, 4),
    ]


def test_mention_user_builds_user_link():
    value = FormattedString.mention_user("Ann", 12345)
    assert value.entities == [_entity(EntityType.TEXT_LINK, 0, 3, url="tg://user?id=12345")]


def test_link_message_for_supergroup():
    value = FormattedString.link_message("see", -1001234567890, 42)
    assert value.entities == [_entity(EntityType.TEXT_LINK, 0, 3, url="https://t.me/c/1234567890/42")]


def test_link_message_for_other_chats_is_plain():
    assert FormattedString.link_message("see", 12345, 1) == FormattedString("see")
    assert FormattedString.link_message("see", -12345, 1) == FormattedString("see")


def test_from_record_pairs():
    """
    Records exposing a caption or text with entities render with both parts.
    """
    record = {"caption": "pic", "caption_entities": [{"type": "italic", "offset": 0, "length": 3}]}
    value = FormattedString("x").plain(record)
    assert value.text == "xpic"
    assert value.entities == [_entity(EntityType.ITALIC, 1, 3)]
    assert FormattedString().plain(12).text == "12"


def test_consolidate_and_sorted_return_copies():
    value = FormattedString("abcd", [_entity(EntityType.BOLD, 2, 2), _entity(EntityType.BOLD, 0, 2)])
    assert value.sorted().raw_entities == [_entity(EntityType.BOLD, 0, 2), _entity(EntityType.BOLD, 2, 2)]
    assert value.consolidate().raw_entities == [_entity(EntityType.BOLD, 0, 4)]
    assert value.raw_entities[0] == _entity(EntityType.BOLD, 2, 2)


def test_to_dict_uses_requested_fields():
    value = FormattedString.bold("hi")
    assert value.to_dict() == {"text": "hi", "entities": [{"type": "bold", "offset": 0, "length": 2}]}
    assert value.to_dict("caption", "caption_entities")["caption"] == "hi"
