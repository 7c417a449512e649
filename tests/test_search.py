"""
Search and replacement tests.
"""

from __future__ import annotations

from telefmt import FormattedString, find, find_all, replace, replace_all
from telefmt.models import EntityType, MessageEntity

SMILE = "\U0001F600"


def _entity(entity_type: EntityType, offset: int, length: int, **payload) -> MessageEntity:
    return MessageEntity(type=entity_type, offset=offset, length=length, **payload)


def test_find_is_case_sensitive():
    source = FormattedString("Hello world, hello universe")
    assert source.find("hello") == 13
    assert find(source, "Hello") == 0
    assert source.find("planet") == -1


def test_find_compares_entities():
    """
    A plain pattern does not match formatted text and vice versa.
    """
    source = FormattedString("ab ").bold("ab")
    assert source.find(FormattedString.bold("ab")) == 3
    assert source.find("ab") == 0
    assert FormattedString("ab").find(FormattedString.bold("ab")) == -1


def test_find_requires_entities_to_fit_range():
    source = FormattedString.bold("abcd")
    assert source.find(FormattedString.bold("bc")) == 1
    assert source.find("bc") == -1


def test_find_edge_cases():
    source = FormattedString("abc")
    assert source.find("") == 0
    assert source.find("abcd") == -1
    assert FormattedString().find("") == 0


def test_find_counts_code_units():
    source = FormattedString(f"{SMILE}x{SMILE}x")
    assert source.find("x") == 2
    assert source.find_all("x") == [2, 5]


def test_find_all_overlapping():
    source = FormattedString("aaaa")
    assert find_all(source, "aa") == [0, 2]
    assert find_all(source, "aa", overlapping=True) == [0, 1, 2]
    assert source.find_all("b") == []


def test_starts_and_ends_with():
    source = FormattedString.bold("Hi").plain(" there")
    assert source.starts_with(FormattedString.bold("Hi"))
    assert not source.starts_with("Hi")
    assert source.ends_with("there")
    assert source.starts_with("")
    assert not source.ends_with("x" * 20)


def test_replace_splices_replacement_entities():
    source = FormattedString.bold("Hello bolded world")
    result = source.replace(FormattedString.bold("bolded"), FormattedString.italic("italics"))
    assert result.text == "Hello italics world"
    assert result.entities == [
        _entity(EntityType.BOLD, 0, 6),
        _entity(EntityType.ITALIC, 6, 7),
        _entity(EntityType.BOLD, 13, 6),
    ]


def test_replace_consolidates_matching_neighbours():
    source = FormattedString.bold("one two")
    result = replace(source, FormattedString.bold("two"), FormattedString.bold("three"))
    assert result == FormattedString.bold("one three")


def test_replace_first_only():
    source = FormattedString("a-b-c")
    assert source.replace("-", "+").text == "a+b-c"


def test_replace_without_match_is_unchanged():
    source = FormattedString.bold("abc")
    assert source.replace("x", "y") == source
    assert source.replace_all("abc", "y") == source


def test_replace_all():
    source = FormattedString("a-b-c")
    result = replace_all(source, "-", FormattedString.code("::"))
    assert result.text == "a::b::c"
    assert result.entities == [_entity(EntityType.CODE, 1, 2), _entity(EntityType.CODE, 4, 2)]


def test_replace_all_is_non_overlapping():
    assert FormattedString("aaa").replace_all("aa", "b").text == "ba"


def test_find_ignores_empty_entity_after_window():
    source = FormattedString("ab", [_entity(EntityType.BOLD, 1, 0)])
    assert source.find("a") == 0
    assert source.find("b") == -1
    assert source.find(FormattedString("b", [_entity(EntityType.BOLD, 0, 0)])) == 1
