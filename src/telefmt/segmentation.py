"""
Splitting formatted text on separators.
"""

from __future__ import annotations

from typing import List

from .formatted import FormattedString, as_formatted
from .search import find_all, find_all_by_text
from .units import unit_length


def _split_at(source: FormattedString, offsets: List[int], separator_length: int) -> List[FormattedString]:
    if not offsets:
        return [FormattedString(source.raw_text, source.raw_entities)]
    segments: List[FormattedString] = []
    cursor = 0
    for offset in offsets:
        segments.append(source.slice(cursor, offset))
        cursor = offset + separator_length
    segments.append(source.slice(cursor))
    return segments


def _split_units(source: FormattedString) -> List[FormattedString]:
    total = source.length
    if total == 0:
        return [FormattedString()]
    return [source.slice(position, position + 1) for position in range(total)]


def split(source: FormattedString, separator: object) -> List[FormattedString]:
    """
    Split formatted text on exact matches of a separator.

    A match requires both the separator text and its entities to be equal to
    the source range. Matches are non-overlapping; adjacent matches or matches
    at either end yield empty segments. An empty separator splits into one
    segment per code unit.

    :param source: Text to split.
    :type source: FormattedString
    :param separator: Text-renderable separator.
    :type separator: object
    :return: Segments in order; the source alone when nothing matches.
    :rtype: list[FormattedString]
    """
    separator = as_formatted(separator)
    if separator.length == 0:
        return _split_units(source)
    return _split_at(source, find_all(source, separator), separator.length)


def split_by_text(source: FormattedString, separator: object) -> List[FormattedString]:
    """
    Split formatted text on the separator's text, ignoring entities.

    Entities over the matched separator text are dropped with it; entities in
    the surrounding segments are kept as sliced.

    :param source: Text to split.
    :type source: FormattedString
    :param separator: Text-renderable separator; only its text is used.
    :type separator: object
    :return: Segments in order; the source alone when nothing matches.
    :rtype: list[FormattedString]
    """
    separator_text = as_formatted(separator).raw_text
    if unit_length(separator_text) == 0:
        return _split_units(source)
    offsets = find_all_by_text(source, separator_text)
    return _split_at(source, offsets, unit_length(separator_text))
