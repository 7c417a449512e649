"""
Attribute-aware search and replacement over formatted text.

A pattern matches at an offset when the source text there equals the pattern
text and the source entities sliced to that range are equal, span for span in
canonical order, to the pattern entities.
"""

from __future__ import annotations

from typing import List

from .entities import is_entities_equal
from .formatted import FormattedString, as_formatted
from .units import encode_units

NOT_FOUND = -1


def _match_offsets(
    source: FormattedString,
    pattern: FormattedString,
    *,
    overlapping: bool,
    compare_entities: bool,
    first_only: bool = False,
) -> List[int]:
    pattern_length = pattern.length
    source_length = source.length
    if pattern_length == 0:
        return [0]
    if pattern_length > source_length:
        return []

    source_units = encode_units(source.raw_text)
    pattern_units = encode_units(pattern.raw_text)
    pattern_entities = pattern.raw_entities
    width = len(pattern_units)

    offsets: List[int] = []
    position = 0
    while position <= source_length - pattern_length:
        byte_offset = position * 2
        matched = source_units[byte_offset : byte_offset + width] == pattern_units
        if matched and compare_entities:
            candidate = source.slice(position, position + pattern_length)
            matched = is_entities_equal(candidate.raw_entities, pattern_entities)
        if matched:
            offsets.append(position)
            if first_only:
                break
            position += 1 if overlapping else pattern_length
        else:
            position += 1
    return offsets


def find(source: FormattedString, pattern: object) -> int:
    """
    Locate the leftmost exact match of a pattern.

    An empty pattern matches at offset 0; a pattern longer than the source
    never matches.

    :param source: Text to search.
    :type source: FormattedString
    :param pattern: Text-renderable pattern; plain strings carry no entities.
    :type pattern: object
    :return: Offset in code units, or ``-1`` when not found.
    :rtype: int
    """
    offsets = _match_offsets(
        source, as_formatted(pattern), overlapping=False, compare_entities=True, first_only=True
    )
    return offsets[0] if offsets else NOT_FOUND


def find_all(source: FormattedString, pattern: object, overlapping: bool = False) -> List[int]:
    """
    Locate every exact match of a pattern, left to right.

    :param source: Text to search.
    :type source: FormattedString
    :param pattern: Text-renderable pattern.
    :type pattern: object
    :param overlapping: Advance one code unit after a match instead of skipping
        past it, so that returned matches may overlap.
    :type overlapping: bool
    :return: Match offsets in ascending order, empty when nothing matches.
    :rtype: list[int]
    """
    return _match_offsets(
        source, as_formatted(pattern), overlapping=overlapping, compare_entities=True
    )


def find_all_by_text(source: FormattedString, pattern: object) -> List[int]:
    """
    Locate every non-overlapping match of the pattern text, ignoring entities.
    """
    return _match_offsets(
        source, as_formatted(pattern), overlapping=False, compare_entities=False
    )


def starts_with(source: FormattedString, pattern: object) -> bool:
    """
    Check for an exact match at the start of the source.
    """
    pattern = as_formatted(pattern)
    if pattern.length == 0:
        return True
    if pattern.length > source.length:
        return False
    prefix = source.slice(0, pattern.length)
    return prefix.raw_text == pattern.raw_text and is_entities_equal(
        prefix.raw_entities, pattern.raw_entities
    )


def ends_with(source: FormattedString, pattern: object) -> bool:
    """
    Check for an exact match at the end of the source.
    """
    pattern = as_formatted(pattern)
    if pattern.length == 0:
        return True
    if pattern.length > source.length:
        return False
    suffix = source.slice(source.length - pattern.length)
    return suffix.raw_text == pattern.raw_text and is_entities_equal(
        suffix.raw_entities, pattern.raw_entities
    )


def _replace_at(
    source: FormattedString, offsets: List[int], pattern_length: int, replacement: object
) -> FormattedString:
    if not offsets:
        return FormattedString(source.raw_text, source.raw_entities)
    pieces: List[object] = []
    cursor = 0
    for offset in offsets:
        pieces.append(source.slice(cursor, offset))
        pieces.append(replacement)
        cursor = offset + pattern_length
    pieces.append(source.slice(cursor))
    return FormattedString.join(pieces)


def replace(source: FormattedString, pattern: object, replacement: object) -> FormattedString:
    """
    Replace the leftmost exact match of a pattern.

    The unmatched surroundings are sliced out, the replacement is spliced in
    verbatim and the pieces are joined with entity consolidation. Without a
    match an unchanged copy is returned.

    :param source: Text to edit.
    :type source: FormattedString
    :param pattern: Text-renderable pattern.
    :type pattern: object
    :param replacement: Text-renderable replacement.
    :type replacement: object
    :return: Edited copy.
    :rtype: FormattedString
    """
    pattern = as_formatted(pattern)
    offset = find(source, pattern)
    offsets = [] if offset == NOT_FOUND else [offset]
    return _replace_at(source, offsets, pattern.length, as_formatted(replacement))


def replace_all(source: FormattedString, pattern: object, replacement: object) -> FormattedString:
    """
    Replace every non-overlapping exact match of a pattern.

    :param source: Text to edit.
    :type source: FormattedString
    :param pattern: Text-renderable pattern.
    :type pattern: object
    :param replacement: Text-renderable replacement.
    :type replacement: object
    :return: Edited copy.
    :rtype: FormattedString
    """
    pattern = as_formatted(pattern)
    offsets = find_all(source, pattern, overlapping=False)
    return _replace_at(source, offsets, pattern.length, as_formatted(replacement))
