"""
UTF-16 code unit arithmetic over Python strings.

Message entity offsets count UTF-16 code units, while Python strings index
code points. Characters outside the Basic Multilingual Plane occupy two code
units. Slicing through such a character yields a lone surrogate, which is
kept as a single code point so that lengths stay consistent.
"""

from __future__ import annotations

import re

_ENCODING = "utf-16-le"
_ERRORS = "surrogatepass"
_SURROGATE_PATTERN = re.compile("[\ud800-\udfff]")
_ASTRAL_PATTERN = re.compile("[\U00010000-\U0010ffff]")


def encode_units(text: str) -> bytes:
    """
    Encode text as little-endian UTF-16, two bytes per code unit.

    :param text: Text to encode. Lone surrogates are allowed.
    :type text: str
    :return: Encoded bytes.
    :rtype: bytes
    """
    return text.encode(_ENCODING, _ERRORS)


def decode_units(data: bytes) -> str:
    return data.decode(_ENCODING, _ERRORS)


def normalize_text(text: str) -> str:
    """
    Join adjacent surrogate halves into the code point they encode.

    Concatenating two slices taken through a surrogate pair produces two lone
    surrogates; this restores the original character.

    :param text: Text that may contain lone surrogates.
    :type text: str
    :return: Text with valid surrogate pairs combined.
    :rtype: str
    """
    if _SURROGATE_PATTERN.search(text) is None:
        return text
    return decode_units(encode_units(text))


def unit_length(text: str) -> int:
    """
    Count the UTF-16 code units of a string.

    :param text: Text to measure.
    :type text: str
    :return: Number of UTF-16 code units.
    :rtype: int
    """
    return len(text) + len(_ASTRAL_PATTERN.findall(text))


def is_narrow(text: str) -> bool:
    return _ASTRAL_PATTERN.search(text) is None


def slice_units(text: str, start: int, end: int) -> str:
    """
    Slice a string by UTF-16 code unit positions.

    Bounds are expected to be already clamped to ``0 <= start <= end <= length``.

    :param text: Source text.
    :type text: str
    :param start: Start position in code units.
    :type start: int
    :param end: End position in code units (exclusive).
    :type end: int
    :return: Substring covering the requested code units.
    :rtype: str
    """
    if end <= start:
        return ""
    if is_narrow(text):
        return text[start:end]
    return decode_units(encode_units(text)[2 * start : 2 * end])
