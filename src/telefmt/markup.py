"""
HTML-like markup parsing into formatted text.

The parser is a single-pass scanner with four states (text, character
reference, tag open, tag body). It never fails: unknown tags, tags missing a
mandatory attribute and unknown character references are kept as literal
text. Recognized tags become markers fed to
:class:`telefmt.builder.FormattedStringBuilder`, which owns every offset.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .builder import FormattedStringBuilder
from .constants import (
    EMOJI_ID_ATTRIBUTE,
    EXPANDABLE_ATTRIBUTE,
    LINK_URL_ATTRIBUTE,
    NAMED_CHARACTER_REFERENCES,
    PRE_LANGUAGE_ATTRIBUTE,
    SPOILER_SPAN_CLASS,
    TAG_ENTITY_TYPES,
)
from .formatted import FormattedString
from .models import EntityTag, EntityType

logger = logging.getLogger(__name__)

_TAG_NAME_PATTERN = re.compile(r"(\S*)(.*)", re.DOTALL)
_ATTRIBUTE_PATTERN = re.compile(
    r"""([^\s="'<>/]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?"""
)
_REFERENCE_NAME_PATTERN = re.compile(r"[A-Za-z0-9#]")
_DECIMAL_REFERENCE_PATTERN = re.compile(r"#([0-9]+)")
_HEX_REFERENCE_PATTERN = re.compile(r"#[xX]([0-9A-Fa-f]+)")
_ATTRIBUTE_REFERENCE_PATTERN = re.compile(r"&([A-Za-z]+);")


class MarkupParserConfig(BaseModel):
    """
    Options for :func:`parse_markup`.

    :param lowercase_tag_names: Match tag and attribute names case-insensitively.
    :type lowercase_tag_names: bool
    :param decode_numeric_references: Decode ``&#NN;`` and ``&#xHH;`` references
        instead of keeping them literally.
    :type decode_numeric_references: bool
    :param drop_unopened_closers: Drop a recognized closing tag that has no
        pending open entity. When False such closers are kept as literal text,
        like unknown tags.
    :type drop_unopened_closers: bool
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    lowercase_tag_names: bool = True
    decode_numeric_references: bool = False
    drop_unopened_closers: bool = True


class _ScannerState(Enum):
    TEXT = "text"
    ESCAPED_ENTITY = "escaped_entity"
    TAG_OPEN = "tag_open"
    TAG_BODY = "tag_body"


class _MarkupScanner:
    def __init__(self, config: MarkupParserConfig) -> None:
        self._config = config
        self._builder = FormattedStringBuilder()
        self._state = _ScannerState.TEXT
        self._text: List[str] = []
        self._reference: List[str] = []
        self._tag: List[str] = []

    def run(self, markup: str) -> FormattedString:
        for char in markup:
            self._feed(char)
        self._finish()
        return self._builder.build()

    def _feed(self, char: str) -> None:
        state = self._state
        if state is _ScannerState.TEXT:
            self._feed_text(char)
        elif state is _ScannerState.ESCAPED_ENTITY:
            self._feed_reference(char)
        elif state is _ScannerState.TAG_OPEN:
            self._feed_tag_open(char)
        else:
            self._feed_tag_body(char)

    def _feed_text(self, char: str) -> None:
        if char == "<":
            self._state = _ScannerState.TAG_OPEN
        elif char == "&":
            self._reference = []
            self._state = _ScannerState.ESCAPED_ENTITY
        else:
            self._text.append(char)

    def _feed_reference(self, char: str) -> None:
        if char == ";":
            name = "".join(self._reference)
            decoded = self._decode_reference(name)
            if decoded is None:
                logger.debug("Unknown character reference kept as text: &%s;", name)
                self._text.append(f"&{name};")
            else:
                self._text.append(decoded)
            self._state = _ScannerState.TEXT
        elif char == "&":
            self._text.append("&" + "".join(self._reference))
            self._reference = []
        elif _REFERENCE_NAME_PATTERN.fullmatch(char):
            self._reference.append(char)
        else:
            self._text.append("&" + "".join(self._reference))
            self._state = _ScannerState.TEXT
            self._feed_text(char)

    def _feed_tag_open(self, char: str) -> None:
        if char == "<":
            self._text.append("<")
        elif char == ">":
            self._text.append("<>")
            self._state = _ScannerState.TEXT
        else:
            self._tag = [char]
            self._state = _ScannerState.TAG_BODY

    def _feed_tag_body(self, char: str) -> None:
        if char == ">":
            self._handle_tag("".join(self._tag))
            self._tag = []
            self._state = _ScannerState.TEXT
        else:
            self._tag.append(char)

    def _finish(self) -> None:
        if self._state is _ScannerState.ESCAPED_ENTITY:
            self._text.append("&" + "".join(self._reference))
        elif self._state is _ScannerState.TAG_OPEN:
            self._text.append("<")
        elif self._state is _ScannerState.TAG_BODY:
            self._text.append("<" + "".join(self._tag))
        self._state = _ScannerState.TEXT
        self._flush_text()

    def _flush_text(self) -> None:
        if self._text:
            self._builder.add_text("".join(self._text))
            self._text = []

    def _emit_marker(self, tag: EntityTag) -> None:
        self._flush_text()
        self._builder.add_marker(tag)

    def _keep_literal(self, content: str, reason: str) -> None:
        logger.debug("Markup tag kept as text (%s): <%s>", reason, content)
        self._text.append(f"<{content}>")

    def _handle_tag(self, content: str) -> None:
        closing = content.startswith("/")
        body = content[1:] if closing else content
        match = _TAG_NAME_PATTERN.match(body)
        name = match.group(1)
        if self._config.lowercase_tag_names:
            name = name.lower()
        if closing:
            self._handle_closing_tag(content, name)
            return
        tag = self._opening_tag(name, self._parse_attributes(match.group(2)))
        if tag is None:
            self._keep_literal(content, "unrecognized tag")
            return
        self._emit_marker(tag)

    def _handle_closing_tag(self, content: str, name: str) -> None:
        entity_type = self._closing_entity_type(name)
        if entity_type is None:
            self._keep_literal(content, "unrecognized tag")
            return
        if not self._builder.is_open(entity_type):
            if self._config.drop_unopened_closers:
                logger.debug("Dropped closing tag without an open entity: <%s>", content)
                return
            self._keep_literal(content, "closing tag without an open entity")
            return
        self._emit_marker(EntityTag(type=entity_type))

    def _closing_entity_type(self, name: str) -> Optional[EntityType]:
        if name == "blockquote":
            if self._builder.is_open(EntityType.BLOCKQUOTE):
                return EntityType.BLOCKQUOTE
            if self._builder.is_open(EntityType.EXPANDABLE_BLOCKQUOTE):
                return EntityType.EXPANDABLE_BLOCKQUOTE
            return EntityType.BLOCKQUOTE
        return TAG_ENTITY_TYPES.get(name)

    def _opening_tag(self, name: str, attributes: Dict[str, str]) -> Optional[EntityTag]:
        entity_type = TAG_ENTITY_TYPES.get(name)
        if entity_type is None:
            return None
        if name == "span":
            classes = attributes.get("class", "").split()
            if SPOILER_SPAN_CLASS not in classes:
                return None
            return EntityTag(type=EntityType.SPOILER)
        if entity_type == EntityType.TEXT_LINK:
            url = attributes.get(LINK_URL_ATTRIBUTE)
            if not url:
                return None
            return EntityTag(type=entity_type, url=url)
        if entity_type == EntityType.CUSTOM_EMOJI:
            custom_emoji_id = attributes.get(EMOJI_ID_ATTRIBUTE)
            if not custom_emoji_id:
                return None
            return EntityTag(type=entity_type, custom_emoji_id=custom_emoji_id)
        if entity_type == EntityType.PRE:
            return EntityTag(type=entity_type, language=attributes.get(PRE_LANGUAGE_ATTRIBUTE) or None)
        if entity_type == EntityType.BLOCKQUOTE and EXPANDABLE_ATTRIBUTE in attributes:
            return EntityTag(type=EntityType.EXPANDABLE_BLOCKQUOTE)
        return EntityTag(type=entity_type)

    def _parse_attributes(self, attr_text: str) -> Dict[str, str]:
        attributes: Dict[str, str] = {}
        for attr_match in _ATTRIBUTE_PATTERN.finditer(attr_text):
            name = attr_match.group(1)
            if self._config.lowercase_tag_names:
                name = name.lower()
            value = next(
                (group for group in attr_match.group(2, 3, 4) if group is not None), ""
            )
            attributes.setdefault(name, _decode_attribute_references(value))
        return attributes

    def _decode_reference(self, name: str) -> Optional[str]:
        decoded = NAMED_CHARACTER_REFERENCES.get(name)
        if decoded is not None or not self._config.decode_numeric_references:
            return decoded
        match = _DECIMAL_REFERENCE_PATTERN.fullmatch(name)
        if match is not None:
            return _code_point(int(match.group(1)))
        match = _HEX_REFERENCE_PATTERN.fullmatch(name)
        if match is not None:
            return _code_point(int(match.group(1), 16))
        return None


def _code_point(value: int) -> Optional[str]:
    if value > 0x10FFFF:
        return None
    return chr(value)


def _decode_attribute_references(value: str) -> str:
    return _ATTRIBUTE_REFERENCE_PATTERN.sub(
        lambda match: NAMED_CHARACTER_REFERENCES.get(match.group(1), match.group(0)), value
    )


def parse_markup(markup: str, *, config: Optional[MarkupParserConfig] = None) -> FormattedString:
    """
    Parse HTML-like markup into formatted text.

    Recognized tags: ``b``/``strong``, ``i``/``em``, ``u``/``ins``,
    ``s``/``strike``/``del``, ``code``, ``pre`` (optional ``language``),
    ``a`` (mandatory ``href``), ``tg-spoiler`` or ``span class="tg-spoiler"``,
    ``blockquote`` (optional ``expandable``) and ``tg-emoji`` (mandatory
    ``emoji-id``). The references ``&amp;``, ``&lt;``, ``&gt;`` and ``&quot;``
    are decoded. Entities left open at the end close at the end of the text.

    :param markup: Markup text.
    :type markup: str
    :param config: Optional parser options.
    :type config: MarkupParserConfig or None
    :return: Parsed formatted text.
    :rtype: FormattedString
    """
    scanner = _MarkupScanner(config or MarkupParserConfig())
    return scanner.run(markup)
