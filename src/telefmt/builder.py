"""
Composition of formatted text from interleaved fragments and entity markers.
"""

from __future__ import annotations

from collections import defaultdict, deque
from typing import Any, Deque, Dict, List, Optional, Tuple

from .entities import sort_entities
from .formatted import FormattedString, as_formatted
from .models import EntityTag, EntityType, MessageEntity, PAYLOAD_FIELDS, User
from .units import normalize_text, unit_length


class TagFactory:
    """
    Marker factory for one entity type.

    Calling the factory with the type's payload (a URL, language, emoji id or
    user) returns an :class:`~telefmt.models.EntityTag`. The factory itself can
    be passed to :func:`fmt` as a payload-less marker, which is how closers are
    usually written: ``fmt(link("https://example.com"), "site", link)``.

    :param entity_type: Entity type produced by this factory.
    :type entity_type: EntityType
    """

    def __init__(self, entity_type: EntityType) -> None:
        self.entity_type = entity_type
        self._payload_field = PAYLOAD_FIELDS.get(entity_type)

    def __call__(self, payload: Any = None) -> EntityTag:
        if self._payload_field is None or payload is None:
            return EntityTag(type=self.entity_type)
        if self.entity_type == EntityType.TEXT_MENTION and not isinstance(payload, User):
            payload = User.model_validate(dict(payload))
        return EntityTag(type=self.entity_type, **{self._payload_field: payload})

    def __repr__(self) -> str:
        return f"TagFactory({self.entity_type.value!r})"


b = bold = TagFactory(EntityType.BOLD)
i = italic = TagFactory(EntityType.ITALIC)
u = underline = TagFactory(EntityType.UNDERLINE)
s = strikethrough = TagFactory(EntityType.STRIKETHROUGH)
spoiler = TagFactory(EntityType.SPOILER)
code = TagFactory(EntityType.CODE)
pre = TagFactory(EntityType.PRE)
a = link = TagFactory(EntityType.TEXT_LINK)
emoji = custom_emoji = TagFactory(EntityType.CUSTOM_EMOJI)
mention = TagFactory(EntityType.TEXT_MENTION)
blockquote = TagFactory(EntityType.BLOCKQUOTE)
expandable_blockquote = TagFactory(EntityType.EXPANDABLE_BLOCKQUOTE)


def _as_marker(part: object) -> Optional[EntityTag]:
    if isinstance(part, MessageEntity):
        return None
    if isinstance(part, EntityTag):
        return part
    if isinstance(part, TagFactory):
        return part()
    return None


class FormattedStringBuilder:
    """
    Accumulates text and resolves markers into entities.

    Open entities are kept per entity type in a queue of
    ``(opening tag, start offset)`` entries. A marker opens an entry when none
    is pending for its type and otherwise closes the first pending entry. The
    closed entity carries the payload captured when it was opened; a closer's
    own payload is discarded. Nesting validity is never checked.
    """

    def __init__(self) -> None:
        self._parts: List[str] = []
        self._length = 0
        self._entities: List[MessageEntity] = []
        self._open: Dict[EntityType, Deque[Tuple[EntityTag, int]]] = defaultdict(deque)

    @property
    def length(self) -> int:
        return self._length

    def is_open(self, entity_type: EntityType) -> bool:
        return bool(self._open.get(entity_type))

    def add_text(self, text: str) -> None:
        if not text:
            return
        self._parts.append(text)
        self._length += unit_length(text)

    def add_fragment(self, fragment: FormattedString) -> None:
        """
        Splice a fragment verbatim, shifting its entities by the current length.
        """
        offset = self._length
        self._entities.extend(entity.shifted(offset) for entity in fragment.raw_entities)
        self.add_text(fragment.raw_text)

    def add_marker(self, tag: EntityTag) -> None:
        pending = self._open[tag.type]
        if not pending:
            pending.append((tag, self._length))
            return
        opening, start = pending.popleft()
        self._entities.append(opening.at(start, self._length - start))

    def add(self, part: object) -> None:
        marker = _as_marker(part)
        if marker is not None:
            self.add_marker(marker)
        elif isinstance(part, str):
            self.add_text(part)
        else:
            self.add_fragment(as_formatted(part))

    def build(self) -> FormattedString:
        """
        Close every pending entity at the final length and return the result.

        :return: Built value with entities in canonical order.
        :rtype: FormattedString
        """
        entities = list(self._entities)
        for pending in self._open.values():
            for opening, start in pending:
                entities.append(opening.at(start, self._length - start))
        return FormattedString(normalize_text("".join(self._parts)), sort_entities(entities))


def fmt(*parts: object) -> FormattedString:
    """
    Build formatted text from literal fragments and markers.

    Parts are consumed in order. Strings are literal text. Entity markers
    (:class:`~telefmt.models.EntityTag` values or :class:`TagFactory` objects)
    open and close entities. Formatted strings and records exposing a text and
    entity pair are spliced in with their entities shifted and left unmerged.
    Any other value is rendered with ``str``. Entities still open at the end
    close at the final length.

    Example::

        fmt(b, "Hello", b, " ", i, "World", i)

    :param parts: Interleaved fragments and markers.
    :type parts: object
    :return: Built formatted text.
    :rtype: FormattedString
    """
    builder = FormattedStringBuilder()
    for part in parts:
        builder.add(part)
    return builder.build()
