"""
Immutable formatted text: plain text plus an out-of-band entity bag.
"""

from __future__ import annotations

import types
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .constants import MESSAGE_LINK_TEMPLATE, SUPERGROUP_ID_PREFIX, USER_LINK_TEMPLATE
from .entities import consolidate_entities, is_entities_equal, sort_entities
from .models import EntityTag, EntityType, MessageEntity, User
from .units import normalize_text, slice_units, unit_length

EntityLike = Union[MessageEntity, Mapping[str, Any]]

_TEXT_FIELD_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("text", "entities"),
    ("caption", "caption_entities"),
    ("explanation", "explanation_entities"),
    ("message_text", "entities"),
)


def coerce_entity(entity: EntityLike) -> MessageEntity:
    """
    Accept a model or a wire mapping and return a validated entity.

    :param entity: Entity model or ``{type, offset, length, ...}`` mapping.
    :type entity: MessageEntity or Mapping[str, Any]
    :return: Entity model.
    :rtype: MessageEntity
    :raises pydantic.ValidationError: If the mapping is not a valid entity.
    """
    if isinstance(entity, MessageEntity):
        return entity
    return MessageEntity.model_validate(dict(entity))


def _text_with_entities(value: object) -> Optional[Tuple[object, object]]:
    if isinstance(value, Mapping):
        for text_field, entities_field in _TEXT_FIELD_PAIRS:
            if text_field in value:
                return value[text_field], value.get(entities_field)
        return None
    for text_field, entities_field in _TEXT_FIELD_PAIRS:
        if hasattr(value, text_field) and hasattr(value, entities_field):
            return getattr(value, text_field), getattr(value, entities_field)
    return None


def as_formatted(value: object) -> "FormattedString":
    """
    Render any value as formatted text.

    Formatted strings are returned unchanged. Mappings and objects exposing a
    text and entity pair (``text``/``entities``, ``caption``/``caption_entities``
    and friends) contribute both parts. Anything else is rendered with ``str``
    and carries no entities.

    :param value: Value to render.
    :type value: object
    :return: Formatted text.
    :rtype: FormattedString
    """
    if isinstance(value, FormattedString):
        return value
    if isinstance(value, str):
        return FormattedString(value)
    pair = _text_with_entities(value)
    if pair is None:
        return FormattedString(str(value))
    text, entities = pair
    if isinstance(text, FormattedString):
        return text
    return FormattedString(str(text), entities or [])


class _formatter:
    """
    Method usable on the class (builds a new value) or on an instance (appends).
    """

    def __init__(self, func: Callable[..., "FormattedString"]) -> None:
        self._func = func
        self.__doc__ = func.__doc__
        self.__name__ = func.__name__

    def __get__(self, instance: Optional["FormattedString"], owner: type) -> Callable[..., Any]:
        receiver = instance if instance is not None else owner()
        return types.MethodType(self._func, receiver)


class FormattedString:
    """
    Immutable pair of text and formatting entities.

    Offsets and lengths are counted in UTF-16 code units. The entity bag is
    unordered; :meth:`__eq__` compares it in canonical order. Every operation
    returns a new value.

    The ``text``/``caption``/``explanation``/``message_text`` properties and the
    ``entities``/``caption_entities``/``explanation_entities`` properties are
    views over the same underlying pair.

    :param text: Plain text.
    :type text: str
    :param entities: Entities over the text, as models or wire mappings.
    :type entities: Iterable[MessageEntity or Mapping] or None
    """

    __slots__ = ("_text", "_entities")

    def __init__(self, text: str = "", entities: Optional[Iterable[EntityLike]] = None) -> None:
        self._text = normalize_text(str(text))
        self._entities: Tuple[MessageEntity, ...] = tuple(
            coerce_entity(entity) for entity in entities or ()
        )

    # Views

    @property
    def raw_text(self) -> str:
        return self._text

    @property
    def text(self) -> str:
        return self._text

    @property
    def caption(self) -> str:
        return self._text

    @property
    def explanation(self) -> str:
        return self._text

    @property
    def message_text(self) -> str:
        return self._text

    @property
    def raw_entities(self) -> List[MessageEntity]:
        return list(self._entities)

    @property
    def entities(self) -> List[MessageEntity]:
        return list(self._entities)

    @property
    def caption_entities(self) -> List[MessageEntity]:
        return list(self._entities)

    @property
    def explanation_entities(self) -> List[MessageEntity]:
        return list(self._entities)

    @property
    def length(self) -> int:
        """
        Text length in UTF-16 code units.
        """
        return unit_length(self._text)

    def __len__(self) -> int:
        return self.length

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"FormattedString({self._text!r}, {[entity.to_dict() for entity in self._entities]!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormattedString):
            return NotImplemented
        return self._text == other._text and is_entities_equal(self._entities, other._entities)

    __hash__ = None  # type: ignore[assignment]

    def __add__(self, other: object) -> "FormattedString":
        return self.concat(other)

    def __radd__(self, other: object) -> "FormattedString":
        return as_formatted(other).concat(self)

    # Composition

    def concat(self, *others: object) -> "FormattedString":
        """
        Append fragments and merge adjacent similar entities.

        ``bold("Hello").concat(bold("World"))`` carries a single bold entity
        over ``HelloWorld``. The result lists entities in canonical order.

        :param others: Text-renderable fragments.
        :type others: object
        :return: Concatenated value.
        :rtype: FormattedString
        """
        return self._splice(*others).consolidate()

    def _splice(self, *others: object) -> "FormattedString":
        parts = [self._text]
        entities = list(self._entities)
        offset = self.length
        for other in others:
            fragment = as_formatted(other)
            parts.append(fragment._text)
            entities.extend(entity.shifted(offset) for entity in fragment._entities)
            offset += fragment.length
        return FormattedString("".join(parts), entities)

    @classmethod
    def join(cls, items: Sequence[object], separator: Optional[object] = None) -> "FormattedString":
        """
        Concatenate fragments with an optional separator and consolidate entities.

        Adjacent similar entities from neighbouring fragments (and from the
        separator) merge into one run. A single item is returned as is.

        :param items: Text-renderable fragments.
        :type items: Sequence[object]
        :param separator: Optional text-renderable separator.
        :type separator: object or None
        :return: Joined value.
        :rtype: FormattedString
        """
        if not items:
            return cls()
        if len(items) == 1:
            return as_formatted(items[0])
        pieces: List[object] = []
        for index, item in enumerate(items):
            if index and separator is not None:
                pieces.append(separator)
            pieces.append(item)
        return cls()._splice(*pieces).consolidate()

    def consolidate(self) -> "FormattedString":
        """
        Return a copy with overlapping or touching similar entities merged.
        """
        return FormattedString(self._text, consolidate_entities(self._entities))

    def sorted(self) -> "FormattedString":
        """
        Return a copy with entities in canonical order.
        """
        return FormattedString(self._text, sort_entities(self._entities))

    def slice(self, start: int = 0, end: Optional[int] = None) -> "FormattedString":
        """
        Extract a code-unit range together with the entities intersecting it.

        Bounds are clamped to the text. Entities are truncated to the range and
        re-based to its start; entities with an empty intersection are dropped.
        A zero-length entity belongs to the slice that starts at or before its
        offset and ends after it, or to the slice ending at the end of the text
        when it sits there, so a cut never duplicates it.

        :param start: Start position in code units.
        :type start: int
        :param end: End position in code units (exclusive). Defaults to the text length.
        :type end: int or None
        :return: Sliced value.
        :rtype: FormattedString
        """
        total = self.length
        start = min(max(start, 0), total)
        end = total if end is None else min(max(end, 0), total)
        end = max(end, start)
        entities: List[MessageEntity] = []
        for entity in self._entities:
            if entity.length == 0:
                if start <= entity.offset < end or entity.offset == end == total:
                    entities.append(entity.shifted(-start))
                continue
            overlap_start = max(entity.offset, start)
            overlap_end = min(entity.end, end)
            if overlap_end <= overlap_start:
                continue
            entities.append(
                entity.model_copy(
                    update={"offset": overlap_start - start, "length": overlap_end - overlap_start}
                )
            )
        return FormattedString(slice_units(self._text, start, end), entities)

    # Matching, mutation and segmentation

    def find(self, pattern: object) -> int:
        """
        Offset of the leftmost exact match of ``pattern``, or ``-1``.
        """
        from .search import find

        return find(self, pattern)

    def find_all(self, pattern: object, overlapping: bool = False) -> List[int]:
        """
        Offsets of every exact match of ``pattern``, left to right.
        """
        from .search import find_all

        return find_all(self, pattern, overlapping=overlapping)

    def starts_with(self, pattern: object) -> bool:
        from .search import starts_with

        return starts_with(self, pattern)

    def ends_with(self, pattern: object) -> bool:
        from .search import ends_with

        return ends_with(self, pattern)

    def replace(self, pattern: object, replacement: object) -> "FormattedString":
        """
        Replace the leftmost exact match of ``pattern`` with ``replacement``.
        """
        from .search import replace

        return replace(self, pattern, replacement)

    def replace_all(self, pattern: object, replacement: object) -> "FormattedString":
        """
        Replace every non-overlapping exact match of ``pattern``.
        """
        from .search import replace_all

        return replace_all(self, pattern, replacement)

    def split(self, separator: object) -> List["FormattedString"]:
        """
        Split on exact (text and entity) matches of ``separator``.
        """
        from .segmentation import split

        return split(self, separator)

    def split_by_text(self, separator: object) -> List["FormattedString"]:
        """
        Split on matches of the separator's text, ignoring entities.
        """
        from .segmentation import split_by_text

        return split_by_text(self, separator)

    # Formatting helpers. On the class each helper builds a new value; on an
    # instance it appends the formatted piece to the receiver.

    def _append_tagged(self, tag: EntityTag, child: object) -> "FormattedString":
        piece = as_formatted(child)
        offset = self.length
        combined = self._splice(piece)
        return FormattedString(
            combined._text, [*combined._entities, tag.at(offset, piece.length)]
        )

    @_formatter
    def plain(self, child: object) -> "FormattedString":
        """
        Append text without adding an entity.
        """
        return self._splice(child)

    @_formatter
    def bold(self, child: object) -> "FormattedString":
        """
        Bold text.
        """
        return self._append_tagged(EntityTag(type=EntityType.BOLD), child)

    b = bold

    @_formatter
    def italic(self, child: object) -> "FormattedString":
        return self._append_tagged(EntityTag(type=EntityType.ITALIC), child)

    i = italic

    @_formatter
    def underline(self, child: object) -> "FormattedString":
        return self._append_tagged(EntityTag(type=EntityType.UNDERLINE), child)

    u = underline

    @_formatter
    def strikethrough(self, child: object) -> "FormattedString":
        return self._append_tagged(EntityTag(type=EntityType.STRIKETHROUGH), child)

    s = strikethrough

    @_formatter
    def spoiler(self, child: object) -> "FormattedString":
        return self._append_tagged(EntityTag(type=EntityType.SPOILER), child)

    @_formatter
    def code(self, child: object) -> "FormattedString":
        """
        Inline monospace text.
        """
        return self._append_tagged(EntityTag(type=EntityType.CODE), child)

    @_formatter
    def pre(self, child: object, language: Optional[str] = None) -> "FormattedString":
        """
        Preformatted code block.

        :param child: Code block content.
        :type child: object
        :param language: Optional programming language of the block.
        :type language: str or None
        :return: Formatted text.
        :rtype: FormattedString
        """
        return self._append_tagged(EntityTag(type=EntityType.PRE, language=language), child)

    @_formatter
    def link(self, child: object, url: str) -> "FormattedString":
        """
        Text linking to ``url``.
        """
        return self._append_tagged(EntityTag(type=EntityType.TEXT_LINK, url=url), child)

    a = link

    @_formatter
    def custom_emoji(self, child: object, custom_emoji_id: str) -> "FormattedString":
        """
        Custom emoji rendered in place of ``child``.

        :param child: Fallback emoji text.
        :type child: object
        :param custom_emoji_id: Custom emoji identifier.
        :type custom_emoji_id: str
        :return: Formatted text.
        :rtype: FormattedString
        """
        return self._append_tagged(
            EntityTag(type=EntityType.CUSTOM_EMOJI, custom_emoji_id=custom_emoji_id), child
        )

    emoji = custom_emoji

    @_formatter
    def mention(self, child: object, user: Union[User, Mapping[str, Any]]) -> "FormattedString":
        """
        Mention of a user record (``text_mention``).
        """
        if not isinstance(user, User):
            user = User.model_validate(dict(user))
        return self._append_tagged(EntityTag(type=EntityType.TEXT_MENTION, user=user), child)

    @_formatter
    def mention_user(self, child: object, user_id: int) -> "FormattedString":
        """
        Mention of a user by identifier, expressed as a ``tg://user`` link.
        """
        return self.link(child, USER_LINK_TEMPLATE.format(user_id=user_id))

    @_formatter
    def link_message(self, child: object, chat_id: int, message_id: int) -> "FormattedString":
        """
        Link to a message in a supergroup or channel.

        Only chat identifiers of the form ``-100<internal id>`` can be linked;
        for any other chat the text is appended without a link.

        :param child: Link text.
        :type child: object
        :param chat_id: Chat identifier.
        :type chat_id: int
        :param message_id: Message identifier.
        :type message_id: int
        :return: Formatted text.
        :rtype: FormattedString
        """
        chat = str(chat_id)
        if not chat.startswith(SUPERGROUP_ID_PREFIX) or len(chat) == len(SUPERGROUP_ID_PREFIX):
            return self.plain(child)
        url = MESSAGE_LINK_TEMPLATE.format(
            chat_id=chat[len(SUPERGROUP_ID_PREFIX) :], message_id=message_id
        )
        return self.link(child, url)

    @_formatter
    def blockquote(self, child: object) -> "FormattedString":
        return self._append_tagged(EntityTag(type=EntityType.BLOCKQUOTE), child)

    @_formatter
    def expandable_blockquote(self, child: object) -> "FormattedString":
        return self._append_tagged(EntityTag(type=EntityType.EXPANDABLE_BLOCKQUOTE), child)

    @_formatter
    def from_html(self, markup: str, config: Optional[Any] = None) -> "FormattedString":
        """
        Parse HTML-like markup and append the result.

        :param markup: Markup text.
        :type markup: str
        :param config: Optional :class:`telefmt.markup.MarkupParserConfig`.
        :type config: MarkupParserConfig or None
        :return: Formatted text.
        :rtype: FormattedString
        """
        from .markup import parse_markup

        parsed = parse_markup(markup, config=config)
        if not self._text and not self._entities:
            return parsed
        return self._splice(parsed)

    # Serialization

    def to_dict(self, text_field: str = "text", entities_field: str = "entities") -> dict:
        """
        Serialize as a message payload fragment.

        :param text_field: Name of the plain text field.
        :type text_field: str
        :param entities_field: Name of the entity list field.
        :type entities_field: str
        :return: Mapping with the text and serialized entities.
        :rtype: dict
        """
        return {
            text_field: self._text,
            entities_field: [entity.to_dict() for entity in sort_entities(self._entities)],
        }
