"""
Pydantic models for message entities.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class EntityType(str, Enum):
    """
    Closed vocabulary of formatting entity types, named as on the wire.
    """

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    SPOILER = "spoiler"
    CODE = "code"
    BLOCKQUOTE = "blockquote"
    EXPANDABLE_BLOCKQUOTE = "expandable_blockquote"
    PRE = "pre"
    TEXT_LINK = "text_link"
    CUSTOM_EMOJI = "custom_emoji"
    TEXT_MENTION = "text_mention"


PAYLOAD_FIELDS: Dict[EntityType, str] = {
    EntityType.PRE: "language",
    EntityType.TEXT_LINK: "url",
    EntityType.CUSTOM_EMOJI: "custom_emoji_id",
    EntityType.TEXT_MENTION: "user",
}


class User(BaseModel):
    """
    Opaque user record carried by ``text_mention`` entities.

    Only ``id`` is required. Unknown fields are preserved and take part in
    similarity comparisons.

    :ivar id: Numeric user identifier.
    :vartype id: int
    :ivar is_bot: Whether the user is a bot.
    :vartype is_bot: bool or None
    :ivar first_name: First name.
    :vartype first_name: str or None
    :ivar last_name: Last name.
    :vartype last_name: str or None
    :ivar username: Username without the leading ``@``.
    :vartype username: str or None
    :ivar language_code: IETF language tag of the user's client.
    :vartype language_code: str or None
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int
    is_bot: Optional[bool] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None
    is_premium: Optional[bool] = None
    added_to_attachment_menu: Optional[bool] = None

    def present_fields(self) -> Dict[str, Any]:
        """
        Return the fields that carry a value.

        :return: Mapping of field name to value, absent fields omitted.
        :rtype: dict[str, Any]
        """
        return self.model_dump(exclude_none=True)


class EntityTag(BaseModel):
    """
    Entity type plus its type-specific payload, without a position.

    Tags are the markers consumed by :func:`telefmt.builder.fmt` and the
    position-independent part of every :class:`MessageEntity`.

    :ivar type: Entity type.
    :vartype type: EntityType
    :ivar url: Link target for ``text_link``.
    :vartype url: str or None
    :ivar language: Code language for ``pre``.
    :vartype language: str or None
    :ivar custom_emoji_id: Emoji identifier for ``custom_emoji``.
    :vartype custom_emoji_id: str or None
    :ivar user: Mentioned user for ``text_mention``.
    :vartype user: User or None
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: EntityType
    url: Optional[str] = None
    language: Optional[str] = None
    custom_emoji_id: Optional[str] = None
    user: Optional[User] = None

    def payload(self) -> Any:
        """
        Return the type-specific payload value, or None for plain types.
        """
        field_name = PAYLOAD_FIELDS.get(self.type)
        if field_name is None:
            return None
        return getattr(self, field_name)

    def at(self, offset: int, length: int) -> "MessageEntity":
        """
        Position this tag over a code-unit range.

        :param offset: Start offset in UTF-16 code units.
        :type offset: int
        :param length: Length in UTF-16 code units.
        :type length: int
        :return: Positioned entity carrying this tag's payload.
        :rtype: MessageEntity
        """
        data = self.model_dump(exclude_none=True)
        data["user"] = self.user
        return MessageEntity(offset=offset, length=length, **data)


class MessageEntity(EntityTag):
    """
    Formatting entity over a range of UTF-16 code units.

    ``offset`` and ``length`` must be non-negative; ``offset + length`` should
    not exceed the host text length, which callers uphold.

    :ivar offset: Start offset in UTF-16 code units.
    :vartype offset: int
    :ivar length: Length in UTF-16 code units.
    :vartype length: int
    """

    offset: int = Field(ge=0)
    length: int = Field(ge=0)

    @property
    def end(self) -> int:
        return self.offset + self.length

    def shifted(self, delta: int) -> "MessageEntity":
        """
        Return a copy moved by ``delta`` code units.
        """
        return self.model_copy(update={"offset": self.offset + delta})

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize as a wire record ``{type, offset, length, ...payload}``.

        :return: JSON-compatible mapping with absent payload fields omitted.
        :rtype: dict[str, Any]
        """
        return self.model_dump(mode="json", exclude_none=True)
