"""
Shared constants for telefmt.
"""

from .models import EntityType

USER_LINK_TEMPLATE = "tg://user?id={user_id}"
MESSAGE_LINK_TEMPLATE = "https://t.me/c/{chat_id}/{message_id}"
SUPERGROUP_ID_PREFIX = "-100"

# Markup vocabulary. External callers author markup against these names.
TAG_ENTITY_TYPES = {
    "b": EntityType.BOLD,
    "strong": EntityType.BOLD,
    "i": EntityType.ITALIC,
    "em": EntityType.ITALIC,
    "u": EntityType.UNDERLINE,
    "ins": EntityType.UNDERLINE,
    "s": EntityType.STRIKETHROUGH,
    "strike": EntityType.STRIKETHROUGH,
    "del": EntityType.STRIKETHROUGH,
    "code": EntityType.CODE,
    "pre": EntityType.PRE,
    "a": EntityType.TEXT_LINK,
    "tg-spoiler": EntityType.SPOILER,
    "span": EntityType.SPOILER,
    "blockquote": EntityType.BLOCKQUOTE,
    "tg-emoji": EntityType.CUSTOM_EMOJI,
}
SPOILER_SPAN_CLASS = "tg-spoiler"
LINK_URL_ATTRIBUTE = "href"
PRE_LANGUAGE_ATTRIBUTE = "language"
EMOJI_ID_ATTRIBUTE = "emoji-id"
EXPANDABLE_ATTRIBUTE = "expandable"

NAMED_CHARACTER_REFERENCES = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
}
