"""
Telefmt public package interface.
"""

from .builder import (
    FormattedStringBuilder,
    TagFactory,
    a,
    b,
    blockquote,
    bold,
    code,
    custom_emoji,
    emoji,
    expandable_blockquote,
    fmt,
    i,
    italic,
    link,
    mention,
    pre,
    s,
    spoiler,
    strikethrough,
    u,
    underline,
)
from .entities import (
    can_consolidate_entities,
    consolidate_entities,
    is_entities_equal,
    is_entity_equal,
    is_entity_similar,
    is_user_similar,
    sort_entities,
)
from .formatted import FormattedString, as_formatted
from .markup import MarkupParserConfig, parse_markup
from .models import EntityTag, EntityType, MessageEntity, User
from .payload import build_payload, payload_fields
from .search import ends_with, find, find_all, replace, replace_all, starts_with
from .segmentation import split, split_by_text

__all__ = [
    "__version__",
    "EntityTag",
    "EntityType",
    "FormattedString",
    "FormattedStringBuilder",
    "MarkupParserConfig",
    "MessageEntity",
    "TagFactory",
    "User",
    "a",
    "as_formatted",
    "b",
    "blockquote",
    "bold",
    "build_payload",
    "can_consolidate_entities",
    "code",
    "consolidate_entities",
    "custom_emoji",
    "emoji",
    "ends_with",
    "expandable_blockquote",
    "find",
    "find_all",
    "fmt",
    "i",
    "is_entities_equal",
    "is_entity_equal",
    "is_entity_similar",
    "is_user_similar",
    "italic",
    "link",
    "mention",
    "parse_markup",
    "payload_fields",
    "pre",
    "replace",
    "replace_all",
    "s",
    "sort_entities",
    "split",
    "split_by_text",
    "spoiler",
    "starts_with",
    "strikethrough",
    "u",
    "underline",
]

__version__ = "0.1.0"
