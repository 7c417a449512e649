"""
Serialization of formatted text into Bot API request payloads.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from .formatted import as_formatted

TEXT_FIELDS = ("text", "entities")
CAPTION_FIELDS = ("caption", "caption_entities")
EXPLANATION_FIELDS = ("explanation", "explanation_entities")
MESSAGE_TEXT_FIELDS = ("message_text", "entities")

TEXT_METHODS = frozenset({"editMessageText", "sendMessage"})
CAPTION_METHODS = frozenset(
    {
        "copyMessage",
        "editMessageCaption",
        "sendAnimation",
        "sendAudio",
        "sendDocument",
        "sendPhoto",
        "sendVideo",
        "sendVoice",
    }
)
# Media methods carry one caption per input media item.
MEDIA_METHODS = frozenset({"editMessageMedia", "sendMediaGroup"})
ALBUM_METHODS = frozenset({"sendMediaGroup"})
MEDIA_FIELD = "media"
EXPLANATION_METHODS = frozenset({"sendPoll"})
INPUT_MESSAGE_CONTENT = "inputMessageContent"


def payload_fields(method: str) -> Tuple[str, str]:
    """
    Return the text and entity field names used by a Bot API method.

    :param method: Bot API method name, or ``inputMessageContent``.
    :type method: str
    :return: ``(text field, entities field)``.
    :rtype: tuple[str, str]
    """
    if method in CAPTION_METHODS or method in MEDIA_METHODS:
        return CAPTION_FIELDS
    if method in EXPLANATION_METHODS:
        return EXPLANATION_FIELDS
    if method == INPUT_MESSAGE_CONTENT:
        return MESSAGE_TEXT_FIELDS
    return TEXT_FIELDS


def _media_with_caption(media: Any, fragment: Dict[str, Any], many: bool) -> Any:
    if media is None:
        return [dict(fragment)] if many else dict(fragment)
    items = list(media) if many else [media]
    if not items:
        items = [{}]
    first = dict(items[0])
    collisions = sorted(set(fragment) & set(first))
    if collisions:
        raise ValueError(f"Media caption fields are set by the formatted value: {', '.join(collisions)}")
    first.update(fragment)
    items[0] = first
    return items if many else first


def build_payload(method: str, value: object, **extra: Any) -> Dict[str, Any]:
    """
    Build the request fields for sending formatted text with a method.

    The entity list is omitted when the value carries no entities. Extra
    keyword arguments are copied into the payload unchanged and may not
    override the text fields. For media methods the caption pair is written
    into the ``media`` field instead: the single input media of
    ``editMessageMedia``, or the first item of the ``sendMediaGroup`` album.
    A ``media`` extra is merged with the caption; without one a caption-only
    item is created.

    :param method: Bot API method name.
    :type method: str
    :param value: Text-renderable value.
    :type value: object
    :param extra: Additional request fields such as ``chat_id``.
    :type extra: Any
    :return: Request payload mapping.
    :rtype: dict[str, Any]
    :raises ValueError: If an extra field collides with a text field.
    """
    text_field, entities_field = payload_fields(method)
    formatted = as_formatted(value)
    fragment = formatted.to_dict(text_field=text_field, entities_field=entities_field)
    if not fragment[entities_field]:
        del fragment[entities_field]
    payload: Dict[str, Any] = dict(extra)
    if method in MEDIA_METHODS:
        payload[MEDIA_FIELD] = _media_with_caption(
            extra.get(MEDIA_FIELD), fragment, many=method in ALBUM_METHODS
        )
        return payload
    collisions = sorted({text_field, entities_field} & set(extra))
    if collisions:
        raise ValueError(f"Payload fields are set by the formatted value: {', '.join(collisions)}")
    payload.update(fragment)
    return payload
