"""
Entity algebra: similarity, equality, canonical ordering and consolidation.
"""

from __future__ import annotations

import json
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import EntityTag, EntityType, MessageEntity, User


def is_user_similar(user1: User, user2: User) -> bool:
    """
    Compare two users field by field, ignoring fields absent on both sides.

    A field present on one user and absent on the other is a mismatch.

    :param user1: First user.
    :type user1: User
    :param user2: Second user.
    :type user2: User
    :return: True if all present fields agree.
    :rtype: bool
    """
    return user1.present_fields() == user2.present_fields()


def is_entity_similar(entity1: EntityTag, entity2: EntityTag) -> bool:
    """
    Check whether two entities share type and payload, ignoring position.

    An absent ``pre`` language and an empty one are treated as equal.

    :param entity1: First entity or tag.
    :type entity1: EntityTag
    :param entity2: Second entity or tag.
    :type entity2: EntityTag
    :return: True if the entities are similar.
    :rtype: bool
    """
    if entity1.type != entity2.type:
        return False
    if entity1.type == EntityType.TEXT_LINK:
        return entity1.url == entity2.url
    if entity1.type == EntityType.PRE:
        return (entity1.language or "") == (entity2.language or "")
    if entity1.type == EntityType.CUSTOM_EMOJI:
        return entity1.custom_emoji_id == entity2.custom_emoji_id
    if entity1.type == EntityType.TEXT_MENTION:
        if entity1.user is None or entity2.user is None:
            return entity1.user is None and entity2.user is None
        return is_user_similar(entity1.user, entity2.user)
    return True


def is_entity_equal(entity1: MessageEntity, entity2: MessageEntity) -> bool:
    """
    Check similarity plus identical offset and length.
    """
    if not is_entity_similar(entity1, entity2):
        return False
    return entity1.offset == entity2.offset and entity1.length == entity2.length


def is_entities_equal(
    entities1: Sequence[MessageEntity], entities2: Sequence[MessageEntity]
) -> bool:
    """
    Compare two entity bags span for span in canonical order.

    :param entities1: First entity bag.
    :type entities1: Sequence[MessageEntity]
    :param entities2: Second entity bag.
    :type entities2: Sequence[MessageEntity]
    :return: True if both bags hold pairwise equal entities.
    :rtype: bool
    """
    if len(entities1) != len(entities2):
        return False
    ordered1 = sort_entities(entities1)
    ordered2 = sort_entities(entities2)
    return all(
        is_entity_equal(entity1, entity2) for entity1, entity2 in zip(ordered1, ordered2)
    )


def _payload_sort_key(entity: EntityTag) -> Tuple[object, ...]:
    if entity.type == EntityType.TEXT_LINK:
        return (entity.url or "",)
    if entity.type == EntityType.PRE:
        return (entity.language or "",)
    if entity.type == EntityType.CUSTOM_EMOJI:
        return (entity.custom_emoji_id or "",)
    if entity.type == EntityType.TEXT_MENTION:
        user = entity.user
        if user is None:
            return (-1, "", "", "", "")
        return (
            user.id,
            user.username or "",
            user.first_name or "",
            user.last_name or "",
            json.dumps(user.present_fields(), sort_keys=True, default=str),
        )
    return ()


def entity_sort_key(entity: MessageEntity) -> Tuple[object, ...]:
    """
    Canonical ordering key: offset, length, type name, then payload.

    :param entity: Entity to order.
    :type entity: MessageEntity
    :return: Sort key tuple.
    :rtype: tuple
    """
    return (entity.offset, entity.length, entity.type.value, _payload_sort_key(entity))


def sort_entities(entities: Iterable[MessageEntity]) -> List[MessageEntity]:
    """
    Return a new list of entities in canonical order.
    """
    return sorted(entities, key=entity_sort_key)


def similarity_key(entity: EntityTag) -> Tuple[str, str]:
    """
    Hashable key shared by exactly the entities that are similar.

    :param entity: Entity or tag.
    :type entity: EntityTag
    :return: Key of type name and serialized payload.
    :rtype: tuple[str, str]
    """
    if entity.type == EntityType.TEXT_MENTION:
        fields = entity.user.present_fields() if entity.user is not None else None
        payload = json.dumps(fields, sort_keys=True, default=str)
    elif entity.type == EntityType.PRE:
        payload = entity.language or ""
    else:
        payload = json.dumps(entity.payload())
    return (entity.type.value, payload)


def can_consolidate_entities(entity1: MessageEntity, entity2: MessageEntity) -> bool:
    """
    Check whether ``entity2`` can be merged into ``entity1``.

    The entities must be similar and ``entity2`` must start at or before the
    end of ``entity1`` (overlapping or touching).

    :param entity1: Left entity.
    :type entity1: MessageEntity
    :param entity2: Right entity, expected to start no earlier than ``entity1``.
    :type entity2: MessageEntity
    :return: True if the entities can be merged.
    :rtype: bool
    """
    if not is_entity_similar(entity1, entity2):
        return False
    return entity2.offset <= entity1.end


def consolidate_entities(entities: Iterable[MessageEntity]) -> List[MessageEntity]:
    """
    Merge similar entities whose ranges overlap or touch.

    Entities are scanned once in canonical order with one open accumulator per
    similarity key; different keys interleave independently. The merged entity
    keeps the payload of the first entity of its run. The result is returned in
    canonical order and the input is left untouched.

    :param entities: Entities to consolidate.
    :type entities: Iterable[MessageEntity]
    :return: Consolidated entities in canonical order.
    :rtype: list[MessageEntity]
    """
    consolidated: List[MessageEntity] = []
    open_runs: Dict[Tuple[str, str], MessageEntity] = {}

    for entity in sort_entities(entities):
        key = similarity_key(entity)
        current: Optional[MessageEntity] = open_runs.get(key)
        if current is not None and can_consolidate_entities(current, entity):
            end = max(current.end, entity.end)
            open_runs[key] = current.model_copy(update={"length": end - current.offset})
            continue
        if current is not None:
            consolidated.append(current)
        open_runs[key] = entity

    consolidated.extend(open_runs.values())
    return sort_entities(consolidated)
