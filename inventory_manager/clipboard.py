"""Subtree cloning for copy/paste."""

import dataclasses
import uuid
from collections.abc import Callable, Iterable

import structlog

from inventory_manager.graph import EntityGraph
from inventory_manager.models import Entity, EntityType, Item, ItemStatus

logger = structlog.get_logger()


def new_id() -> str:
    """Generate a fresh entity/property id."""
    return str(uuid.uuid4())


def clone_entity(entity: Entity, parent_id: str, id_factory: Callable[[], str] = new_id) -> Entity:
    """Copy a single entity under a new parent with fresh ids.

    Custom properties keep their key and value but get new ids. A cloned item
    never inherits a placement or laundry state: it starts Clean (Unplaced).
    """
    changes: dict[str, object] = {
        "id": id_factory(),
        "parent_id": parent_id,
        "custom_props": tuple(dataclasses.replace(prop, id=id_factory()) for prop in entity.custom_props),
    }
    if isinstance(entity, Item):
        changes["status"] = ItemStatus.CLEAN_UNPLACED
    return dataclasses.replace(entity, **changes)


def clone_subtrees(
    source: EntityGraph,
    target: EntityGraph,
    entity_ids: Iterable[str],
    destination_id: str,
    id_factory: Callable[[], str] = new_id,
) -> dict[str, str]:
    """Clone each entity and its full subtree from ``source`` into ``target``.

    Reads only from ``source``, so pasting a subtree into one of its own
    descendants terminates. Property entities (and anything beneath them) are
    never cloned; unknown ids are skipped.

    Args:
        source: Graph to read the originals from
        target: Graph receiving the clones
        entity_ids: Roots of the subtrees to clone
        destination_id: Parent of every cloned subtree root
        id_factory: Source of fresh ids

    Returns:
        Mapping of original id -> clone id
    """
    id_map: dict[str, str] = {}
    stack: list[tuple[str, str]] = [(entity_id, destination_id) for entity_id in reversed(list(entity_ids))]
    while stack:
        original_id, parent_id = stack.pop()
        original = source.get(original_id)
        if original is None or original.type is EntityType.PROPERTY:
            logger.debug("Skipping entity for paste", entity_id=original_id)
            continue
        clone = clone_entity(original, parent_id, id_factory)
        target.upsert(clone)
        id_map[original_id] = clone.id
        children = source.children(original_id)
        stack.extend((child.id, clone.id) for child in reversed(children))
    return id_map

