"""Reducer: the single transition function driving every inventory mutation.

``reduce(state, action)`` never mutates ``state``. Handlers fork the entity
graph, apply the whole action to the fork and return a new state; a handler
that has nothing to do returns the original state object unchanged.
"""

import dataclasses
from collections.abc import Callable, Iterable
from typing import Any

import structlog

from inventory_manager.actions import (
    Action,
    BulkAddTags,
    BulkRemoveTags,
    BulkReplaceTag,
    CopyEntities,
    DeleteEntities,
    DeletePropertyKey,
    DeleteTag,
    LoadState,
    MergeTags,
    MoveEntities,
    PasteEntities,
    PlaceMiscItems,
    RenamePropertyKey,
    RenameTag,
    SaveEntity,
    SetContainerCapacity,
    SetItemStatus,
)
from inventory_manager.clipboard import clone_subtrees
from inventory_manager.graph import EntityGraph
from inventory_manager.models import (
    FIXED_IDS,
    MISC_ROOT_ID,
    ROOT_ID,
    Capacity,
    Clipboard,
    Container,
    Entity,
    EntityType,
    Item,
    ItemStatus,
    unique_tags,
)
from inventory_manager.state import InventoryState
from inventory_manager.status import LAUNDRY_TAG, enforce_laundry_invariant, status_for_destination

logger = structlog.get_logger()

Handler = Callable[[InventoryState, Any], InventoryState]


def _commit(state: InventoryState, graph: EntityGraph, changed: bool) -> InventoryState:
    if not changed:
        return state
    return dataclasses.replace(state, graph=graph)


def _update_items(
    state: InventoryState,
    update: Callable[[Item], Item],
    ids: Iterable[str] | None = None,
) -> InventoryState:
    """Apply ``update`` to items (all of them, or only those in ``ids``)."""
    graph = state.graph.fork()
    if ids is None:
        targets: Iterable[Entity | None] = list(state.graph.items())
    else:
        targets = [state.graph.get(entity_id) for entity_id in ids]
    changed = False
    for entity in targets:
        if not isinstance(entity, Item):
            continue
        updated = update(entity)
        if updated != entity:
            graph.put(updated)
            changed = True
    return _commit(state, graph, changed)


def _replace_tag(tags: tuple[str, ...], old: str, new: str) -> tuple[str, ...]:
    return unique_tags(new if tag == old else tag for tag in tags)


def _load_state(state: InventoryState, action: LoadState) -> InventoryState:
    return action.state


def _save_entity(state: InventoryState, action: SaveEntity) -> InventoryState:
    entity = action.entity
    graph = state.graph
    existing = graph.get(entity.id)
    if entity.parent_id is None and entity.type is not EntityType.PROPERTY:
        logger.warning("Only properties can be roots, entity not saved", entity_id=entity.id, type=entity.type.value)
        return state
    if entity.parent_id is not None:
        if entity.parent_id not in graph:
            logger.warning("Parent not found, entity not saved", entity_id=entity.id, parent_id=entity.parent_id)
            return state
        if existing is not None and graph.would_create_cycle(entity.id, entity.parent_id):
            logger.warning("Save would create a cycle", entity_id=entity.id, parent_id=entity.parent_id)
            return state
    if entity.id in FIXED_IDS and existing is not None:
        if existing.type is not entity.type or existing.parent_id != entity.parent_id:
            logger.warning("Fixed entity cannot change type or parent", entity_id=entity.id)
            return state
    graph = graph.fork()
    graph.upsert(entity)
    logger.debug("Entity saved", entity_id=entity.id, type=entity.type.value, created=existing is None)
    return dataclasses.replace(state, graph=graph)


def _delete_entities(state: InventoryState, action: DeleteEntities) -> InventoryState:
    fixed = [entity_id for entity_id in action.ids if entity_id in FIXED_IDS]
    if fixed:
        logger.warning("Fixed entities cannot be deleted", entity_ids=fixed)
    closure = state.graph.descendants(action.ids, exclude=FIXED_IDS)
    if not closure:
        return state
    graph = state.graph.fork()
    removed = set(closure)
    for entity_id in FIXED_IDS:
        entity = graph.get(entity_id)
        if entity is not None and entity.parent_id in removed:
            # Fixed nodes nested in a deleted subtree survive under the root.
            logger.info("Re-homing fixed entity", entity_id=entity_id, parent_id=entity.parent_id)
            graph.put(dataclasses.replace(entity, parent_id=ROOT_ID))
    graph.remove_all(closure)
    logger.debug("Entities deleted", requested=len(action.ids), removed=len(closure))
    return dataclasses.replace(state, graph=graph)


def _copy_entities(state: InventoryState, action: CopyEntities) -> InventoryState:
    return dataclasses.replace(state, clipboard=Clipboard(action.ids))


def _paste_entities(state: InventoryState, action: PasteEntities) -> InventoryState:
    if state.clipboard is None or not state.clipboard.entity_ids:
        return state
    if action.destination_id not in state.graph:
        logger.warning("Paste destination not found", destination_id=action.destination_id)
        return state
    graph = state.graph.fork()
    id_map = clone_subtrees(state.graph, graph, state.clipboard.entity_ids, action.destination_id)
    logger.debug("Entities pasted", destination_id=action.destination_id, cloned=len(id_map))
    return InventoryState(graph=graph, clipboard=None)


def _move_entities(state: InventoryState, action: MoveEntities) -> InventoryState:
    destination_id = action.destination_id
    if destination_id not in state.graph:
        logger.warning("Move destination not found", destination_id=destination_id)
        return state
    forced_status = status_for_destination(destination_id)
    graph = state.graph.fork()
    changed = False
    for entity_id in action.ids:
        entity = graph.get(entity_id)
        if entity is None or entity.id in FIXED_IDS or entity.type is EntityType.PROPERTY:
            logger.debug("Skipping entity for move", entity_id=entity_id)
            continue
        if graph.would_create_cycle(entity_id, destination_id):
            logger.warning("Move would create a cycle", entity_id=entity_id, destination_id=destination_id)
            continue
        moved = dataclasses.replace(entity, parent_id=destination_id)
        if forced_status is not None and isinstance(moved, Item):
            # Laundry containers set the status without checking the laundry tag.
            moved = dataclasses.replace(moved, status=forced_status)
        graph.put(moved)
        changed = True
    return _commit(state, graph, changed)


def _place_misc_items(state: InventoryState, action: PlaceMiscItems) -> InventoryState:
    if action.destination_id not in state.graph:
        logger.warning("Placement destination not found", destination_id=action.destination_id)
        return state

    def place(item: Item) -> Item:
        if state.graph.would_create_cycle(item.id, action.destination_id):
            logger.warning("Placement would create a cycle", entity_id=item.id, destination_id=action.destination_id)
            return item
        return dataclasses.replace(item, parent_id=action.destination_id, status=ItemStatus.PLACED)

    return _update_items(state, place, action.ids)


def _rename_tag(state: InventoryState, action: RenameTag) -> InventoryState:
    if not action.old_name or not action.new_name or action.old_name == action.new_name:
        return state

    def rename(item: Item) -> Item:
        if action.old_name not in item.tags:
            return item
        renamed = dataclasses.replace(item, tags=_replace_tag(item.tags, action.old_name, action.new_name))
        return enforce_laundry_invariant(renamed)

    return _update_items(state, rename)


def _merge_tags(state: InventoryState, action: MergeTags) -> InventoryState:
    if not action.target_tag:
        return state
    sources = set(action.source_tags)

    def merge(item: Item) -> Item:
        if not sources.intersection(item.tags):
            return item
        tags = [tag for tag in item.tags if tag not in sources]
        if action.target_tag not in tags:
            tags.append(action.target_tag)
        # No laundry re-check here; a merged-away laundry tag keeps the status.
        return dataclasses.replace(item, tags=tuple(tags))

    return _update_items(state, merge)


def _delete_tag(state: InventoryState, action: DeleteTag) -> InventoryState:
    def delete(item: Item) -> Item:
        if action.tag_name not in item.tags:
            return item
        updated = dataclasses.replace(item, tags=tuple(tag for tag in item.tags if tag != action.tag_name))
        if action.tag_name == LAUNDRY_TAG:
            updated = enforce_laundry_invariant(updated)
        return updated

    return _update_items(state, delete)


def _bulk_add_tags(state: InventoryState, action: BulkAddTags) -> InventoryState:
    return _update_items(
        state,
        lambda item: dataclasses.replace(item, tags=unique_tags(item.tags + action.tags)),
        action.ids,
    )


def _bulk_remove_tags(state: InventoryState, action: BulkRemoveTags) -> InventoryState:
    removed = set(action.tags)

    def remove(item: Item) -> Item:
        updated = dataclasses.replace(item, tags=tuple(tag for tag in item.tags if tag not in removed))
        if LAUNDRY_TAG in removed:
            updated = enforce_laundry_invariant(updated)
        return updated

    return _update_items(state, remove, action.ids)


def _bulk_replace_tag(state: InventoryState, action: BulkReplaceTag) -> InventoryState:
    if not action.old_tag or not action.new_tag or action.old_tag == action.new_tag:
        return state

    def replace(item: Item) -> Item:
        if action.old_tag not in item.tags:
            return item
        updated = dataclasses.replace(item, tags=_replace_tag(item.tags, action.old_tag, action.new_tag))
        if action.old_tag == LAUNDRY_TAG:
            updated = enforce_laundry_invariant(updated)
        return updated

    return _update_items(state, replace, action.ids)


def _set_container_capacity(state: InventoryState, action: SetContainerCapacity) -> InventoryState:
    container = state.graph.get(action.id)
    if not isinstance(container, Container):
        return state
    capacity = Capacity(action.capacity) if action.capacity is not None else None
    if container.capacity == capacity:
        return state
    graph = state.graph.fork()
    graph.upsert(dataclasses.replace(container, capacity=capacity))
    return dataclasses.replace(state, graph=graph)


def _set_item_status(state: InventoryState, action: SetItemStatus) -> InventoryState:
    status = ItemStatus(action.status)

    def set_status(item: Item) -> Item:
        if status is ItemStatus.PLACED and item.parent_id == MISC_ROOT_ID:
            logger.warning("Item marked Placed while still in the misc root", entity_id=item.id)
        return enforce_laundry_invariant(dataclasses.replace(item, status=status))

    return _update_items(state, set_status, action.ids)


def _rename_property_key(state: InventoryState, action: RenamePropertyKey) -> InventoryState:
    if not action.old_key or not action.new_key or action.old_key == action.new_key:
        return state
    graph = state.graph.fork()
    changed = False
    for entity in state.graph:
        if not any(prop.key == action.old_key for prop in entity.custom_props):
            continue
        props = tuple(
            dataclasses.replace(prop, key=action.new_key) if prop.key == action.old_key else prop
            for prop in entity.custom_props
        )
        graph.put(dataclasses.replace(entity, custom_props=props))
        changed = True
    return _commit(state, graph, changed)


def _delete_property_key(state: InventoryState, action: DeletePropertyKey) -> InventoryState:
    graph = state.graph.fork()
    changed = False
    for entity in state.graph:
        if not any(prop.key == action.key for prop in entity.custom_props):
            continue
        props = tuple(prop for prop in entity.custom_props if prop.key != action.key)
        graph.put(dataclasses.replace(entity, custom_props=props))
        changed = True
    return _commit(state, graph, changed)


HANDLERS: dict[type[Action], Handler] = {
    LoadState: _load_state,
    SaveEntity: _save_entity,
    DeleteEntities: _delete_entities,
    CopyEntities: _copy_entities,
    PasteEntities: _paste_entities,
    MoveEntities: _move_entities,
    PlaceMiscItems: _place_misc_items,
    RenameTag: _rename_tag,
    MergeTags: _merge_tags,
    DeleteTag: _delete_tag,
    BulkAddTags: _bulk_add_tags,
    BulkRemoveTags: _bulk_remove_tags,
    BulkReplaceTag: _bulk_replace_tag,
    SetContainerCapacity: _set_container_capacity,
    SetItemStatus: _set_item_status,
    RenamePropertyKey: _rename_property_key,
    DeletePropertyKey: _delete_property_key,
}


def reduce(state: InventoryState, action: object) -> InventoryState:
    """Apply one action to a state.

    Args:
        state: Current state (left untouched)
        action: Action to apply; anything unrecognized is ignored

    Returns:
        The new state, or ``state`` itself when the action changes nothing
    """
    handler = HANDLERS.get(type(action))
    if handler is None:
        logger.debug("Ignoring unknown action", action=type(action).__name__)
        return state
    return handler(state, action)
