"""Snapshot codec: JSON-compatible encoding of the inventory state.

Document layout::

    {
      "entities": {"<id>": {"id": ..., "type": "ITEM", "parentId": ..., ...}, ...},
      "clipboard": {"entityIds": [...]} | null
    }
"""

import json
from typing import Any

import structlog

from inventory_manager.graph import EntityGraph
from inventory_manager.models import (
    ENTITY_CLASSES,
    ROOT_ID,
    Clipboard,
    Container,
    CustomProperty,
    Entity,
    EntityType,
    Item,
    LaundryLink,
)
from inventory_manager.state import InventoryState, ensure_laundry_containers

logger = structlog.get_logger()


class SnapshotFormatError(ValueError):
    """Raised when a document is not a valid inventory snapshot."""


def entity_to_dict(entity: Entity) -> dict[str, Any]:
    """Encode an entity with camelCase keys and ``type`` as discriminant."""
    data: dict[str, Any] = {
        "id": entity.id,
        "name": entity.name,
        "type": entity.type.value,
        "parentId": entity.parent_id,
        "customProps": [{"id": prop.id, "key": prop.key, "value": prop.value} for prop in entity.custom_props],
    }
    if isinstance(entity, Container) and entity.capacity is not None:
        data["capacity"] = entity.capacity.value
    elif isinstance(entity, Item):
        data["quantity"] = entity.quantity
        data["tags"] = list(entity.tags)
        data["status"] = entity.status.value
    elif isinstance(entity, LaundryLink):
        data["linkedTag"] = entity.linked_tag
    return data


def entity_from_dict(data: Any) -> Entity:
    """Decode one entity.

    Raises:
        SnapshotFormatError: If the entity is malformed or of an unknown type
    """
    if not isinstance(data, dict):
        raise SnapshotFormatError(f"Entity must be an object, got {type(data).__name__}")
    try:
        entity_type = EntityType(data["type"])
        fields: dict[str, Any] = {
            "id": data["id"],
            "name": data["name"],
            "parent_id": data.get("parentId"),
            "custom_props": tuple(
                CustomProperty(id=prop["id"], key=prop["key"], value=prop.get("value", ""))
                for prop in data.get("customProps") or ()
            ),
        }
        if entity_type is EntityType.CONTAINER:
            fields["capacity"] = data.get("capacity")
        elif entity_type is EntityType.ITEM:
            fields["quantity"] = data.get("quantity", 1)
            fields["tags"] = tuple(data.get("tags") or ())
            fields["status"] = data["status"]
        elif entity_type is EntityType.LAUNDRY_LINK:
            fields["linked_tag"] = data.get("linkedTag", "")
        return ENTITY_CLASSES[entity_type](**fields)
    except KeyError as e:
        raise SnapshotFormatError(f"Entity is missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise SnapshotFormatError(f"Invalid entity {data.get('id')!r}: {e}") from e


def state_to_dict(state: InventoryState) -> dict[str, Any]:
    """Encode a state verbatim."""
    clipboard = None
    if state.clipboard is not None:
        clipboard = {"entityIds": list(state.clipboard.entity_ids)}
    return {
        "entities": {entity.id: entity_to_dict(entity) for entity in state.graph},
        "clipboard": clipboard,
    }


def state_from_dict(data: Any) -> InventoryState:
    """Decode and validate a snapshot document.

    Missing laundry containers are added back under the root.

    Raises:
        SnapshotFormatError: If the document lacks ``entities.root`` or is otherwise malformed
    """
    if not isinstance(data, dict):
        raise SnapshotFormatError("Snapshot must be a JSON object")
    raw_entities = data.get("entities")
    if not isinstance(raw_entities, dict) or ROOT_ID not in raw_entities:
        raise SnapshotFormatError("Invalid inventory file format: missing entities.root")

    entities = []
    for key, raw in raw_entities.items():
        entity = entity_from_dict(raw)
        if entity.id != key:
            raise SnapshotFormatError(f"Entity key {key!r} does not match its id {entity.id!r}")
        entities.append(entity)

    clipboard = None
    raw_clipboard = data.get("clipboard")
    if raw_clipboard is not None:
        if not isinstance(raw_clipboard, dict) or not isinstance(raw_clipboard.get("entityIds"), list):
            raise SnapshotFormatError("Clipboard must be an object with an entityIds list")
        clipboard = Clipboard(raw_clipboard["entityIds"])

    graph = ensure_laundry_containers(EntityGraph(entities))
    logger.debug("Snapshot decoded", entities=len(graph), clipboard=clipboard is not None)
    return InventoryState(graph=graph, clipboard=clipboard)


def export_snapshot(state: InventoryState, indent: int | None = 2) -> str:
    """Serialize a state to a JSON document."""
    return json.dumps(state_to_dict(state), indent=indent, ensure_ascii=False)


def import_snapshot(text: str | bytes) -> InventoryState:
    """Parse a JSON document produced by ``export_snapshot``.

    Args:
        text: The document, either decoded or as UTF-8 bytes

    Raises:
        SnapshotFormatError: If the text is not valid UTF-8 JSON or not a valid snapshot
    """
    try:
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        data = json.loads(text)
    except UnicodeDecodeError as e:
        logger.error("Snapshot is not valid UTF-8", error=str(e))
        raise SnapshotFormatError(f"Snapshot is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        logger.error("Failed to parse snapshot JSON", error=str(e))
        raise SnapshotFormatError(f"Snapshot is not valid JSON: {e}") from e
    return state_from_dict(data)
