"""CLI for inventory manager."""

import dataclasses
from pathlib import Path
from typing import Annotated, Literal

import structlog
from cyclopts import App, Parameter

from inventory_manager.actions import (
    CopyEntities,
    DeleteEntities,
    LoadState,
    MoveEntities,
    PasteEntities,
    PlaceMiscItems,
    SaveEntity,
    SetContainerCapacity,
    SetItemStatus,
)
from inventory_manager.backend import Backend, open_store
from inventory_manager.backends import JsonFileBackend
from inventory_manager.clipboard import new_id
from inventory_manager.config import get_config
from inventory_manager.config_commands import config_app
from inventory_manager.graph import EntityGraph
from inventory_manager.models import (
    ENTITY_CLASSES,
    MISC_ROOT_ID,
    ROOT_ID,
    Capacity,
    Container,
    CustomProperty,
    Entity,
    EntityType,
    Item,
    ItemStatus,
    LaundryLink,
)
from inventory_manager.prop_commands import prop_app
from inventory_manager.snapshot import SnapshotFormatError, export_snapshot, import_snapshot
from inventory_manager.store import InventoryStore
from inventory_manager.tag_commands import tag_app
from inventory_manager.tag_index import (
    build_tag_index,
    group_unplaced_items,
    laundry_items,
    laundry_summary,
    placement_destinations,
    suggest_container,
)

logger = structlog.get_logger()

app = App(
    help="Inventory Manager - Track where your things are, tags and laundry included",
)

app.command(tag_app)
app.command(prop_app)
app.command(config_app)

STATUS_CHOICES: dict[str, ItemStatus] = {
    "placed": ItemStatus.PLACED,
    "dirty": ItemStatus.DIRTY,
    "washing": ItemStatus.WASHING,
    "clean": ItemStatus.CLEAN_UNPLACED,
}

CAPACITY_CHOICES: dict[str, Capacity] = {
    "empty": Capacity.EMPTY,
    "plenty": Capacity.PLENTY_OF_SPACE,
    "getting-full": Capacity.GETTING_FULL,
    "full": Capacity.FULL,
}

EntityKind = Literal["room", "unit", "compartment", "container", "item", "laundry-link"]
StatusName = Literal["placed", "dirty", "washing", "clean"]
CapacityName = Literal["empty", "plenty", "getting-full", "full", "none"]

_store_path_override: Path | None = None


def configure_logging(log_level: str) -> None:
    """Configure structlog with the specified log level."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(min_level=log_level.lower()))


def get_backend() -> Backend:
    """Get the backend holding the inventory snapshot."""
    path = _store_path_override or get_config().store_path()
    return JsonFileBackend(path)


def get_store() -> InventoryStore:
    """Open the inventory, saving every change back to the backend."""
    return open_store(get_backend())


def fail(message: str) -> None:
    """Print an error and exit with a non-zero status."""
    print(f"Error: {message}")
    raise SystemExit(1)


def require(graph: EntityGraph, entity_id: str) -> Entity:
    """Look up an entity, exiting with an error if it does not exist."""
    entity = graph.get(entity_id)
    if entity is None:
        fail(f"No entity with id {entity_id}")
    return entity  # type: ignore[return-value]


def parse_tags(tags: str) -> tuple[str, ...]:
    """Split a comma separated tag list."""
    return tuple(tag.strip() for tag in tags.split(",") if tag.strip())


def parse_props(props: str) -> tuple[CustomProperty, ...]:
    """Parse ``key=value,key2=value2`` into custom properties with fresh ids."""
    parsed = []
    for pair in props.split(","):
        pair = pair.strip()
        if not pair:
            continue
        key, _, value = pair.partition("=")
        parsed.append(CustomProperty(id=new_id(), key=key.strip(), value=value.strip()))
    return tuple(parsed)


def describe(entity: Entity) -> str:
    """One-line summary of an entity."""
    text = f"{entity.name} [{entity.type.value.lower()}] ({entity.id})"
    if isinstance(entity, Item):
        text += f" x{entity.quantity} - {entity.status.value}"
        if entity.tags:
            text += f" #{' #'.join(entity.tags)}"
    elif isinstance(entity, Container) and entity.capacity is not None:
        text += f" - {entity.capacity.value}"
    elif isinstance(entity, LaundryLink):
        text += f" -> #{entity.linked_tag}"
    if entity.custom_props:
        text += " {" + ", ".join(f"{prop.key}={prop.value}" for prop in entity.custom_props) + "}"
    return text


def print_tree(graph: EntityGraph, entity_id: str, depth: int = 0) -> None:
    """Print an entity and its subtree, indented by depth."""
    entity = graph.get(entity_id)
    if entity is None:
        return
    print(f"{'  ' * depth}{describe(entity)}")
    for child in graph.children(entity_id):
        print_tree(graph, child.id, depth + 1)


@app.command
def show(entity_id: str | None = None) -> None:
    """Show an entity and everything inside it (both roots by default)."""
    graph = get_store().state.graph
    if entity_id is None:
        print_tree(graph, ROOT_ID)
        print_tree(graph, MISC_ROOT_ID)
        return
    require(graph, entity_id)
    path = graph.path(entity_id)
    if path:
        print(f"Path: {path}\n")
    print_tree(graph, entity_id)


@app.command
def add(
    kind: EntityKind,
    name: str,
    parent: str = ROOT_ID,
    quantity: int = 1,
    tags: str = "",
    status: StatusName | None = None,
    capacity: CapacityName | None = None,
    linked_tag: str = "",
    props: str = "",
) -> None:
    """Create a new entity.

    Args:
        kind: Entity type
        name: Display name
        parent: Id of the containing entity
        quantity: Item quantity
        tags: Comma separated item tags
        status: Item status (defaults to placed outside the misc root, clean otherwise)
        capacity: Container fill level
        linked_tag: Tag a laundry link points at
        props: Custom properties as key=value pairs, comma separated
    """
    store = get_store()
    entity_type = EntityType(kind.upper().replace("-", "_"))
    fields: dict[str, object] = {
        "id": new_id(),
        "name": name,
        "parent_id": parent,
        "custom_props": parse_props(props),
    }
    require(store.state.graph, parent)
    if entity_type is EntityType.ITEM:
        if status is None:
            status = "clean" if store.state.graph.is_within(parent, MISC_ROOT_ID) else "placed"
        fields.update(quantity=quantity, tags=parse_tags(tags), status=STATUS_CHOICES[status])
    elif entity_type is EntityType.CONTAINER and capacity not in (None, "none"):
        fields["capacity"] = CAPACITY_CHOICES[capacity]  # type: ignore[index]
    elif entity_type is EntityType.LAUNDRY_LINK:
        fields["linked_tag"] = linked_tag

    try:
        entity = ENTITY_CLASSES[entity_type](**fields)  # type: ignore[arg-type]
    except ValueError as e:
        fail(str(e))
        return
    state = store.dispatch(SaveEntity(entity))
    saved = state.graph.get(entity.id)
    if saved is None:
        fail(f"Could not save {name}")
        return
    print(f"Created {describe(saved)}")
    if isinstance(saved, Item) and saved.status is not STATUS_CHOICES.get(status or "", saved.status):
        print(f"Status set to {saved.status.value} (items need the 'laundry' tag to be dirty or washing)")


@app.command
def edit(
    entity_id: str,
    name: str | None = None,
    quantity: int | None = None,
    tags: str | None = None,
    props: str | None = None,
    linked_tag: str | None = None,
) -> None:
    """Update fields of an existing entity."""
    store = get_store()
    entity = require(store.state.graph, entity_id)
    changes: dict[str, object] = {}
    if name:
        changes["name"] = name
    if props is not None:
        changes["custom_props"] = parse_props(props)
    if isinstance(entity, Item):
        if quantity is not None:
            changes["quantity"] = quantity
        if tags is not None:
            changes["tags"] = parse_tags(tags)
    if isinstance(entity, LaundryLink) and linked_tag is not None:
        changes["linked_tag"] = linked_tag

    try:
        updated = dataclasses.replace(entity, **changes)
    except ValueError as e:
        fail(str(e))
        return
    state = store.dispatch(SaveEntity(updated))
    print(f"Updated {describe(require(state.graph, entity_id))}")


@app.command
def delete(*entity_ids: str) -> None:
    """Delete entities and everything inside them."""
    store = get_store()
    before = len(store.state.graph)
    state = store.dispatch(DeleteEntities(entity_ids))
    print(f"Deleted {before - len(state.graph)} entity(ies)")


@app.command
def copy(*entity_ids: str) -> None:
    """Put entities on the clipboard for a later paste."""
    store = get_store()
    store.dispatch(CopyEntities(entity_ids))
    print(f"Copied {len(entity_ids)} entity(ies) to the clipboard")


@app.command
def paste(destination_id: str) -> None:
    """Paste copies of the clipboard entities (with their contents) into a destination."""
    store = get_store()
    require(store.state.graph, destination_id)
    if store.state.clipboard is None or not store.state.clipboard.entity_ids:
        print("Clipboard is empty")
        return
    before = len(store.state.graph)
    state = store.dispatch(PasteEntities(destination_id))
    print(f"Pasted {len(state.graph) - before} entity(ies) into {destination_id}")


@app.command
def move(destination_id: str, *entity_ids: str) -> None:
    """Move entities into a destination. Laundry containers update item status."""
    store = get_store()
    require(store.state.graph, destination_id)
    store.dispatch(MoveEntities(entity_ids, destination_id))
    print(f"Moved {len(entity_ids)} entity(ies) to {destination_id}")


@app.command
def place(destination_id: str, *entity_ids: str) -> None:
    """Place unplaced items into a destination and mark them placed."""
    store = get_store()
    require(store.state.graph, destination_id)
    store.dispatch(PlaceMiscItems(entity_ids, destination_id))
    print(f"Placed {len(entity_ids)} item(s) in {store.state.graph.path(destination_id) or destination_id}")


@app.command
def status(new_status: StatusName, *entity_ids: str) -> None:
    """Set the status of items without moving them."""
    store = get_store()
    store.dispatch(SetItemStatus(entity_ids, STATUS_CHOICES[new_status]))
    print(f"Status updated for {len(entity_ids)} item(s)")


@app.command
def capacity(container_id: str, level: CapacityName) -> None:
    """Set how full a container is."""
    store = get_store()
    container = require(store.state.graph, container_id)
    if not isinstance(container, Container):
        fail(f"{container_id} is not a container")
    store.dispatch(SetContainerCapacity(container_id, None if level == "none" else CAPACITY_CHOICES[level]))
    print(f"Capacity of {container.name} set to {level}")


@app.command
def suggest(*tags: str) -> None:
    """Suggest where to put an item with the given tags."""
    graph = get_store().state.graph
    container_id = suggest_container(tags, build_tag_index(graph))
    if container_id is None:
        print("No suggestion")
        return
    print(f"Suggestion: {graph.path(container_id) or container_id} ({container_id})")


@app.command
def unplaced() -> None:
    """List unplaced items grouped by name and tags, with placement suggestions and destinations."""
    graph = get_store().state.graph
    groups = group_unplaced_items(graph)
    if not groups:
        print("No unplaced items")
        return
    print(f"Found {len(groups)} group(s):\n")
    for group in groups:
        item = group.representative
        tags = f" #{' #'.join(item.tags)}" if item.tags else ""
        print(f"○ {item.name} (x{group.total_quantity}){tags}")
        print(f"  ids: {' '.join(i.id for i in group.items)}")
        if group.suggestion is not None:
            print(f"  suggestion: {graph.path(group.suggestion) or group.suggestion} ({group.suggestion})")

    destinations = placement_destinations(graph)
    if destinations:
        print("\nDestinations (inv place DEST ID...):")
        for container in destinations:
            print(f"  {graph.path(container.id)} ({container.id})")


@app.command
def laundry() -> None:
    """Show the items that are dirty, washing and clean."""
    graph = get_store().state.graph
    counts = laundry_summary(graph)
    print("Laundry summary:\n")
    for item_status, items in laundry_items(graph).items():
        print(f"{item_status.value}: {counts[item_status]}")
        for item in items:
            print(f"  {item.name} x{item.quantity} ({item.id})")


@app.command
def export(file: Path | None = None) -> None:
    """Export the inventory as JSON (to stdout, or to a file)."""
    document = export_snapshot(get_store().state)
    if file is None:
        print(document)
        return
    file.write_text(document, encoding="utf-8")
    print(f"Exported inventory to {file}")


@app.command(name="import")
def import_(file: Path) -> None:
    """Replace the inventory with a previously exported JSON file."""
    store = get_store()
    try:
        state = import_snapshot(file.read_bytes())
    except (OSError, SnapshotFormatError) as e:
        logger.error("Import failed", file=str(file), error=str(e))
        fail(f"Failed to import {file}: {e}")
        return
    store.dispatch(LoadState(state))
    print(f"Imported {len(state.graph)} entity(ies) from {file}")


@app.command
def reset() -> None:
    """Delete all data and start from an empty home."""
    backend = get_backend()
    store = open_store(backend)
    backend.clear()
    store.reset()
    print("Inventory has been reset")


@app.meta.default
def main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "critical",
    store: Path | None = None,
) -> None:
    """Main entry point with global options.

    Args:
        log_level: Logging threshold
        store: Inventory snapshot file (overrides the store.path setting)
    """
    global _store_path_override
    configure_logging(log_level)
    _store_path_override = store
    app(tokens)


if __name__ == "__main__":
    app.meta()
