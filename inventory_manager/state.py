"""Inventory state snapshot and the fixed nodes every state carries."""

from dataclasses import dataclass, field

from inventory_manager.graph import EntityGraph
from inventory_manager.models import (
    LAUNDRY_CLEAN_ID,
    LAUNDRY_DIRTY_ID,
    LAUNDRY_DRYING_ID,
    LAUNDRY_WASHING_ID,
    MISC_ROOT_ID,
    ROOT_ID,
    Clipboard,
    Container,
    Property,
)


@dataclass(frozen=True)
class InventoryState:
    """Immutable snapshot: the entity graph plus the clipboard."""

    graph: EntityGraph = field(default_factory=EntityGraph)
    clipboard: Clipboard | None = None


def laundry_containers() -> list[Container]:
    """The four fixed laundry containers, as created in a fresh inventory."""
    return [
        Container(id=LAUNDRY_DIRTY_ID, name="Dirty Laundry Basket", parent_id=ROOT_ID),
        Container(id=LAUNDRY_WASHING_ID, name="Washing Machine", parent_id=ROOT_ID),
        Container(id=LAUNDRY_DRYING_ID, name="Clothesline", parent_id=ROOT_ID),
        Container(id=LAUNDRY_CLEAN_ID, name="Clean Laundry Basket", parent_id=ROOT_ID),
    ]


def initial_state() -> InventoryState:
    """State of a brand new inventory."""
    graph = EntityGraph(
        [
            Property(id=ROOT_ID, name="My Home"),
            Property(id=MISC_ROOT_ID, name="Misc Containers"),
            *laundry_containers(),
        ]
    )
    return InventoryState(graph=graph)


def ensure_laundry_containers(graph: EntityGraph) -> EntityGraph:
    """Add any missing laundry container, for data saved by older versions.

    Returns:
        The same graph if nothing was missing, otherwise a repaired copy
    """
    missing = [container for container in laundry_containers() if container.id not in graph]
    if not missing:
        return graph
    repaired = graph.fork()
    for container in missing:
        repaired.upsert(container)
    return repaired
