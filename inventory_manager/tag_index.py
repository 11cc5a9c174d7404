"""Read-side views derived from the entity graph: tag index and placement suggestions.

Nothing here writes to the graph. Views are recomputed from a state's graph
whenever they are needed.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from inventory_manager.graph import EntityGraph
from inventory_manager.models import MISC_ROOT_ID, Container, Item, ItemStatus


@dataclass
class TagIndex:
    """Tag aggregates over the inventory.

    Attributes:
        tag_counts: tag -> total quantity over all items
        container_tags: container id -> tags of the placed items inside it
        container_quantities: container id -> total quantity of placed items inside it
    """

    tag_counts: dict[str, int] = field(default_factory=dict)
    container_tags: dict[str, set[str]] = field(default_factory=dict)
    container_quantities: dict[str, int] = field(default_factory=dict)


@dataclass
class UnplacedGroup:
    """Unplaced items that share a name (case-insensitive) and tag set."""

    key: str
    items: list[Item] = field(default_factory=list)
    total_quantity: int = 0
    suggestion: str | None = None

    @property
    def representative(self) -> Item:
        return self.items[0]


def _is_permanent_location(graph: EntityGraph, item: Item) -> bool:
    return item.parent_id is not None and not graph.is_within(item.parent_id, MISC_ROOT_ID)


def build_tag_index(graph: EntityGraph) -> TagIndex:
    """Aggregate tag counts and per-container tag sets from the graph.

    Container aggregates only consider items with status Placed whose parent
    is outside the misc root.
    """
    index = TagIndex()
    for item in graph.items():
        for tag in item.tags:
            index.tag_counts[tag] = index.tag_counts.get(tag, 0) + item.quantity
        if item.status is not ItemStatus.PLACED or not _is_permanent_location(graph, item):
            continue
        container_id = item.parent_id
        index.container_tags.setdefault(container_id, set()).update(item.tags)
        index.container_quantities[container_id] = index.container_quantities.get(container_id, 0) + item.quantity
    return index


def suggest_container(tags: Iterable[str], index: TagIndex) -> str | None:
    """Pick the container whose placed items share the most tags with ``tags``.

    Ties go to the container met first while iterating ``index.container_tags``.

    Returns:
        The best container id, or None if no container shares any tag
    """
    wanted = set(tags)
    best_id: str | None = None
    best_score = 0
    for container_id, container_tags in index.container_tags.items():
        score = len(wanted & container_tags)
        if score > best_score:
            best_id, best_score = container_id, score
    return best_id


def laundry_summary(graph: EntityGraph) -> dict[ItemStatus, int]:
    """Total item quantity in each laundry stage."""
    counts = {ItemStatus.DIRTY: 0, ItemStatus.WASHING: 0, ItemStatus.CLEAN_UNPLACED: 0}
    for item in graph.items():
        if item.status in counts:
            counts[item.status] += item.quantity
    return counts


def group_unplaced_items(graph: EntityGraph, index: TagIndex | None = None) -> list[UnplacedGroup]:
    """Group Clean (Unplaced) items by name and tags, each with a suggested container.

    Groups are sorted by the name of their first item.
    """
    if index is None:
        index = build_tag_index(graph)
    groups: dict[str, UnplacedGroup] = {}
    for item in graph.items():
        if item.status is not ItemStatus.CLEAN_UNPLACED:
            continue
        key = f"{item.name.lower()}|{','.join(sorted(item.tags))}"
        group = groups.setdefault(key, UnplacedGroup(key=key))
        group.items.append(item)
        group.total_quantity += item.quantity
    for group in groups.values():
        group.suggestion = suggest_container(group.representative.tags, index)
    return sorted(groups.values(), key=lambda group: group.representative.name.lower())


def placement_destinations(graph: EntityGraph) -> list[Container]:
    """Containers items can be placed into, sorted by breadcrumb path."""
    containers = [container for container in graph.containers() if container.parent_id != MISC_ROOT_ID]
    return sorted(containers, key=lambda container: graph.path(container.id))


def property_keys(graph: EntityGraph) -> list[str]:
    """Sorted distinct custom property keys in use."""
    return sorted({prop.key for entity in graph for prop in entity.custom_props if prop.key})


def selection_tags(graph: EntityGraph, entity_ids: Iterable[str]) -> list[str]:
    """Sorted union of the tags carried by the items among ``entity_ids``."""
    tags: set[str] = set()
    for entity_id in entity_ids:
        entity = graph.get(entity_id)
        if isinstance(entity, Item):
            tags.update(entity.tags)
    return sorted(tags)


@dataclass
class ContainerSummary:
    """A permanent container as listed in the container directory."""

    container: Container
    path: str
    tags: list[str]
    quantity: int


CONTAINER_SORT_KEYS = ("name", "items", "tags")


def browse_containers(
    graph: EntityGraph,
    tag: str | None = None,
    sort: str = "name",
    descending: bool = False,
    index: TagIndex | None = None,
) -> list[ContainerSummary]:
    """List containers outside the misc root with the tags of their placed items.

    Args:
        graph: Graph to read
        tag: Only keep containers holding a placed item with this tag
        sort: One of ``name``, ``items`` (placed quantity) or ``tags`` (distinct tag count)
        descending: Reverse the sort order
        index: Precomputed tag index (built from ``graph`` if omitted)

    Raises:
        ValueError: If ``sort`` is not a known sort key
    """
    if sort not in CONTAINER_SORT_KEYS:
        raise ValueError(f"Unknown sort key {sort!r}, expected one of {', '.join(CONTAINER_SORT_KEYS)}")
    if index is None:
        index = build_tag_index(graph)
    summaries = [
        ContainerSummary(
            container=container,
            path=graph.path(container.parent_id) if container.parent_id else "",
            tags=sorted(index.container_tags.get(container.id, ())),
            quantity=index.container_quantities.get(container.id, 0),
        )
        for container in graph.containers()
        if container.parent_id != MISC_ROOT_ID
    ]
    if tag is not None:
        summaries = [summary for summary in summaries if tag in summary.tags]
    if sort == "items":
        summaries.sort(key=lambda summary: summary.quantity, reverse=descending)
    elif sort == "tags":
        summaries.sort(key=lambda summary: len(summary.tags), reverse=descending)
    else:
        summaries.sort(key=lambda summary: summary.container.name.casefold(), reverse=descending)
    return summaries


def laundry_items(graph: EntityGraph) -> dict[ItemStatus, list[Item]]:
    """Items in each laundry stage, sorted by name."""
    stages: dict[ItemStatus, list[Item]] = {ItemStatus.DIRTY: [], ItemStatus.WASHING: [], ItemStatus.CLEAN_UNPLACED: []}
    for item in graph.items():
        if item.status in stages:
            stages[item.status].append(item)
    for items in stages.values():
        items.sort(key=lambda item: item.name.casefold())
    return stages
