"""Entity graph: flat id -> entity table with a parent -> children index."""

from collections.abc import Collection, Iterable, Iterator, Mapping
from types import MappingProxyType

import structlog

from inventory_manager.models import Container, Entity, EntityType, Item
from inventory_manager.status import enforce_laundry_invariant

logger = structlog.get_logger()


class EntityGraph:
    """Forest of located entities keyed by id.

    Entities live in a flat table; structure is expressed by each entity's
    ``parent_id`` and mirrored in an adjacency index (parent id -> ordered
    child ids) that is updated on every write, so child lookups cost
    O(children) instead of a scan over the whole table.

    Graphs handed out inside a published state are treated as read-only.
    Writers call ``fork()`` first and mutate the copy.
    """

    def __init__(self, entities: Iterable[Entity] = ()) -> None:
        """Initialize the graph.

        Args:
            entities: Entities to load as-is (no invariant checks)
        """
        self._entities: dict[str, Entity] = {}
        self._children: dict[str, dict[str, None]] = {}
        for entity in entities:
            self._put(entity)

    def _link(self, entity: Entity) -> None:
        if entity.parent_id is not None:
            self._children.setdefault(entity.parent_id, {})[entity.id] = None

    def _unlink(self, entity: Entity) -> None:
        if entity.parent_id is None:
            return
        siblings = self._children.get(entity.parent_id)
        if siblings is not None:
            siblings.pop(entity.id, None)
            if not siblings:
                del self._children[entity.parent_id]

    def _put(self, entity: Entity) -> None:
        previous = self._entities.get(entity.id)
        if previous is not None and previous.parent_id != entity.parent_id:
            self._unlink(previous)
        self._entities[entity.id] = entity
        if previous is None or previous.parent_id != entity.parent_id:
            self._link(entity)

    def fork(self) -> "EntityGraph":
        """Return an independent copy for a copy-on-write transition."""
        clone = EntityGraph()
        clone._entities = dict(self._entities)
        clone._children = {parent_id: dict(child_ids) for parent_id, child_ids in self._children.items()}
        return clone

    def get(self, entity_id: str) -> Entity | None:
        """Get an entity by id, or None if absent."""
        return self._entities.get(entity_id)

    def children(self, parent_id: str) -> list[Entity]:
        """Get all entities whose parent is ``parent_id``, in insertion order."""
        return [self._entities[child_id] for child_id in self._children.get(parent_id, {})]

    def upsert(self, entity: Entity) -> Entity:
        """Insert or fully replace an entity.

        Items are re-validated against the laundry invariant and silently
        coerced when they violate it.

        Args:
            entity: Entity to store

        Returns:
            The entity as stored
        """
        if isinstance(entity, Item):
            entity = enforce_laundry_invariant(entity)
        self._put(entity)
        return entity

    def put(self, entity: Entity) -> None:
        """Store an entity exactly as given, without invariant checks.

        Used by transitions that decide an item's status themselves (moves into
        laundry containers, tag merges).
        """
        self._put(entity)

    def remove_all(self, entity_ids: Iterable[str]) -> None:
        """Remove the given entities. Unknown ids are ignored."""
        for entity_id in entity_ids:
            entity = self._entities.pop(entity_id, None)
            if entity is None:
                continue
            self._unlink(entity)
            self._children.pop(entity_id, None)

    def descendants(self, entity_ids: Iterable[str], exclude: Collection[str] = ()) -> list[str]:
        """Compute the descendant closure of a set of ids.

        Args:
            entity_ids: Starting ids; ids not in the graph are skipped
            exclude: Ids left out of the closure together with their subtrees

        Returns:
            The existing starting ids plus every transitive child, breadth first
        """
        closure: dict[str, None] = {}
        queue = [entity_id for entity_id in entity_ids if entity_id in self._entities]
        while queue:
            entity_id = queue.pop(0)
            if entity_id in closure or entity_id in exclude:
                continue
            closure[entity_id] = None
            queue.extend(self._children.get(entity_id, {}))
        return list(closure)

    def ancestors(self, entity_id: str) -> list[str]:
        """Ids from the entity's parent up to its root."""
        chain: list[str] = []
        entity = self._entities.get(entity_id)
        while entity is not None and entity.parent_id is not None:
            if entity.parent_id in chain:
                logger.warning("Cycle detected in parent chain", entity_id=entity_id)
                break
            chain.append(entity.parent_id)
            entity = self._entities.get(entity.parent_id)
        return chain

    def is_within(self, entity_id: str, ancestor_id: str) -> bool:
        """Check whether an entity is ``ancestor_id`` or lies beneath it."""
        return entity_id == ancestor_id or ancestor_id in self.ancestors(entity_id)

    def would_create_cycle(self, entity_id: str, new_parent_id: str) -> bool:
        """Check whether reparenting ``entity_id`` under ``new_parent_id`` closes a loop."""
        return self.is_within(new_parent_id, entity_id)

    def path(self, entity_id: str) -> str:
        """Breadcrumb path of an entity, Property ancestors omitted.

        Returns:
            Names joined by " / ", or "" for roots and unknown ids
        """
        names: list[str] = []
        seen: set[str] = set()
        entity = self._entities.get(entity_id)
        while entity is not None and entity.parent_id is not None and entity.id not in seen:
            seen.add(entity.id)
            names.append(entity.name)
            parent = self._entities.get(entity.parent_id)
            if parent is None or parent.type is EntityType.PROPERTY:
                break
            entity = parent
        return " / ".join(reversed(names))

    def items(self) -> Iterator[Item]:
        """Iterate all items."""
        for entity in self._entities.values():
            if isinstance(entity, Item):
                yield entity

    def containers(self) -> Iterator[Container]:
        """Iterate all containers."""
        for entity in self._entities.values():
            if isinstance(entity, Container):
                yield entity

    def entities(self) -> Mapping[str, Entity]:
        """Read-only view of the id -> entity table."""
        return MappingProxyType(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityGraph):
            return NotImplemented
        return self._entities == other._entities

    def __repr__(self) -> str:
        return f"EntityGraph({len(self._entities)} entities)"
