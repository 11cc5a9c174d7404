"""Data models for inventory manager."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable

ROOT_ID = "root"
MISC_ROOT_ID = "misc_root"
LAUNDRY_DIRTY_ID = "laundry_dirty"
LAUNDRY_WASHING_ID = "laundry_washing"
LAUNDRY_DRYING_ID = "laundry_drying"
LAUNDRY_CLEAN_ID = "laundry_clean"

LAUNDRY_CONTAINER_IDS = (LAUNDRY_DIRTY_ID, LAUNDRY_WASHING_ID, LAUNDRY_DRYING_ID, LAUNDRY_CLEAN_ID)
FIXED_IDS = frozenset((ROOT_ID, MISC_ROOT_ID) + LAUNDRY_CONTAINER_IDS)


class EntityType(str, Enum):
    """Discriminant of the entity variants, valued as on the wire."""

    PROPERTY = "PROPERTY"
    ROOM = "ROOM"
    UNIT = "UNIT"
    COMPARTMENT = "COMPARTMENT"
    CONTAINER = "CONTAINER"
    ITEM = "ITEM"
    LAUNDRY_LINK = "LAUNDRY_LINK"


class ItemStatus(str, Enum):
    """Laundry/placement status of an item."""

    PLACED = "Placed"
    DIRTY = "Dirty"
    WASHING = "Washing"
    CLEAN_UNPLACED = "Clean (Unplaced)"


class Capacity(str, Enum):
    """How full a container is."""

    EMPTY = "Empty"
    PLENTY_OF_SPACE = "Plenty of Space"
    GETTING_FULL = "Getting Full"
    FULL = "Full"


def unique_tags(tags: Iterable[str]) -> tuple[str, ...]:
    """Collapse duplicate tags, keeping first occurrence order."""
    return tuple(dict.fromkeys(tags))


@dataclass(frozen=True)
class CustomProperty:
    """Free-form key/value attached to an entity."""

    id: str
    key: str
    value: str = ""


@dataclass(frozen=True)
class Entity:
    """Base of every located object in the inventory."""

    type: ClassVar[EntityType]

    id: str
    name: str
    parent_id: str | None = None
    custom_props: tuple[CustomProperty, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "custom_props", tuple(self.custom_props))


@dataclass(frozen=True)
class Property(Entity):
    """Top-level root of a hierarchy."""

    type: ClassVar[EntityType] = EntityType.PROPERTY


@dataclass(frozen=True)
class Room(Entity):
    type: ClassVar[EntityType] = EntityType.ROOM


@dataclass(frozen=True)
class Unit(Entity):
    type: ClassVar[EntityType] = EntityType.UNIT


@dataclass(frozen=True)
class Compartment(Entity):
    type: ClassVar[EntityType] = EntityType.COMPARTMENT


@dataclass(frozen=True)
class Container(Entity):
    """Anything that holds items, optionally with a fill level."""

    type: ClassVar[EntityType] = EntityType.CONTAINER

    capacity: Capacity | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.capacity is not None:
            object.__setattr__(self, "capacity", Capacity(self.capacity))


@dataclass(frozen=True)
class Item(Entity):
    """A countable, taggable thing with a laundry/placement status."""

    type: ClassVar[EntityType] = EntityType.ITEM

    quantity: int = 1
    tags: tuple[str, ...] = ()
    status: ItemStatus = ItemStatus.CLEAN_UNPLACED

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.quantity < 1:
            raise ValueError(f"Item quantity must be at least 1, got {self.quantity}")
        object.__setattr__(self, "tags", unique_tags(self.tags))
        object.__setattr__(self, "status", ItemStatus(self.status))


@dataclass(frozen=True)
class LaundryLink(Entity):
    """Shortcut to the laundry items carrying a given tag."""

    type: ClassVar[EntityType] = EntityType.LAUNDRY_LINK

    linked_tag: str = ""


ENTITY_CLASSES: dict[EntityType, type[Entity]] = {
    EntityType.PROPERTY: Property,
    EntityType.ROOM: Room,
    EntityType.UNIT: Unit,
    EntityType.COMPARTMENT: Compartment,
    EntityType.CONTAINER: Container,
    EntityType.ITEM: Item,
    EntityType.LAUNDRY_LINK: LaundryLink,
}


@dataclass(frozen=True)
class Clipboard:
    """Entity ids pending a paste."""

    entity_ids: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entity_ids", tuple(self.entity_ids))
