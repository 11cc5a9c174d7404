"""Actions: the complete set of state transitions the reducer understands."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from inventory_manager.models import Capacity, Entity, ItemStatus

if TYPE_CHECKING:
    from inventory_manager.state import InventoryState


@dataclass(frozen=True)
class Action:
    """Base class for every action."""

    def __post_init__(self) -> None:
        for name in ("ids", "tags", "source_tags"):
            if hasattr(self, name):
                object.__setattr__(self, name, tuple(getattr(self, name)))


@dataclass(frozen=True)
class LoadState(Action):
    """Replace the whole state."""

    state: "InventoryState"


@dataclass(frozen=True)
class SaveEntity(Action):
    """Insert an entity, or replace the one with the same id."""

    entity: Entity


@dataclass(frozen=True)
class DeleteEntities(Action):
    """Delete entities together with all of their descendants."""

    ids: tuple[str, ...]


@dataclass(frozen=True)
class CopyEntities(Action):
    ids: tuple[str, ...]


@dataclass(frozen=True)
class PasteEntities(Action):
    destination_id: str


@dataclass(frozen=True)
class MoveEntities(Action):
    ids: tuple[str, ...]
    destination_id: str


@dataclass(frozen=True)
class PlaceMiscItems(Action):
    """Move unplaced items into a destination and mark them Placed."""

    ids: tuple[str, ...]
    destination_id: str


@dataclass(frozen=True)
class RenameTag(Action):
    old_name: str
    new_name: str


@dataclass(frozen=True)
class MergeTags(Action):
    source_tags: tuple[str, ...]
    target_tag: str


@dataclass(frozen=True)
class DeleteTag(Action):
    tag_name: str


@dataclass(frozen=True)
class BulkAddTags(Action):
    ids: tuple[str, ...]
    tags: tuple[str, ...]


@dataclass(frozen=True)
class BulkRemoveTags(Action):
    ids: tuple[str, ...]
    tags: tuple[str, ...]


@dataclass(frozen=True)
class BulkReplaceTag(Action):
    ids: tuple[str, ...]
    old_tag: str
    new_tag: str


@dataclass(frozen=True)
class SetContainerCapacity(Action):
    id: str
    capacity: Capacity | None


@dataclass(frozen=True)
class SetItemStatus(Action):
    ids: tuple[str, ...]
    status: ItemStatus


@dataclass(frozen=True)
class RenamePropertyKey(Action):
    old_key: str
    new_key: str


@dataclass(frozen=True)
class DeletePropertyKey(Action):
    key: str
