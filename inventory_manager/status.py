"""Item status rules: the laundry invariant and laundry container statuses."""

import dataclasses

import structlog

from inventory_manager.models import (
    LAUNDRY_CLEAN_ID,
    LAUNDRY_DIRTY_ID,
    LAUNDRY_DRYING_ID,
    LAUNDRY_WASHING_ID,
    Item,
    ItemStatus,
)

logger = structlog.get_logger()

LAUNDRY_TAG = "laundry"

LAUNDRY_STATUSES = frozenset((ItemStatus.DIRTY, ItemStatus.WASHING))

# Status an item takes when moved into one of the fixed laundry containers.
LAUNDRY_CONTAINER_STATUS: dict[str, ItemStatus] = {
    LAUNDRY_DIRTY_ID: ItemStatus.DIRTY,
    LAUNDRY_WASHING_ID: ItemStatus.WASHING,
    LAUNDRY_DRYING_ID: ItemStatus.WASHING,
    LAUNDRY_CLEAN_ID: ItemStatus.CLEAN_UNPLACED,
}


def is_laundry_item(item: Item) -> bool:
    """Check whether an item carries the laundry tag."""
    return LAUNDRY_TAG in item.tags


def violates_laundry_invariant(item: Item) -> bool:
    """Check whether an item is Dirty/Washing without the laundry tag."""
    return item.status in LAUNDRY_STATUSES and not is_laundry_item(item)


def enforce_laundry_invariant(item: Item) -> Item:
    """Downgrade a Dirty/Washing item lacking the laundry tag to Clean (Unplaced).

    Args:
        item: Item to check

    Returns:
        The same item if it is consistent, otherwise a corrected copy
    """
    if not violates_laundry_invariant(item):
        return item
    logger.debug("Coercing item status", entity_id=item.id, status=item.status.value)
    return dataclasses.replace(item, status=ItemStatus.CLEAN_UNPLACED)


def status_for_destination(destination_id: str) -> ItemStatus | None:
    """Status forced on items moved into a destination, if it is a laundry container."""
    return LAUNDRY_CONTAINER_STATUS.get(destination_id)
