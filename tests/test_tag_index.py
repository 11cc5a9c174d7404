"""Tests for tag index and placement suggestions."""

import pytest

from inventory_manager.actions import MoveEntities, SetItemStatus
from inventory_manager.models import LAUNDRY_WASHING_ID, ItemStatus
from inventory_manager.reducer import reduce
from inventory_manager.state import InventoryState
from inventory_manager.tag_index import (
    TagIndex,
    browse_containers,
    build_tag_index,
    group_unplaced_items,
    laundry_items,
    laundry_summary,
    placement_destinations,
    property_keys,
    selection_tags,
    suggest_container,
)


def test_build_tag_index(house: InventoryState) -> None:
    """Test tag counts and per-container aggregates."""
    index = build_tag_index(house.graph)
    assert index.tag_counts == {"clothes": 5, "laundry": 4}
    assert index.container_tags == {"sock_box": {"clothes", "laundry"}, "shirt_box": {"clothes"}}
    assert index.container_quantities == {"sock_box": 3, "shirt_box": 1}


def test_placed_items_in_misc_tree_are_ignored(house: InventoryState) -> None:
    """Test that items still under the misc root never shape suggestions."""
    state = reduce(house, SetItemStatus(["loose_sock"], ItemStatus.PLACED))
    index = build_tag_index(state.graph)
    assert "misc_box" not in index.container_tags


def test_suggest_container(house: InventoryState) -> None:
    """Test picking the container with the largest tag overlap."""
    index = build_tag_index(house.graph)
    assert suggest_container(["laundry", "clothes"], index) == "sock_box"
    assert suggest_container(["wool"], index) is None
    assert suggest_container([], index) is None


def test_suggest_container_tie_goes_to_first() -> None:
    """Test that ties resolve to the first container in iteration order."""
    index = TagIndex(container_tags={"a": {"x", "y"}, "b": {"x", "y"}, "c": {"x"}})
    assert suggest_container(["x", "y"], index) == "a"


def test_group_unplaced_items(house: InventoryState) -> None:
    """Test grouping of clean unplaced items with suggestions."""
    groups = group_unplaced_items(house.graph)
    assert len(groups) == 1
    group = groups[0]
    assert [item.id for item in group.items] == ["loose_sock"]
    assert group.total_quantity == 1
    assert group.suggestion == "sock_box"
    assert group.representative.name == "Sock"


def test_laundry_summary(house: InventoryState) -> None:
    """Test quantities per laundry stage."""
    assert laundry_summary(house.graph) == {
        ItemStatus.DIRTY: 0,
        ItemStatus.WASHING: 0,
        ItemStatus.CLEAN_UNPLACED: 1,
    }


def test_placement_destinations(house: InventoryState) -> None:
    """Test destination list sorted by path, misc containers excluded."""
    ids = [container.id for container in placement_destinations(house.graph)]
    assert ids[:2] == ["shirt_box", "sock_box"]
    assert "misc_box" not in ids


def test_selection_helpers(house: InventoryState) -> None:
    """Test tag and property key helpers."""
    assert selection_tags(house.graph, ["socks", "shirt", "bedroom", "missing"]) == ["clothes", "laundry"]
    assert property_keys(house.graph) == []


def test_browse_containers_by_name(house: InventoryState) -> None:
    """Test the container directory sorted by name, misc containers excluded."""
    summaries = browse_containers(house.graph)
    names = [summary.container.name for summary in summaries]
    assert names == sorted(names, key=str.casefold)
    assert "Misc Box" not in names
    sock_box = next(summary for summary in summaries if summary.container.id == "sock_box")
    assert sock_box.path == "Bedroom / Wardrobe / Top Drawer"
    assert sock_box.tags == ["clothes", "laundry"]
    assert sock_box.quantity == 3


def test_browse_containers_filtered_by_tag(house: InventoryState) -> None:
    """Test filtering the directory by tag and sorting by quantity."""
    assert [s.container.id for s in browse_containers(house.graph, tag="laundry")] == ["sock_box"]
    by_items = browse_containers(house.graph, tag="clothes", sort="items", descending=True)
    assert [s.container.id for s in by_items] == ["sock_box", "shirt_box"]
    by_tags = browse_containers(house.graph, tag="clothes", sort="tags")
    assert [s.container.id for s in by_tags] == ["shirt_box", "sock_box"]
    assert browse_containers(house.graph, tag="wool") == []


def test_browse_containers_rejects_unknown_sort(house: InventoryState) -> None:
    """Test that an unknown sort key raises ValueError."""
    with pytest.raises(ValueError):
        browse_containers(house.graph, sort="colour")


def test_laundry_items(house: InventoryState) -> None:
    """Test per-stage item lists sorted by name."""
    state = reduce(house, MoveEntities(["socks"], LAUNDRY_WASHING_ID))
    stages = laundry_items(state.graph)
    assert [item.id for item in stages[ItemStatus.WASHING]] == ["socks"]
    assert stages[ItemStatus.DIRTY] == []
    assert [item.id for item in stages[ItemStatus.CLEAN_UNPLACED]] == ["loose_sock"]
