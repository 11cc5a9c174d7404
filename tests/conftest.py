"""Shared fixtures: a small furnished inventory."""

import pytest

from inventory_manager.actions import SaveEntity
from inventory_manager.models import MISC_ROOT_ID, ROOT_ID, Compartment, Container, Item, ItemStatus, Room, Unit
from inventory_manager.reducer import reduce
from inventory_manager.state import InventoryState, initial_state


@pytest.fixture
def house() -> InventoryState:
    """Fresh inventory with a bedroom wardrobe, a misc box and a few items.

    Layout::

        root
          bedroom (Room)
            wardrobe (Unit)
              drawer (Compartment)
                sock_box (Container) -> socks [clothes, laundry] Placed x3
              shirt_box (Container) -> shirt [clothes] Placed
        misc_root
          misc_box (Container) -> loose_sock [clothes, laundry] Clean (Unplaced)
    """
    state = initial_state()
    for entity in (
        Room(id="bedroom", name="Bedroom", parent_id=ROOT_ID),
        Unit(id="wardrobe", name="Wardrobe", parent_id="bedroom"),
        Compartment(id="drawer", name="Top Drawer", parent_id="wardrobe"),
        Container(id="sock_box", name="Sock Box", parent_id="drawer"),
        Container(id="shirt_box", name="Shirt Box", parent_id="wardrobe"),
        Container(id="misc_box", name="Misc Box", parent_id=MISC_ROOT_ID),
        Item(id="socks", name="Socks", parent_id="sock_box", quantity=3, tags=("clothes", "laundry"), status=ItemStatus.PLACED),
        Item(id="shirt", name="Shirt", parent_id="shirt_box", tags=("clothes",), status=ItemStatus.PLACED),
        Item(id="loose_sock", name="Sock", parent_id="misc_box", tags=("clothes", "laundry")),
    ):
        state = reduce(state, SaveEntity(entity))
    return state
