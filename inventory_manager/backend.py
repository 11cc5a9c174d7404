"""Backend interface for inventory persistence."""

from abc import ABC, abstractmethod
from collections.abc import Callable

import structlog

from inventory_manager.state import InventoryState
from inventory_manager.store import InventoryStore

logger = structlog.get_logger()


class Backend(ABC):
    """Abstract base class for snapshot persistence backends.

    A backend only loads and stores whole snapshots. It never mutates the
    inventory itself; the store calls ``save`` after every state change once
    the backend is attached.
    """

    @abstractmethod
    def load(self) -> InventoryState | None:
        """Load the saved state, or None if nothing has been saved yet."""
        pass

    @abstractmethod
    def save(self, state: InventoryState) -> None:
        """Durably store a state snapshot."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the saved state."""
        pass

    def attach(self, store: InventoryStore) -> Callable[[], None]:
        """Save every state the store commits from now on.

        Returns:
            Function that detaches the backend again
        """
        return store.subscribe(self.save)


def open_store(backend: Backend) -> InventoryStore:
    """Create a store from the backend's saved state and attach the backend.

    A saved state that cannot be read or decoded is logged and replaced by a
    fresh inventory, as if nothing had been saved.
    """
    try:
        state = backend.load()
    except ValueError as e:
        logger.error("Failed to load saved inventory", error=str(e))
        state = None
    store = InventoryStore(state)
    backend.attach(store)
    logger.debug("Store opened", entities=len(store.state.graph))
    return store
