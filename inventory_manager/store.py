"""Inventory store: owns the current state and serializes dispatches."""

import threading
from collections.abc import Callable

import structlog

from inventory_manager.actions import LoadState
from inventory_manager.reducer import reduce
from inventory_manager.state import InventoryState, initial_state

logger = structlog.get_logger()

Listener = Callable[[InventoryState], None]


class InventoryStore:
    """Holder of the current inventory state.

    Actions are applied one at a time under a lock, so concurrent callers
    never interleave a transition. After each transition that changes the
    state, subscribers are called with the new snapshot. A subscriber that
    raises is logged and skipped; the new state stays committed.
    """

    def __init__(self, state: InventoryState | None = None) -> None:
        """Initialize the store.

        Args:
            state: Starting state (defaults to a fresh inventory)
        """
        self._state = state if state is not None else initial_state()
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> InventoryState:
        """Current (immutable) state."""
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a post-commit listener.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: object) -> InventoryState:
        """Apply an action and notify listeners if the state changed.

        Returns:
            The state after the action
        """
        with self._lock:
            previous = self._state
            self._state = reduce(previous, action)
            if self._state is not previous:
                logger.debug("State updated", action=type(action).__name__)
                self._notify(self._state)
            return self._state

    def reset(self) -> InventoryState:
        """Discard everything and start over from a fresh inventory."""
        logger.info("Resetting inventory")
        return self.dispatch(LoadState(initial_state()))

    def _notify(self, state: InventoryState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error("State listener failed", listener=getattr(listener, "__name__", repr(listener)), error=str(e))
