"""JSON file backend: keeps the inventory snapshot in a local file."""

from pathlib import Path

import structlog

from inventory_manager.backend import Backend
from inventory_manager.snapshot import export_snapshot, import_snapshot
from inventory_manager.state import InventoryState

logger = structlog.get_logger()


class JsonFileBackend(Backend):
    """File-based backend storing the snapshot as a JSON document."""

    def __init__(self, path: str | Path) -> None:
        """Initialize JSON file backend.

        Args:
            path: Snapshot file (created on first save, parent directories included)
        """
        self.path = Path(path)
        logger.debug("Initializing JSON file backend", path=str(self.path))

    def load(self) -> InventoryState | None:
        """Load the snapshot file.

        Returns:
            The saved state, or None if the file does not exist

        Raises:
            SnapshotFormatError: If the file is not a valid snapshot
            ValueError: If the file cannot be read
        """
        if not self.path.exists():
            logger.debug("Snapshot file does not exist", path=str(self.path))
            return None

        try:
            data = self.path.read_bytes()
        except OSError as e:
            logger.error("Failed to read snapshot", path=str(self.path), error=str(e))
            raise ValueError(f"Failed to read inventory from {self.path}: {e}") from e

        state = import_snapshot(data)
        logger.info("Inventory loaded", path=str(self.path), entities=len(state.graph))
        return state

    def save(self, state: InventoryState) -> None:
        """Write the snapshot file.

        Raises:
            ValueError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(export_snapshot(state), encoding="utf-8")
            logger.debug("Inventory saved", path=str(self.path), entities=len(state.graph))
        except OSError as e:
            logger.error("Failed to save inventory", path=str(self.path), error=str(e))
            raise ValueError(f"Failed to save inventory to {self.path}: {e}") from e

    def clear(self) -> None:
        """Delete the snapshot file if present."""
        logger.info("Removing snapshot file", path=str(self.path))
        self.path.unlink(missing_ok=True)
