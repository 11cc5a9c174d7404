"""Backend implementations."""

from inventory_manager.backends.json_file import JsonFileBackend

__all__ = ["JsonFileBackend"]
