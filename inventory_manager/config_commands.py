"""Settings commands for inventory manager CLI."""

from cyclopts import App

from inventory_manager.config import get_config

config_app = App(name="config", help="Manage settings such as store.path")


def _scope(global_: bool) -> str:
    return "global" if global_ else "local"


@config_app.command
def set(key: str, value: str, global_: bool = False) -> None:
    """Store a setting.

    Args:
        key: Setting name, e.g. store.path
        value: Setting value
        global_: Write to ~/.inventory-manager instead of the current directory
    """
    get_config(use_global=global_).set(key, value)
    print(f"Set {key} = {value} ({_scope(global_)})")


@config_app.command
def unset(key: str, global_: bool = False) -> None:
    """Remove a setting.

    Args:
        key: Setting name
        global_: Remove from the global settings file
    """
    get_config(use_global=global_).unset(key)
    print(f"Unset {key} ({_scope(global_)})")


@config_app.command
def get(key: str, global_: bool = False) -> None:
    """Print one setting; local settings fall back to global ones."""
    value = get_config(use_global=global_).get(key)
    print(f"{key} is not set" if value is None else f"{key} = {value}")


@config_app.command(name="list")
def list_settings(global_: bool = False) -> None:
    """Print every visible setting and the inventory file in use."""
    config = get_config(use_global=global_)
    settings = config.list()
    if settings:
        print(f"Settings ({_scope(global_)}):\n")
        for key, value in settings.items():
            print(f"{key} = {value}")
    else:
        print(f"No {_scope(global_)} settings")
    print(f"\nInventory file: {config.store_path()}")
