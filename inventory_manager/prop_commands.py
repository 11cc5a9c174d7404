"""Custom property commands for inventory manager CLI."""

from cyclopts import App

from inventory_manager.actions import DeletePropertyKey, RenamePropertyKey
from inventory_manager.tag_index import property_keys

prop_app = App(name="prop", help="Manage custom property keys")


@prop_app.command(name="list")
def list_keys() -> None:
    """List the custom property keys in use."""
    from inventory_manager.cli import get_store

    keys = property_keys(get_store().state.graph)
    if not keys:
        print("No custom properties in use")
        return

    print("Property keys:\n")
    for key in keys:
        print(f"  {key}")


@prop_app.command
def rename(old_key: str, new_key: str) -> None:
    """Rename a property key on every entity."""
    from inventory_manager.cli import get_store

    get_store().dispatch(RenamePropertyKey(old_key, new_key))
    print(f"Renamed property {old_key} to {new_key}")


@prop_app.command
def delete(key: str) -> None:
    """Drop a property key from every entity."""
    from inventory_manager.cli import get_store

    get_store().dispatch(DeletePropertyKey(key))
    print(f"Deleted property {key}")
