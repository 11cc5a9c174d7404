"""Tag management commands for inventory manager CLI."""

from typing import Literal

from cyclopts import App

from inventory_manager.actions import BulkAddTags, BulkRemoveTags, BulkReplaceTag, DeleteTag, MergeTags, RenameTag
from inventory_manager.graph import EntityGraph
from inventory_manager.tag_index import browse_containers, build_tag_index, selection_tags

tag_app = App(name="tag", help="Manage item tags")


def _split(tags: str) -> tuple[str, ...]:
    from inventory_manager.cli import parse_tags

    return parse_tags(tags)


def _print_selection_tags(graph: EntityGraph, entity_ids: tuple[str, ...]) -> None:
    tags = selection_tags(graph, entity_ids)
    print(f"Tags on selection: {' '.join('#' + tag for tag in tags) if tags else '(none)'}")


@tag_app.command(name="list")
def list_tags() -> None:
    """List every tag with the total quantity of items carrying it."""
    from inventory_manager.cli import get_store

    counts = build_tag_index(get_store().state.graph).tag_counts
    if not counts:
        print("No tags in use")
        return

    print("Tags:\n")
    for tag, count in sorted(counts.items(), key=lambda entry: (-entry[1], entry[0])):
        print(f"  #{tag} ({count})")


@tag_app.command
def rename(old_name: str, new_name: str) -> None:
    """Rename a tag on every item."""
    from inventory_manager.cli import get_store

    get_store().dispatch(RenameTag(old_name, new_name))
    print(f"Renamed #{old_name} to #{new_name}")


@tag_app.command
def merge(target_tag: str, *source_tags: str) -> None:
    """Fold several tags into one target tag."""
    from inventory_manager.cli import get_store

    get_store().dispatch(MergeTags(source_tags, target_tag))
    print(f"Merged {len(source_tags)} tag(s) into #{target_tag}")


@tag_app.command
def delete(tag_name: str) -> None:
    """Remove a tag from every item."""
    from inventory_manager.cli import get_store

    get_store().dispatch(DeleteTag(tag_name))
    print(f"Deleted #{tag_name}")


@tag_app.command
def add(tags: str, *entity_ids: str) -> None:
    """Add comma separated tags to the given items."""
    from inventory_manager.cli import get_store

    get_store().dispatch(BulkAddTags(entity_ids, _split(tags)))
    print(f"Tagged {len(entity_ids)} item(s)")


@tag_app.command
def remove(tags: str, *entity_ids: str) -> None:
    """Remove comma separated tags from the given items."""
    from inventory_manager.cli import get_store

    state = get_store().dispatch(BulkRemoveTags(entity_ids, _split(tags)))
    print(f"Untagged {len(entity_ids)} item(s)")
    _print_selection_tags(state.graph, entity_ids)


@tag_app.command
def replace(old_tag: str, new_tag: str, *entity_ids: str) -> None:
    """Swap one tag for another on the given items."""
    from inventory_manager.cli import get_store

    state = get_store().dispatch(BulkReplaceTag(entity_ids, old_tag, new_tag))
    print(f"Replaced #{old_tag} with #{new_tag} on {len(entity_ids)} item(s)")
    _print_selection_tags(state.graph, entity_ids)


@tag_app.command
def containers(
    tag: str | None = None,
    sort: Literal["name", "items", "tags"] = "name",
    descending: bool = False,
) -> None:
    """List containers with the tags of the items placed in them.

    Args:
        tag: Only show containers holding an item with this tag
        sort: Order by container name, placed item quantity or number of tags
        descending: Reverse the order
    """
    from inventory_manager.cli import get_store

    summaries = browse_containers(get_store().state.graph, tag=tag, sort=sort, descending=descending)
    if not summaries:
        print(f"No containers hold items tagged #{tag}" if tag else "No containers")
        return

    print(f"Containers ({len(summaries)}):\n")
    for summary in summaries:
        container = summary.container
        capacity = f" [{container.capacity.value}]" if container.capacity is not None else ""
        location = f" in {summary.path}" if summary.path else ""
        print(f"  {container.name} ({container.id}){location}{capacity} - {summary.quantity} item(s)")
        if summary.tags:
            print(f"    #{' #'.join(summary.tags)}")
