"""Tests for the CLI commands."""

import json
from itertools import count
from pathlib import Path

import pytest

from inventory_manager import cli, config_commands, prop_commands, tag_commands
from inventory_manager.backends import JsonFileBackend
from inventory_manager.models import LAUNDRY_DIRTY_ID, MISC_ROOT_ID, Capacity, Item, ItemStatus


@pytest.fixture
def store_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at a temporary inventory file with predictable ids."""
    path = tmp_path / "inventory.json"
    counter = count(1)
    monkeypatch.setattr(cli, "_store_path_override", path)
    monkeypatch.setattr(cli, "new_id", lambda: f"id{next(counter)}")
    return path


def load(path: Path):
    state = JsonFileBackend(path).load()
    assert state is not None
    return state.graph


def furnish() -> None:
    cli.add("room", "Bedroom")
    cli.add("container", "Sock Box", parent="id1")
    cli.add("item", "Socks", parent="id2", quantity=2, tags="clothes, laundry")


def test_add_creates_entities(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test creating entities from the command line."""
    furnish()
    graph = load(store_file)
    socks = graph.get("id3")
    assert isinstance(socks, Item)
    assert socks.parent_id == "id2"
    assert socks.quantity == 2
    assert socks.tags == ("clothes", "laundry")
    assert socks.status is ItemStatus.PLACED
    assert "Created Socks [item] (id3)" in capsys.readouterr().out


def test_add_in_misc_tree_defaults_to_unplaced(store_file: Path) -> None:
    """Test that items added under the misc root start unplaced."""
    cli.add("item", "Charger", parent=MISC_ROOT_ID, props="colour=white")
    charger = load(store_file).get("id1")
    assert isinstance(charger, Item)
    assert charger.status is ItemStatus.CLEAN_UNPLACED
    assert charger.custom_props[0].key == "colour"


def test_add_reports_coerced_status(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that a dirty status without the laundry tag is reported."""
    cli.add("item", "Mug", status="dirty")
    assert "Status set to Clean (Unplaced)" in capsys.readouterr().out


def test_add_with_unknown_parent_fails(store_file: Path) -> None:
    """Test that a missing parent exits with an error."""
    with pytest.raises(SystemExit):
        cli.add("room", "Attic", parent="nowhere")


def test_show(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test the tree view."""
    furnish()
    capsys.readouterr()
    cli.show("id2")
    out = capsys.readouterr().out
    assert "Path: Bedroom / Sock Box" in out
    assert "  Socks [item] (id3) x2 - Placed #clothes #laundry" in out


def test_edit(store_file: Path) -> None:
    """Test updating fields of an entity."""
    furnish()
    cli.edit("id3", name="Wool Socks", tags="wool")
    socks = load(store_file).get("id3")
    assert socks.name == "Wool Socks"  # type: ignore[union-attr]
    assert socks.tags == ("wool",)  # type: ignore[union-attr]


def test_move_and_laundry(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test moving into the dirty basket and the laundry summary."""
    furnish()
    cli.move(LAUNDRY_DIRTY_ID, "id3")
    assert load(store_file).get("id3").status is ItemStatus.DIRTY  # type: ignore[union-attr]
    capsys.readouterr()
    cli.laundry()
    assert "Dirty: 2" in capsys.readouterr().out


def test_copy_paste_and_delete(store_file: Path) -> None:
    """Test clipboard and cascading delete commands."""
    furnish()
    cli.copy("id2")
    cli.paste("id1")
    graph = load(store_file)
    assert len(graph.children("id1")) == 2

    cli.delete("id1")
    graph = load(store_file)
    assert "id1" not in graph
    assert "id3" not in graph


def test_unplaced_suggest_and_place(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test the unplaced item workflow."""
    furnish()
    cli.add("item", "Sock", parent=MISC_ROOT_ID, tags="laundry")
    capsys.readouterr()

    cli.unplaced()
    out = capsys.readouterr().out
    assert "○ Sock (x1) #laundry" in out
    assert "suggestion: Bedroom / Sock Box (id2)" in out

    cli.suggest("clothes")
    assert "(id2)" in capsys.readouterr().out

    cli.place("id2", "id4")
    sock = load(store_file).get("id4")
    assert sock.parent_id == "id2"  # type: ignore[union-attr]
    assert sock.status is ItemStatus.PLACED  # type: ignore[union-attr]


def test_status_and_capacity(store_file: Path) -> None:
    """Test status and capacity commands."""
    furnish()
    cli.status("washing", "id3")
    cli.capacity("id2", "getting-full")
    graph = load(store_file)
    assert graph.get("id3").status is ItemStatus.WASHING  # type: ignore[union-attr]
    assert graph.get("id2").capacity is Capacity.GETTING_FULL  # type: ignore[union-attr]
    with pytest.raises(SystemExit):
        cli.capacity("id1", "full")


def test_export_import_and_reset(store_file: Path, tmp_path: Path) -> None:
    """Test exporting, resetting and importing the inventory."""
    furnish()
    export_file = tmp_path / "backup.json"
    cli.export(export_file)
    assert "id3" in json.loads(export_file.read_text(encoding="utf-8"))["entities"]

    cli.reset()
    assert "id1" not in load(store_file)

    cli.import_(export_file)
    assert "id3" in load(store_file)


def test_import_invalid_file(store_file: Path, tmp_path: Path) -> None:
    """Test that an invalid import leaves the inventory alone."""
    furnish()
    bad = tmp_path / "bad.json"
    bad.write_text('{"entities": {}}', encoding="utf-8")
    with pytest.raises(SystemExit):
        cli.import_(bad)
    assert "id3" in load(store_file)


def test_tag_commands(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test the tag sub-commands."""
    furnish()
    tag_commands.rename("clothes", "garments")
    tag_commands.add("warm,wool", "id3")
    tag_commands.remove("wool", "id3")
    tag_commands.replace("warm", "cosy", "id3")
    assert load(store_file).get("id3").tags == ("garments", "laundry", "cosy")  # type: ignore[union-attr]

    tag_commands.merge("textile", "garments", "cosy")
    tag_commands.delete("laundry")
    assert load(store_file).get("id3").tags == ("textile",)  # type: ignore[union-attr]

    capsys.readouterr()
    tag_commands.list_tags()
    assert "#textile (2)" in capsys.readouterr().out


def test_prop_commands(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test the property sub-commands."""
    cli.add("room", "Bedroom", props="floor=1")
    prop_commands.rename("floor", "level")
    capsys.readouterr()
    prop_commands.list_keys()
    assert "level" in capsys.readouterr().out

    prop_commands.delete("level")
    assert load(store_file).get("id1").custom_props == ()  # type: ignore[union-attr]


def test_config_commands(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """Test the config sub-commands."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path / "home")
    monkeypatch.chdir(tmp_path)

    config_commands.set("store.path", "stuff.json")
    config_commands.get("store.path")
    assert "store.path = stuff.json" in capsys.readouterr().out

    config_commands.list_settings()
    assert "Inventory file: stuff.json" in capsys.readouterr().out

    config_commands.unset("store.path")
    config_commands.get("store.path")
    assert "store.path is not set" in capsys.readouterr().out


def test_import_undecodable_file(store_file: Path, tmp_path: Path) -> None:
    """Test that an import file with invalid UTF-8 is reported, not raised."""
    furnish()
    bad = tmp_path / "bad.json"
    bad.write_bytes(b'{"entities": {"root": "\xff\xfe"}}')
    with pytest.raises(SystemExit):
        cli.import_(bad)
    assert "id3" in load(store_file)


def test_damaged_store_starts_fresh(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that commands still work when the store file is damaged."""
    store_file.write_bytes(b"\xff\xfe garbage")
    cli.add("room", "Bedroom")
    assert "Created Bedroom" in capsys.readouterr().out
    assert "id1" in load(store_file)


def test_reset_clears_backend(store_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that reset removes the saved file before writing a fresh inventory."""
    furnish()
    cleared: list[Path] = []
    original_clear = JsonFileBackend.clear

    def clear(self: JsonFileBackend) -> None:
        cleared.append(self.path)
        original_clear(self)

    monkeypatch.setattr(JsonFileBackend, "clear", clear)
    cli.reset()
    assert cleared == [store_file]
    assert "id1" not in load(store_file)


def test_paste_with_empty_selection(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that copying nothing leaves nothing to paste."""
    furnish()
    cli.copy()
    capsys.readouterr()
    cli.paste("id1")
    assert "Clipboard is empty" in capsys.readouterr().out


def test_unplaced_lists_destinations(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that placement destinations follow the unplaced groups."""
    furnish()
    cli.add("item", "Sock", parent=MISC_ROOT_ID)
    capsys.readouterr()
    cli.unplaced()
    out = capsys.readouterr().out
    assert "Destinations" in out
    assert "  Bedroom / Sock Box (id2)" in out


def test_laundry_lists_items(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that the laundry view lists the items in each stage."""
    furnish()
    cli.move(LAUNDRY_DIRTY_ID, "id3")
    capsys.readouterr()
    cli.laundry()
    out = capsys.readouterr().out
    assert "Dirty: 2\n  Socks x2 (id3)" in out


def test_tag_containers(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test the container directory command."""
    furnish()
    cli.add("container", "Empty Box", parent="id1")
    capsys.readouterr()

    tag_commands.containers(tag="laundry")
    out = capsys.readouterr().out
    assert "Sock Box (id2) in Bedroom - 2 item(s)" in out
    assert "#clothes #laundry" in out
    assert "Empty Box" not in out

    tag_commands.containers(sort="items", descending=True)
    out = capsys.readouterr().out
    assert out.index("Sock Box") < out.index("Empty Box")


def test_tag_remove_reports_selection_tags(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that bulk tag edits print the tags left on the selection."""
    furnish()
    capsys.readouterr()
    tag_commands.remove("clothes", "id3")
    assert "Tags on selection: #laundry" in capsys.readouterr().out
    tag_commands.replace("laundry", "wash", "id3")
    assert "Tags on selection: #wash" in capsys.readouterr().out
