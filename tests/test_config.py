"""Tests for YAML configuration."""

from pathlib import Path

import pytest
import yaml

from inventory_manager.config import Config, get_config


@pytest.fixture
def dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> tuple[Path, Path]:
    """Isolated home and working directories."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.chdir(work)
    return home, work


def test_set_and_get_local(dirs: tuple[Path, Path]) -> None:
    """Test writing a local setting."""
    _, work = dirs
    config = get_config()
    config.set("store.path", "/tmp/stuff.json")

    assert get_config().get("store.path") == "/tmp/stuff.json"
    saved = yaml.safe_load((work / ".inventory-manager" / "config.yaml").read_text())
    assert saved == {"store.path": "/tmp/stuff.json"}


def test_local_falls_back_to_global(dirs: tuple[Path, Path]) -> None:
    """Test that global settings apply unless overridden locally."""
    get_config(use_global=True).set("store.path", "/global.json")
    get_config(use_global=True).set("other", "g")
    get_config().set("other", "l")

    config = get_config()
    assert config.get("store.path") == "/global.json"
    assert config.list() == {"store.path": "/global.json", "other": "l"}
    assert get_config(use_global=True).list() == {"store.path": "/global.json", "other": "g"}


def test_unset(dirs: tuple[Path, Path]) -> None:
    """Test removing a setting."""
    config = get_config()
    config.set("store.path", "x.json")
    config.unset("store.path")
    config.unset("never-set")
    assert get_config().get("store.path") is None
    assert get_config().get("store.path", "default") == "default"


def test_store_path_default_and_configured(dirs: tuple[Path, Path]) -> None:
    """Test resolving the inventory file location."""
    _, work = dirs
    assert get_config().store_path() == work / ".inventory-manager" / "inventory.json"
    get_config().set("store.path", "~/inv.json")
    assert get_config().store_path() == Path("~/inv.json").expanduser()


def test_invalid_config_file(dirs: tuple[Path, Path]) -> None:
    """Test that a config file that is not a mapping is rejected."""
    _, work = dirs
    (work / ".inventory-manager").mkdir()
    (work / ".inventory-manager" / "config.yaml").write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        Config()


def test_custom_config_dir(tmp_path: Path, dirs: tuple[Path, Path]) -> None:
    """Test using an explicit config directory."""
    config = Config(config_dir=tmp_path / "custom")
    config.set("a", "b")
    assert (tmp_path / "custom" / "config.yaml").exists()
