"""Configuration for inventory-manager, stored in YAML files."""

from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger()

CONFIG_DIR_NAME = ".inventory-manager"
CONFIG_FILE_NAME = "config.yaml"
DEFAULT_STORE_FILE = "inventory.json"
STORE_PATH_KEY = "store.path"


class Config:
    """YAML-backed settings with local and global scopes.

    Local settings live in ``.inventory-manager/config.yaml`` under the
    current directory, global ones in ``~/.inventory-manager/config.yaml``.
    Lookups check the local file first and fall back to the global one.
    """

    def __init__(self, use_global: bool = False, config_dir: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            use_global: If True, use global config only. If False, use local config with global fallback.
            config_dir: Custom directory holding the config file (overrides the default location)
        """
        if config_dir is not None:
            self.config_dir = Path(config_dir)
        elif use_global:
            self.config_dir = Path.home() / CONFIG_DIR_NAME
        else:
            self.config_dir = Path.cwd() / CONFIG_DIR_NAME
        self.is_global = use_global
        self.config_file = self.config_dir / CONFIG_FILE_NAME

        self._config: dict[str, Any] = self._read(self.config_file)

        self._global_config: dict[str, Any] = {}
        if not self.is_global:
            global_file = Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME
            if global_file != self.config_file and global_file.exists():
                try:
                    self._global_config = self._read(global_file)
                except ValueError as e:
                    logger.warning("Failed to load global config", error=str(e))

        logger.debug("Config initialized", config_file=str(self.config_file), is_global=self.is_global)

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        """Read a YAML config file.

        Returns:
            Settings dictionary (empty if the file does not exist)
        """
        if not path.exists():
            logger.debug("Config file does not exist", config_file=str(path))
            return {}

        try:
            with open(path, "r") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load config", config_file=str(path), error=str(e))
            raise ValueError(f"Failed to load config from {path}: {e}") from e
        if not isinstance(config, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        logger.debug("Config loaded", keys=list(config.keys()))
        return config

    def _save(self) -> None:
        """Write the settings of this scope back to disk."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False)
            logger.debug("Config saved", config_file=str(self.config_file))
        except OSError as e:
            logger.error("Failed to save config", error=str(e))
            raise ValueError(f"Failed to save config to {self.config_file}: {e}") from e

    def get(self, key: str, default: str | None = None) -> str | None:
        """Get a setting, falling back to the global scope for local configs."""
        if key in self._config:
            return self._config[key]
        if not self.is_global and key in self._global_config:
            logger.debug("Using global config value", key=key)
            return self._global_config[key]
        return default

    def set(self, key: str, value: str) -> None:
        """Set a setting in this scope and save it."""
        logger.debug("Setting config value", key=key)
        self._config[key] = value
        self._save()

    def unset(self, key: str) -> None:
        """Remove a setting from this scope."""
        logger.debug("Unsetting config value", key=key)
        if key in self._config:
            del self._config[key]
            self._save()

    def list(self) -> dict[str, str]:
        """All settings visible from this scope; local values win over global ones."""
        if self.is_global:
            return dict(self._config)
        merged = dict(self._global_config)
        merged.update(self._config)
        return merged

    def store_path(self) -> Path:
        """Snapshot file the CLI reads and writes.

        Relative paths are resolved against the current directory.
        """
        configured = self.get(STORE_PATH_KEY)
        if configured:
            return Path(configured).expanduser()
        return Path.cwd() / CONFIG_DIR_NAME / DEFAULT_STORE_FILE


def get_config(use_global: bool = False) -> Config:
    """Get a configuration instance.

    Args:
        use_global: If True, return global config. If False, return local config with global fallback.

    Returns:
        Config instance
    """
    return Config(use_global=use_global)
