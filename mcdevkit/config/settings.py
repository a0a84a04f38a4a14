"""
Configuration management for mcdevkit.

Settings live in a YAML file in the user config directory and are layered
over built-in defaults. Setting the MCDEVKIT_HOME environment variable moves
both the config and data directories under it, which keeps test runs and
throwaway setups away from the real user directories.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from platformdirs import user_config_dir, user_data_dir

from ..constants import (
    DEFAULT_JAVA_EXECUTABLE, DEFAULT_MEMORY_MB, DEFAULT_PORT, DEFAULT_TIMEOUT_SECONDS,
    DOWNLOAD_CHUNK_SIZE, MOJANG_MANIFEST_URL, PAPER_API_URL, WORKSPACE_PARENT_FOLDER
)
from ..exceptions import ConfigurationError, ValidationError
from ..utils.validation import ServerValidator

logger = logging.getLogger(__name__)

APP_NAME = "mcdevkit"
HOME_ENV_VAR = "MCDEVKIT_HOME"


def _default_settings(data_dir: Path) -> Dict[str, Any]:
    return {
        "servers": {
            "default_memory": DEFAULT_MEMORY_MB,
            "default_port": DEFAULT_PORT,
            "java_executable": DEFAULT_JAVA_EXECUTABLE,
        },
        "workspace": {
            # None picks /var/tmp or the platform temp directory
            "temp_root": None,
            "parent_folder": WORKSPACE_PARENT_FOLDER,
        },
        "api": {
            "version_manifest_url": MOJANG_MANIFEST_URL,
            "paper_url": PAPER_API_URL,
        },
        "downloads": {
            "timeout": DEFAULT_TIMEOUT_SECONDS,
            "chunk_size": DOWNLOAD_CHUNK_SIZE,
        },
        "logging": {
            "level": "INFO",
            "file_logging": True,
            "log_file": str(data_dir / "logs" / "mcdevkit.log"),
            "max_log_size": "10MB",
            "backup_count": 5,
        },
        "ui": {
            "progress_bar": True,
            "colored_output": True,
        },
    }


def _overlay(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``base`` with ``overrides`` applied section by section."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _overlay(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """
    Settings store backed by ``config.yaml``.

    Values are addressed with dotted keys such as ``servers.default_port``.
    A missing file is written out with the defaults on first use; a file that
    cannot be read or parsed is ignored with a warning.
    """

    def __init__(self, home: Optional[Path] = None) -> None:
        home = home or os.environ.get(HOME_ENV_VAR)
        if home:
            self.config_dir = Path(home) / "config"
            self.data_dir = Path(home) / "data"
        else:
            self.config_dir = Path(user_config_dir(APP_NAME))
            self.data_dir = Path(user_data_dir(APP_NAME))
        self.config_file = self.config_dir / "config.yaml"

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._defaults = _default_settings(self.data_dir)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        if not self.config_file.exists():
            self.save_config(self._defaults)
            return copy.deepcopy(self._defaults)

        try:
            with open(self.config_file, 'r') as f:
                user_settings = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config file: {e}. Using defaults.")
            return copy.deepcopy(self._defaults)

        if not isinstance(user_settings, dict):
            logger.warning(f"Ignoring {self.config_file}: top level is not a mapping.")
            return copy.deepcopy(self._defaults)

        logger.debug(f"Loaded configuration from {self.config_file}")
        return _overlay(self._defaults, user_settings)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key, or ``default`` when any part is missing."""
        node = self._config
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a value by dotted key, creating sections as needed. Not persisted."""
        *sections, leaf = key.split('.')
        node = self._config
        for section in sections:
            node = node.setdefault(section, {})
        node[leaf] = value

    def save_config(self, settings: Optional[Dict] = None) -> bool:
        """Write ``settings`` (the current settings by default) to the config file."""
        try:
            with open(self.config_file, 'w') as f:
                yaml.safe_dump(settings or self._config, f, default_flow_style=False, indent=2)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save configuration: {e}")
            return False

        logger.debug(f"Configuration saved to {self.config_file}")
        return True

    def reset_to_defaults(self) -> None:
        self._config = copy.deepcopy(self._defaults)
        self.save_config()
        logger.info("Configuration reset to defaults")

    def validate(self) -> None:
        """
        Check the server defaults used when options are omitted.

        Raises:
            ConfigurationError: If a default memory or port is unusable
        """
        try:
            ServerValidator.validate_memory(self.get("servers.default_memory"))
            ServerValidator.validate_port(self.get("servers.default_port"))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid setting in {self.config_file}", e) from e

    def get_temp_root(self) -> Optional[Path]:
        """The configured temp root, or None to auto-detect one."""
        temp_root = self.get("workspace.temp_root")
        return Path(temp_root) if temp_root else None

    def get_log_directory(self) -> Path:
        log_dir = Path(self.get("logging.log_file")).parent
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir


# Global configuration instance
config = Config()
