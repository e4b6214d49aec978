"""Configuration file support for Tickoff."""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from tickoff.storage import DEFAULT_DATA_FILE

logger = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / ".config" / "tickoff" / "tickoff.toml"
CONFIG_ENV_VAR = "TICKOFF_CONFIG"

DEFAULT_THEME = "textual-dark"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Application configuration."""

    data_file: Path = Path(DEFAULT_DATA_FILE)
    theme: str = DEFAULT_THEME
    show_overdue_on_start: bool = True
    hide_completed: bool = False
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Path | None = None


def config_path() -> Path:
    """Return the config file location, honoring TICKOFF_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE


def load_config(path: Path | None = None) -> Config:
    """Load configuration from the config file.

    Returns the default configuration if:
    - The config file doesn't exist
    - The config file has invalid TOML syntax
    - The file cannot be read

    Args:
        path: Config file to read; defaults to config_path().

    Returns:
        Config object with loaded or default values.
    """
    if path is None:
        path = config_path()
    if not path.exists():
        return Config()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring config file %s: %s", path, e)
        return Config()

    return _parse_config(data)


def _parse_config(data: dict[str, Any]) -> Config:
    """Parse configuration from a dictionary.

    Values of the wrong type are ignored and keep their defaults.

    Args:
        data: Dictionary from parsed TOML file.

    Returns:
        Config object with parsed values.
    """
    config = Config()

    if "data_file" in data and isinstance(data["data_file"], str) and data["data_file"].strip():
        config.data_file = Path(data["data_file"]).expanduser()

    if "theme" in data and isinstance(data["theme"], str):
        config.theme = data["theme"]

    if "show_overdue_on_start" in data and isinstance(data["show_overdue_on_start"], bool):
        config.show_overdue_on_start = data["show_overdue_on_start"]

    if "hide_completed" in data and isinstance(data["hide_completed"], bool):
        config.hide_completed = data["hide_completed"]

    if "log_level" in data and isinstance(data["log_level"], str):
        level = data["log_level"].strip().upper()
        if level in LOG_LEVELS:
            config.log_level = level

    if "log_file" in data and isinstance(data["log_file"], str) and data["log_file"].strip():
        config.log_file = Path(data["log_file"]).expanduser()

    return config
