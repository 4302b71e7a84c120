"""Configuration file management for rupeetrack."""

import copy
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

LOG_LEVEL_ENV = "RUPEETRACK_LOG_LEVEL"

DEFAULT_CONFIG: dict[str, Any] = {
    "currency_symbol": "₹",
    "log_level": "WARNING",
    "dashboard": {
        "recent_limit": 10,
    },
    "analytics": {
        "top_categories": 5,
        "year_aware_months": False,
    },
}


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "rupeetrack" / "config.toml"


def merge_config(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge a loaded config over the defaults, one level of tables deep.

    Args:
        defaults: Default configuration.
        overrides: Values read from the config file.

    Returns:
        New merged configuration dictionary.
    """
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    save_config(copy.deepcopy(DEFAULT_CONFIG), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file, merged over the defaults.

    A missing file yields the defaults. The RUPEETRACK_LOG_LEVEL
    environment variable overrides log_level.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        tomllib.TOMLDecodeError: If the config file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    loaded: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "rb") as f:
            loaded = tomllib.load(f)

    config = merge_config(DEFAULT_CONFIG, loaded)

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        config["log_level"] = env_level

    return config


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)
