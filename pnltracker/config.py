"""Configuration loading for PnL Tracker.

Settings live in a TOML file, by default ``~/.config/pnltracker/config.toml``
(the ``PNLTRACKER_CONFIG`` environment variable points elsewhere). Missing
sections and keys fall back to the defaults below.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Optional

import toml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "pnltracker"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "trades.db"

DEFAULTS = {
    "storage": {
        "db_path": str(DEFAULT_DB_PATH),
    },
    "display": {
        "currency": "USDT",
    },
    "review": {
        "min_ocr_confidence": 60.0,
    },
}


def get_config_path() -> Path:
    override = os.environ.get("PNLTRACKER_CONFIG")
    return Path(override).expanduser() if override else DEFAULT_CONFIG_PATH


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Path] = None) -> dict:
    """Load configuration merged over the defaults.

    Args:
        path: Config file path, defaults to `get_config_path()`.

    Returns:
        Config dict. Defaults only if the file is missing or unreadable.
    """
    path = path or get_config_path()

    if not path.exists():
        return copy.deepcopy(DEFAULTS)

    try:
        return _merge(DEFAULTS, toml.load(path))
    except (toml.TomlDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return copy.deepcopy(DEFAULTS)


def create_template_config(path: Optional[Path] = None) -> Path:
    """Write a template configuration file with the default settings."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        toml.dump(DEFAULTS, f)

    return path


def get_db_path(config: dict) -> Path:
    return Path(config.get("storage", {}).get("db_path", str(DEFAULT_DB_PATH))).expanduser()
