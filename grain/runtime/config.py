"""Persistent JSON config helpers.

Supplies defaults for the refresh interval, speed, highlighting, and logging.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "grain"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_interval() -> str | None:
    """Load the default interval string, e.g. ``"500ms"``."""
    return _load_string("interval")


def load_speed() -> float | None:
    """Load the default speed multiplier; booleans and non-numbers are ignored."""
    value = load_config().get("speed")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def load_style() -> str | None:
    return _load_string("style")


def load_highlight() -> bool:
    """Return persisted highlighting preference; only explicit booleans count."""
    value = load_config().get("highlight")
    return bool(value) if isinstance(value, bool) else False


def load_log_file() -> Path | None:
    value = _load_string("log_file")
    return Path(value).expanduser() if value is not None else None
