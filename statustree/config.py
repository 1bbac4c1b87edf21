"""Persistent JSON config helpers.

Stores refresh batch size, git timeout, theme, and the hide-up-to-date default.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "statustree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_BATCH_SIZE = 200
DEFAULT_GIT_TIMEOUT_SECONDS = 5.0


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


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored so an unwritable config never breaks a refresh.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def _update(key: str, value: object) -> None:
    config = load_config()
    config[key] = value
    save_config(config)


def load_batch_size() -> int:
    """Return the persisted provider batch size; booleans and non-positive ints are rejected."""
    value = load_config().get("batch_size")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return DEFAULT_BATCH_SIZE
    return value


def save_batch_size(batch_size: int) -> None:
    if batch_size <= 0:
        return
    _update("batch_size", int(batch_size))


def load_git_timeout() -> float:
    value = load_config().get("git_timeout_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return DEFAULT_GIT_TIMEOUT_SECONDS
    return float(value)


def save_git_timeout(seconds: float) -> None:
    if seconds <= 0:
        return
    _update("git_timeout_seconds", float(seconds))


def load_hide_up_to_date() -> bool:
    """Only explicit booleans are accepted; anything else means ``False``."""
    value = load_config().get("hide_up_to_date")
    return value if isinstance(value, bool) else False


def save_hide_up_to_date(hide: bool) -> None:
    _update("hide_up_to_date", bool(hide))


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_theme_name(theme_name: str) -> None:
    stripped = str(theme_name).strip()
    if not stripped:
        return
    _update("theme", stripped)
