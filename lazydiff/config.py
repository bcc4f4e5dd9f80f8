"""Persistent JSON config helpers.

Stores the diff colorizer style, the default-mapping switch, and the git
timeout. All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from .git import DEFAULT_TIMEOUT_SECONDS
from .highlight import DEFAULT_STYLE

APP_NAME = "lazydiff"
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


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored; config is a convenience, never fatal.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def load_style() -> str:
    value = load_config().get("style")
    return value if isinstance(value, str) and value else DEFAULT_STYLE


def save_style(style: str) -> None:
    config = load_config()
    config["style"] = style
    save_config(config)


def load_disable_default_mappings() -> bool:
    """Return whether ``<CR>``/``g<CR>`` should be left unmapped.

    Only explicit boolean values are accepted.
    """
    value = load_config().get("disable_default_mappings")
    return bool(value) if isinstance(value, bool) else False


def save_disable_default_mappings(disabled: bool) -> None:
    config = load_config()
    config["disable_default_mappings"] = bool(disabled)
    save_config(config)


def load_git_timeout_seconds() -> float:
    """Return the git subprocess timeout; booleans and non-positive values are ignored."""
    value = load_config().get("git_timeout_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return DEFAULT_TIMEOUT_SECONDS
    return float(value)
