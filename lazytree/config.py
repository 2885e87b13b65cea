"""Persistent JSON config helpers.

Stores default colour mode, default depth, and open-error placement.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .terminal import COLOR_MODES, ColorMode

logger = logging.getLogger(__name__)

APP_NAME = "lazytree"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem/serialization errors are logged and otherwise ignored so a
    read-only config directory never breaks a listing.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.debug("could not write config %s: %s", CONFIG_PATH, exc)


def load_color_mode() -> ColorMode:
    """Return persisted colour mode, ``"auto"`` when unset or invalid."""
    value = load_config().get("color")
    if isinstance(value, str) and value.strip().lower() in COLOR_MODES:
        return value.strip().lower()  # type: ignore[return-value]
    return "auto"


def save_color_mode(mode: ColorMode) -> None:
    if mode not in COLOR_MODES:
        return
    config = load_config()
    config["color"] = mode
    save_config(config)


def load_max_depth() -> int | None:
    """Return persisted default depth.

    Booleans, non-integers, and negative values are treated as unset
    (unbounded).
    """
    value = load_config().get("max_depth")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def save_max_depth(max_depth: int | None) -> None:
    """Persist default depth; ``None`` removes the key."""
    config = load_config()
    if max_depth is None:
        config.pop("max_depth", None)
    else:
        config["max_depth"] = max(0, int(max_depth))
    save_config(config)


def load_inline_open_errors() -> bool:
    """Return whether open failures go on the directory's own line.

    Only explicit booleans are accepted; anything else falls back to ``True``.
    """
    value = load_config().get("inline_open_errors")
    return value if isinstance(value, bool) else True


def save_inline_open_errors(inline: bool) -> None:
    config = load_config()
    config["inline_open_errors"] = bool(inline)
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "save_config",
    "load_color_mode",
    "save_color_mode",
    "load_max_depth",
    "save_max_depth",
    "load_inline_open_errors",
    "save_inline_open_errors",
]
