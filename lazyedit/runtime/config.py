"""Persistent JSON config helpers.

Stores rendering preferences: tab width, terminator glyphs, prompt, status row.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .. import ansi
from ..text import TAB_STOP

logger = logging.getLogger(__name__)

APP_NAME = "lazyedit"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


@dataclass(frozen=True)
class EditorSettings:
    """Resolved settings used to build the renderer and line editor."""

    tab_width: int = TAB_STOP
    show_terminators: bool = True
    terminator_color: str = ansi.DEFAULT_TERMINATOR_COLOR
    prompt: str = ""
    show_status: bool = True


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
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_positive_int(value: object, default: int) -> int:
    """Accept real integers >= 1; booleans and other types fall back to ``default``."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return default
    return value


def _coerce_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _coerce_str(value: object, default: str) -> str:
    return value if isinstance(value, str) else default


def _coerce_sgr(value: object, default: str) -> str:
    """Accept SGR parameter strings such as ``"0;33;1"`` only."""
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    if not stripped or any(part and not part.isdigit() for part in stripped.split(";")):
        return default
    return stripped


def load_settings() -> EditorSettings:
    """Build ``EditorSettings`` from the config file, defaulting invalid keys."""
    data = load_config()
    defaults = EditorSettings()
    return EditorSettings(
        tab_width=_coerce_positive_int(data.get("tab_width"), defaults.tab_width),
        show_terminators=_coerce_bool(data.get("show_terminators"), defaults.show_terminators),
        terminator_color=_coerce_sgr(data.get("terminator_color"), defaults.terminator_color),
        prompt=_coerce_str(data.get("prompt"), defaults.prompt),
        show_status=_coerce_bool(data.get("show_status"), defaults.show_status),
    )
