"""Escape sequences making up the terminal output protocol."""

from __future__ import annotations

RESET = "\x1b[0m"
ERASE_LINE = "\x1b[0K"
CURSOR_OFF = "\x1b[?25l"
CURSOR_ON = "\x1b[?25h"
DEFAULT_TERMINATOR_COLOR = "0;33;1"
PROMPT_COLOR = "0;33;40;1"
STATUS_COLOR = "2"


def sgr(params: str) -> str:
    """Return the SGR sequence selecting ``params`` (for example ``"0;33;1"``)."""
    return f"\x1b[{params}m"


def cursor_up(rows: int) -> str:
    """Return to column 0 and move up ``rows`` rows (no movement for ``rows <= 0``)."""
    if rows <= 0:
        return "\r"
    return f"\r\x1b[{rows}A"


def cursor_down(rows: int) -> str:
    """Return to column 0 and move down ``rows`` rows (no movement for ``rows <= 0``)."""
    if rows <= 0:
        return "\r"
    return f"\r\x1b[{rows}B"


def cursor_right(cols: int) -> str:
    """Move right ``cols`` columns from the current position."""
    if cols <= 0:
        return ""
    return f"\x1b[{cols}C"
