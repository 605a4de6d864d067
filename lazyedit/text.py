"""Width-aware text shaping helpers for rendered buffer lines.

Covers terminator detection, tab expansion, and column-exact truncation.
Widths follow fixed East Asian width tables: wide glyphs take two cells.
"""

from __future__ import annotations

import enum
import unicodedata

TAB_STOP = 4


class Terminator(enum.Enum):
    """Line-terminator kind stripped from a raw input line."""

    NONE = ""
    LF = "\n"
    CRLF = "\r\n"
    CR = "\r"

    @property
    def text(self) -> str:
        """Canonical rendering appended back when reconstructing the raw line."""
        return self.value


def char_display_width(ch: str) -> int:
    """Return terminal column width for one non-tab character.

    Combining marks consume no columns and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return the summed display width of ``text`` (tabs counted as one cell)."""
    return sum(char_display_width(ch) for ch in text)


def expand_tabs(line: str, tab_width: int = TAB_STOP) -> str:
    """Replace each tab with spaces up to the next ``tab_width`` column stop.

    Columns are measured in display cells, so a wide glyph before a tab
    advances the stop computation by two.
    """
    if "\t" not in line:
        return line
    tab_width = max(1, tab_width)
    out: list[str] = []
    col = 0
    for ch in line:
        if ch == "\t":
            pad = tab_width - (col % tab_width)
            out.append(" " * pad)
            col += pad
            continue
        out.append(ch)
        col += char_display_width(ch)
    return "".join(out)


def truncate_to_width(line: str, max_cols: int) -> tuple[str, int]:
    """Return the longest prefix of ``line`` fitting in ``max_cols`` cells.

    Scanning stops before the glyph that would overflow, so a wide glyph is
    never split. The second element is the exact column count consumed.
    """
    used = 0
    for index, ch in enumerate(line):
        w = char_display_width(ch)
        if used + w > max_cols:
            return line[:index], used
        used += w
    return line, used


def skip_columns(line: str, cols: int) -> tuple[str, int]:
    """Drop the glyphs covering the first ``cols`` cells of ``line``.

    Returns the remainder and the number of blank cells that stand in for the
    right half of a wide glyph cut by the boundary.
    """
    used = 0
    for index, ch in enumerate(line):
        if used >= cols:
            return line[index:], used - cols
        used += char_display_width(ch)
    return "", 0


def split_terminator(raw_line: str) -> tuple[str, Terminator]:
    """Split ``raw_line`` into content and the terminator it ended with.

    ``"\\r\\n"`` is recognized before a lone ``"\\n"`` or ``"\\r"``; anything else
    yields ``Terminator.NONE`` (the newline-less final line of a stream).
    """
    if raw_line.endswith("\r\n"):
        return raw_line[:-2], Terminator.CRLF
    if raw_line.endswith("\n"):
        return raw_line[:-1], Terminator.LF
    if raw_line.endswith("\r"):
        return raw_line[:-1], Terminator.CR
    return raw_line, Terminator.NONE


def decode_line(raw: bytes) -> str:
    """Decode one raw input line as UTF-8, replacing undecodable bytes."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("utf-8", errors="replace")
