"""Diffing renderer for the visible window of buffer lines.

Rows are written top to bottom from the current terminal row; a row whose raw
line matches what was last drawn there is skipped with a bare newline.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from . import ansi
from .buffer import Line
from .text import TAB_STOP, Terminator, expand_tabs, truncate_to_width

TERMINATOR_GLYPHS = {
    Terminator.CRLF: "⤶",  # arrow pointing downwards then curving leftwards
    Terminator.LF: "⭣",  # downwards arrow
    Terminator.CR: "⭠",  # leftwards arrow
}


@dataclass(frozen=True)
class RenderOptions:
    """Presentation settings shared by every drawn row."""

    tab_width: int = TAB_STOP
    show_terminators: bool = True
    terminator_color: str = ansi.DEFAULT_TERMINATOR_COLOR


def render_row(line: Line, width: int, options: RenderOptions) -> str:
    """Return the escape-sequence text drawing ``line`` on one terminal row."""
    visible, used = truncate_to_width(expand_tabs(line.content, options.tab_width), width)
    out = [visible]
    glyph = TERMINATOR_GLYPHS.get(line.terminator)
    if used < width and glyph is not None and options.show_terminators:
        out.append(ansi.sgr(options.terminator_color))
        out.append(glyph)
    out.append(ansi.RESET)
    out.append(ansi.ERASE_LINE)
    out.append("\n")
    return "".join(out)


class View:
    """Draws a fixed-height window and remembers what each row last showed."""

    def __init__(self, options: RenderOptions | None = None) -> None:
        self.options = options if options is not None else RenderOptions()
        self._cache: list[str | None] = []

    @property
    def cache(self) -> list[str | None]:
        return list(self._cache)

    def invalidate(self) -> None:
        """Forget every row so the next draw rewrites the whole window."""
        self._cache = []

    def invalidate_row(self, row: int) -> None:
        """Forget one viewport row, forcing it to be redrawn next time."""
        if 0 <= row < len(self._cache):
            self._cache[row] = None

    def draw(
        self,
        next_line: Callable[[], Line | None],
        width: int,
        height: int,
        out: TextIO,
    ) -> int:
        """Draw up to ``height`` rows pulled from ``next_line`` and return the count.

        ``next_line`` returning ``None`` ends the window early. Output is
        emitted with a single write.
        """
        parts: list[str] = []
        drawn = 0
        for row in range(height):
            line = next_line()
            if line is None:
                break
            drawn += 1
            raw = line.raw
            if row < len(self._cache):
                if self._cache[row] == raw:
                    parts.append("\n")
                    continue
                self._cache[row] = raw
            else:
                self._cache.append(raw)
            parts.append(render_row(line, width, self.options))
        del self._cache[drawn:]
        out.write("".join(parts))
        out.flush()
        return drawn


def render_status(text: str, width: int) -> str:
    """Return a dimmed status row clipped to ``width - 1`` columns."""
    clipped, _used = truncate_to_width(text, max(0, width - 1))
    return f"{ansi.sgr(ansi.STATUS_COLOR)}{clipped}{ansi.RESET}{ansi.ERASE_LINE}\n"
