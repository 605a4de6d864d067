"""Main interactive loop: draw the window, edit the cursor line, move, repeat.

The window is drawn in place starting at a fixed terminal row; after each
edit the terminal cursor returns to that row so the next draw overwrites it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TextIO

from .. import ansi
from ..buffer import Line, LineStore
from ..errors import EditorError
from ..line_editor import LineEditor
from ..render import View, render_status
from ..session import run_edit_session
from .terminal import TerminalController
from .viewport import Viewport, visible_rows_for

logger = logging.getLogger(__name__)


def line_supplier(store: LineStore, start: int) -> Callable[[], Line | None]:
    """Return a callable yielding successive lines of ``store`` from ``start``."""
    index = start

    def next_line() -> Line | None:
        nonlocal index
        line = store.get(index)
        index += 1
        return line

    return next_line


def status_text(source_name: str, store: LineStore, viewport: Viewport) -> str:
    """Describe the cursor position and how much input has been read."""
    more = "" if store.exhausted else "+"
    return (
        f" {source_name}  line {viewport.cursor + 1}/{len(store)}{more}  "
        "[Up/Down move] [Enter commit] [Esc quit]"
    )


def run_main_loop(
    store: LineStore,
    view: View,
    terminal: TerminalController,
    editor: LineEditor,
    out: TextIO,
    *,
    source_name: str = "",
    show_status: bool = True,
) -> Viewport:
    """Run edit steps until the user quits or the keyboard input ends.

    Returns the final viewport. ``EditorError`` other than end-of-input and
    ``TerminalError`` propagate after the terminal cursor is restored.
    """
    viewport = Viewport()
    last_width: int | None = None
    drawn = 0
    at_row = 0
    out.write(ansi.CURSOR_OFF)
    try:
        while True:
            width, height = terminal.size()
            if width != last_width:
                if last_width is not None:
                    logger.debug("terminal width changed %s -> %d", last_width, width)
                view.invalidate()
                last_width = width
            if viewport.resize(visible_rows_for(height)):
                view.invalidate()

            drawn = view.draw(line_supplier(store, viewport.headline), width, viewport.visible_rows, out)
            if show_status:
                out.write(render_status(status_text(source_name, store, viewport), width))
            else:
                out.write(f"{ansi.ERASE_LINE}\n")
            out.write(ansi.cursor_up(drawn - viewport.cursor_row + 1))
            out.flush()
            at_row = viewport.cursor_row

            line = store.get(viewport.cursor)
            if line is None:
                raise RuntimeError(f"cursor line {viewport.cursor} was not materialized by the draw")
            try:
                with terminal.raw_mode():
                    result = run_edit_session(editor, line, width)
            except EditorError as exc:
                if exc.end_of_input:
                    logger.info("keyboard input ended")
                    return viewport
                raise

            if result.interrupted:
                logger.info("quit requested at line %d", viewport.cursor + 1)
                return viewport

            store.set(viewport.cursor, result.line.content)
            view.invalidate_row(viewport.cursor_row)
            out.write(ansi.cursor_up(viewport.cursor_row))
            at_row = 0
            if viewport.move(result.delta, store.can_materialize):
                view.invalidate()
    finally:
        # Leave the terminal cursor on the row below the status row.
        if drawn:
            out.write(ansi.cursor_down(drawn + 1 - at_row))
        out.write(ansi.CURSOR_ON)
        out.flush()
