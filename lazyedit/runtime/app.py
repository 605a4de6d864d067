"""Session bootstrap: acquire the terminal, wire components, run the loop."""

from __future__ import annotations

import logging
import sys
from typing import BinaryIO, TextIO

from ..buffer import LineStore
from ..line_editor import LineEditor
from ..render import RenderOptions, View
from .config import EditorSettings
from .loop import run_main_loop
from .terminal import TerminalController
from .viewport import Viewport
from .vt import virtual_terminal_processing

logger = logging.getLogger(__name__)


def run_editor(
    reader: BinaryIO,
    source_name: str,
    settings: EditorSettings | None = None,
    out: TextIO | None = None,
) -> LineStore:
    """Edit lines read from ``reader`` interactively until the user quits.

    Returns the line store holding every line read and edited in the session.
    """
    settings = settings if settings is not None else EditorSettings()
    out = out if out is not None else sys.stdout
    store = LineStore(reader)
    view = View(
        RenderOptions(
            tab_width=settings.tab_width,
            show_terminators=settings.show_terminators,
            terminator_color=settings.terminator_color,
        )
    )
    with virtual_terminal_processing(), TerminalController.open() as terminal:
        editor = LineEditor(out, terminal.tty_fd, prompt=settings.prompt, tab_width=settings.tab_width)
        logger.info("editing %s", source_name)
        viewport: Viewport = run_main_loop(
            store,
            view,
            terminal,
            editor,
            out,
            source_name=source_name,
            show_status=settings.show_status,
        )
    logger.info("session ended at line %d with %d lines read", viewport.cursor + 1, len(store))
    return store
