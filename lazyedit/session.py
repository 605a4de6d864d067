"""One editing pass over a single buffer line.

Navigation keys are rebound so they end the pass with a move request instead
of moving inside the line; the result is returned as a value, never applied
to shared state.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from . import ansi
from .buffer import Line
from .input import KeyComboBinding
from .line_editor import ACCEPT, INTERRUPT, LineEditor

logger = logging.getLogger(__name__)


class EditOutcome(enum.Enum):
    """How an edit session ended."""

    ACCEPTED = 0
    MOVE_PREV = -1
    MOVE_NEXT = 1
    INTERRUPTED = None


@dataclass(frozen=True)
class EditResult:
    """Outcome of a session plus the edited line (original terminator kept)."""

    outcome: EditOutcome
    line: Line

    @property
    def delta(self) -> int:
        """Requested cursor movement in lines (0 when accepted or interrupted)."""
        value = self.outcome.value
        return value if isinstance(value, int) else 0

    @property
    def interrupted(self) -> bool:
        return self.outcome is EditOutcome.INTERRUPTED


SESSION_BINDINGS: tuple[KeyComboBinding[object | None], ...] = (
    KeyComboBinding(("UP", "CTRL_P"), lambda: EditOutcome.MOVE_PREV),
    KeyComboBinding(("DOWN", "CTRL_N"), lambda: EditOutcome.MOVE_NEXT),
    KeyComboBinding(("ESC",), lambda: EditOutcome.INTERRUPTED),
)

_EDITOR_OUTCOMES = {
    ACCEPT: EditOutcome.ACCEPTED,
    INTERRUPT: EditOutcome.INTERRUPTED,
}


def run_edit_session(editor: LineEditor, line: Line, width: int | None = None) -> EditResult:
    """Edit ``line.content`` with the cursor at its end and return the result.

    ``width`` keeps the edit row within the terminal width.

    ``EditorError`` from the editor propagates unchanged.
    """
    editor.out.write(ansi.CURSOR_ON)
    try:
        text, outcome = editor.read_line(line.content, SESSION_BINDINGS, width=width)
    finally:
        editor.out.write(ansi.CURSOR_OFF)
        editor.out.flush()
    if not isinstance(outcome, EditOutcome):
        outcome = _EDITOR_OUTCOMES[outcome]
    logger.debug("edit session ended: %s", outcome.name)
    return EditResult(outcome, Line(text, line.terminator))
