"""Terminal control helpers for the editing session.

Owns the controlling-terminal fd used for keyboard input and size queries,
and the raw-mode lifecycle held while a line is being edited.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

from ..errors import TerminalError

TTY_PATH = "/dev/tty"


class TerminalController:
    """Manage the keyboard fd, terminal size queries, and raw-mode transitions."""

    def __init__(self, tty_fd: int) -> None:
        """Capture tty state for ``tty_fd``."""
        self.tty_fd = tty_fd
        try:
            self._saved_tty_state = termios.tcgetattr(tty_fd)
        except termios.error as exc:
            raise TerminalError(f"cannot query terminal: {exc}") from exc

    @classmethod
    @contextlib.contextmanager
    def open(cls, path: str = TTY_PATH):
        """Open the controlling terminal and close it again on exit."""
        try:
            fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
        except OSError as exc:
            raise TerminalError(f"cannot open terminal {path}: {exc.strerror or exc}") from exc
        try:
            yield cls(fd)
        finally:
            os.close(fd)

    def size(self) -> tuple[int, int]:
        """Return ``(columns, rows)`` of the controlling terminal."""
        try:
            term = os.get_terminal_size(self.tty_fd)
        except OSError as exc:
            raise TerminalError(f"cannot query terminal size: {exc.strerror or exc}") from exc
        return term.columns, term.lines

    def enable_raw_mode(self) -> None:
        """Switch the keyboard fd to raw byte-at-a-time input."""
        try:
            tty.setraw(self.tty_fd, termios.TCSAFLUSH)
        except termios.error as exc:
            raise TerminalError(f"cannot enter raw mode: {exc}") from exc

    def disable_raw_mode(self) -> None:
        """Restore the terminal attributes captured at construction."""
        termios.tcsetattr(self.tty_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with raw enter/exit calls."""
        self.enable_raw_mode()
        try:
            yield
        finally:
            self.disable_raw_mode()
