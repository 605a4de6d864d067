"""Exception types surfaced by the CLI as one-line error messages."""

from __future__ import annotations


class LazyEditError(Exception):
    """Base class for failures that end the program with a non-zero status."""


class UsageError(LazyEditError):
    """No filename given while standard input is an interactive terminal."""


class IOOpenError(LazyEditError):
    """The named input file could not be opened."""


class TerminalError(LazyEditError):
    """The controlling terminal could not be opened, queried, or configured."""


class EditorError(LazyEditError):
    """The line editor failed to read keys.

    ``end_of_input`` marks a closed key stream (or Ctrl-D on an empty line),
    which the control loop treats as a clean end of the session.
    """

    def __init__(self, message: str, *, end_of_input: bool = False) -> None:
        super().__init__(message)
        self.end_of_input = end_of_input
