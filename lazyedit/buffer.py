"""Lazily materialized, append-only line buffer.

Lines are read from the upstream byte stream only when an index at the end of
the buffer is requested, one read per request and never ahead of it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO

from .text import Terminator, decode_line, split_terminator

logger = logging.getLogger(__name__)


@dataclass
class Line:
    """One buffer line: content without its terminator, plus the terminator kind."""

    content: str
    terminator: Terminator = Terminator.NONE

    @property
    def raw(self) -> str:
        """Content with the original terminator re-appended."""
        return self.content + self.terminator.text


class LineStore:
    """Ordered, growable sequence of ``Line`` objects backed by a byte reader."""

    def __init__(self, reader: BinaryIO) -> None:
        self._reader = reader
        self._lines: list[Line] = []
        self._exhausted = False

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def get(self, index: int) -> Line | None:
        """Return line ``index``, reading one more line when it is the next unread.

        Returns ``None`` when ``index`` is negative, lies beyond the next unread
        line, or the stream is exhausted. A read that hits end-of-stream still
        appends the final line (empty with ``Terminator.NONE`` when no bytes
        remained) and marks the store exhausted.
        """
        if index < 0:
            return None
        if index < len(self._lines):
            return self._lines[index]
        if index > len(self._lines) or self._exhausted:
            return None

        raw = self._reader.readline()
        content, terminator = split_terminator(decode_line(raw))
        if not raw.endswith(b"\n"):
            self._exhausted = True
            logger.debug("input exhausted after %d lines", index + 1)
        line = Line(content, terminator)
        self._lines.append(line)
        return line

    def can_materialize(self, index: int) -> bool:
        """Return whether ``get(index)`` would yield a line, without reading."""
        if index < 0:
            return False
        if index < len(self._lines):
            return True
        return index == len(self._lines) and not self._exhausted

    def set(self, index: int, content: str) -> None:
        """Overwrite the content of a materialized line, keeping its terminator."""
        if not 0 <= index < len(self._lines):
            raise IndexError(f"line {index} is not materialized")
        self._lines[index].content = content

    def lines(self) -> list[Line]:
        """Return a snapshot of the materialized lines."""
        return list(self._lines)
