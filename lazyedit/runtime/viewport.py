"""Cursor and scroll-window state for the line buffer.

Keeps ``headline <= cursor < headline + visible_rows`` after every transition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# One row for the line being edited past the window, one for the status row.
RESERVED_ROWS = 2


def visible_rows_for(height: int) -> int:
    """Number of buffer rows shown for a terminal ``height`` rows tall."""
    return max(1, height - RESERVED_ROWS)


@dataclass
class Viewport:
    """First visible line, line open for editing, and usable row count."""

    headline: int = 0
    cursor: int = 0
    visible_rows: int = 1

    @property
    def cursor_row(self) -> int:
        """Row of the cursor line relative to the top of the window."""
        return self.cursor - self.headline

    def resize(self, visible_rows: int) -> bool:
        """Apply a new row count, scrolling down if the cursor fell off the bottom.

        Returns whether ``headline`` changed.
        """
        self.visible_rows = max(1, visible_rows)
        return self._scroll_to_cursor()

    def _scroll_to_cursor(self) -> bool:
        previous = self.headline
        if self.cursor < self.headline:
            self.headline = self.cursor
        elif self.cursor >= self.headline + self.visible_rows:
            self.headline = self.cursor - self.visible_rows + 1
        return self.headline != previous

    def move(self, delta: int, can_materialize: Callable[[int], bool]) -> bool:
        """Move the cursor by ``delta`` lines and scroll to keep it visible.

        Moves above the first line, or onto a line the buffer can no longer
        provide, are discarded. Returns whether ``headline`` changed.
        """
        target = self.cursor + delta
        if delta == 0:
            return False
        if target < 0 or not can_materialize(target):
            logger.debug("rejected move from %d to %d", self.cursor, target)
            return False
        self.cursor = target
        changed = self._scroll_to_cursor()
        logger.debug("cursor=%d headline=%d", self.cursor, self.headline)
        return changed
