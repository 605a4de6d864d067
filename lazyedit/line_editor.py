"""Single-line text editor driven by raw key tokens.

Keeps a text buffer and a cursor, redraws the current terminal row after every
key, and stops when a bound key handler returns a non-``None`` outcome.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TextIO

from . import ansi
from .errors import EditorError
from .input import KeyComboBinding, KeyComboRegistry, read_key
from .text import TAB_STOP, display_width, expand_tabs, skip_columns, truncate_to_width

ACCEPT = "ACCEPT"
INTERRUPT = "INTERRUPT"


class LineBuffer:
    """Editable text plus a cursor expressed as a character index."""

    def __init__(self, text: str = "", cursor: int | None = None) -> None:
        self.text = text
        self.cursor = len(text) if cursor is None else max(0, min(cursor, len(text)))

    def insert(self, chars: str) -> None:
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1

    def delete(self) -> None:
        self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]

    def move(self, delta: int) -> None:
        self.cursor = max(0, min(self.cursor + delta, len(self.text)))

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.text)

    def kill_to_end(self) -> None:
        self.text = self.text[: self.cursor]

    def kill_to_start(self) -> None:
        self.text = self.text[self.cursor :]
        self.cursor = 0

    def _word_start_before(self, pos: int) -> int:
        while pos > 0 and self.text[pos - 1].isspace():
            pos -= 1
        while pos > 0 and not self.text[pos - 1].isspace():
            pos -= 1
        return pos

    def word_left(self) -> None:
        self.cursor = self._word_start_before(self.cursor)

    def word_right(self) -> None:
        pos = self.cursor
        n = len(self.text)
        while pos < n and self.text[pos].isspace():
            pos += 1
        while pos < n and not self.text[pos].isspace():
            pos += 1
        self.cursor = pos

    def delete_word_before(self) -> None:
        start = self._word_start_before(self.cursor)
        self.text = self.text[:start] + self.text[self.cursor :]
        self.cursor = start


class LineEditor:
    """Read one line of input from the keyboard, editing it in place on screen."""

    def __init__(
        self,
        out: TextIO,
        keyboard_fd: int,
        *,
        prompt: str = "",
        prompt_color: str = ansi.PROMPT_COLOR,
        tab_width: int = TAB_STOP,
        read: Callable[[int], str] = read_key,
    ) -> None:
        self.out = out
        self.keyboard_fd = keyboard_fd
        self.prompt = prompt
        self.prompt_color = prompt_color
        self.tab_width = tab_width
        self._read = read
        self._scroll = 0

    def _default_bindings(self, buf: LineBuffer) -> KeyComboRegistry[object | None]:
        def end_of_input_or_delete() -> None:
            if not buf.text:
                raise EditorError("end of input", end_of_input=True)
            buf.delete()

        registry: KeyComboRegistry[object | None] = KeyComboRegistry()
        return registry.register_bindings(
            KeyComboBinding(("ENTER",), lambda: ACCEPT),
            KeyComboBinding(("CTRL_C",), lambda: INTERRUPT),
            KeyComboBinding(("CTRL_D",), end_of_input_or_delete),
            KeyComboBinding(("BACKSPACE",), buf.backspace),
            KeyComboBinding(("DELETE",), buf.delete),
            KeyComboBinding(("LEFT", "CTRL_B"), lambda: buf.move(-1)),
            KeyComboBinding(("RIGHT", "CTRL_F"), lambda: buf.move(1)),
            KeyComboBinding(("ALT_LEFT",), buf.word_left),
            KeyComboBinding(("ALT_RIGHT",), buf.word_right),
            KeyComboBinding(("HOME", "CTRL_A"), buf.home),
            KeyComboBinding(("END", "CTRL_E"), buf.end),
            KeyComboBinding(("CTRL_K",), buf.kill_to_end),
            KeyComboBinding(("CTRL_U",), buf.kill_to_start),
            KeyComboBinding(("CTRL_W",), buf.delete_word_before),
            KeyComboBinding(("TAB",), lambda: buf.insert("\t")),
        )

    def redraw(self, buf: LineBuffer, width: int | None = None) -> None:
        """Rewrite the current row and park the cursor at the edit position.

        With a ``width``, only a window of the text that contains the cursor is
        drawn, so the row never wraps. The window scrolls horizontally as the
        cursor leaves it.
        """
        prompt_cols = display_width(self.prompt)
        shown = expand_tabs(buf.text, self.tab_width)
        column = display_width(expand_tabs(buf.text[: buf.cursor], self.tab_width))
        pad = 0
        if width is not None:
            room = max(1, width - 1 - prompt_cols)
            if column < self._scroll:
                self._scroll = column
            elif column >= self._scroll + room:
                self._scroll = column - room + 1
            shown, pad = skip_columns(shown, self._scroll)
            shown, _used = truncate_to_width(shown, room - pad)
            column -= self._scroll
        self.out.write(
            f"\r{ansi.sgr(self.prompt_color)}{self.prompt}{ansi.RESET}"
            f"{' ' * pad}{shown}{ansi.ERASE_LINE}\r{ansi.cursor_right(prompt_cols + column)}"
        )
        self.out.flush()

    def read_line(
        self,
        default: str = "",
        bindings: Iterable[KeyComboBinding[object | None]] = (),
        width: int | None = None,
    ) -> tuple[str, object]:
        """Edit ``default`` until a handler returns an outcome.

        Returns ``(text, outcome)``. ``bindings`` override the built-in keys.
        ``width`` is the terminal width the edit row must stay within.
        Raises ``EditorError`` when the key stream ends or cannot be read.
        """
        buf = LineBuffer(default)
        registry = self._default_bindings(buf)
        registry.register_bindings(*bindings)
        self._scroll = 0
        while True:
            self.redraw(buf, width)
            try:
                key = self._read(self.keyboard_fd)
            except OSError as exc:
                raise EditorError(f"cannot read keyboard input: {exc}") from exc
            if not key:
                raise EditorError("end of input", end_of_input=True)
            if key in registry:
                outcome = registry.dispatch(key)
                if outcome is not None:
                    self.out.write("\r")
                    self.out.flush()
                    return buf.text, outcome
                continue
            if len(key) == 1 and key.isprintable():
                buf.insert(key)
