from __future__ import annotations

import io
import os
from contextlib import contextmanager
import unittest

from lazyedit import ansi
from lazyedit.buffer import Line, LineStore
from lazyedit.errors import EditorError, TerminalError
from lazyedit.input import reader as input_mod
from lazyedit.line_editor import LineEditor
from lazyedit.render import View
from lazyedit.runtime.loop import line_supplier, run_main_loop, status_text
from lazyedit.runtime.viewport import Viewport
from lazyedit.text import Terminator


class _FakeTerminal:
    def __init__(self, columns: int = 40, rows: int = 5) -> None:
        self.columns = columns
        self.rows = rows
        self.raw_entries = 0

    def size(self) -> tuple[int, int]:
        return self.columns, self.rows

    @contextmanager
    def raw_mode(self):
        self.raw_entries += 1
        yield


def _run(data: bytes, keys: list[str], *, view: View | None = None, terminal: _FakeTerminal | None = None):
    store = LineStore(io.BytesIO(data))
    out = io.StringIO()
    it = iter(keys)
    editor = LineEditor(out, 0, read=lambda _fd: next(it))
    view = view if view is not None else View()
    viewport = run_main_loop(
        store,
        view,
        terminal if terminal is not None else _FakeTerminal(),
        editor,
        out,
        source_name="sample.txt",
        show_status=False,
    )
    return store, view, viewport, out.getvalue()


def _row(text: str) -> str:
    glyph_color = ansi.sgr(ansi.DEFAULT_TERMINATOR_COLOR)
    return f"{text}{glyph_color}⭣{ansi.RESET}{ansi.ERASE_LINE}\n"


class RunMainLoopTests(unittest.TestCase):
    def test_next_line_three_times_reaches_lazily_read_end_line(self) -> None:
        store, _view, viewport, _out = _run(b"a\nb\nc\n", ["DOWN", "DOWN", "DOWN", "ESC"])

        self.assertEqual((viewport.cursor, viewport.headline), (3, 1))
        self.assertEqual(store.get(3), Line("", Terminator.NONE))
        self.assertTrue(store.exhausted)
        self.assertEqual(len(store), 4)

    def test_moving_past_the_last_line_is_discarded(self) -> None:
        _store, _view, viewport, _out = _run(b"a\n", ["DOWN", "DOWN", "DOWN", "ESC"])

        self.assertEqual((viewport.cursor, viewport.headline), (1, 0))

    def test_accepted_edit_is_committed_and_cursor_stays(self) -> None:
        store, _view, viewport, _out = _run(b"x\ny\n", ["BACKSPACE", "X", "ENTER", "ESC"])

        self.assertEqual(store.lines()[:2], [Line("X", Terminator.LF), Line("y", Terminator.LF)])
        self.assertEqual(viewport.cursor, 0)

    def test_previous_line_at_top_is_clamped_and_keeps_other_rows_cached(self) -> None:
        store, view, viewport, out = _run(b"a\nb\nc\n", ["UP", "ESC"])

        self.assertEqual((viewport.cursor, viewport.headline), (0, 0))
        self.assertEqual(view.cache, ["a\n", "b\n", "c\n"])
        # Only the edited row is redrawn on the second pass.
        self.assertEqual(out.count(_row("a")), 2)
        self.assertEqual(out.count(_row("b")), 1)
        self.assertEqual(out.count(_row("c")), 1)
        self.assertEqual(len(store), 3)

    def test_scrolling_invalidates_whole_window(self) -> None:
        _store, _view, _viewport, out = _run(b"a\nb\nc\nd\n", ["DOWN", "DOWN", "DOWN", "ESC"])

        # b: first pass, after its own edit, and again once the window scrolls.
        self.assertEqual(out.count(_row("b")), 3)
        self.assertEqual(out.count(_row("d")), 1)

    def test_interrupt_does_not_commit_the_pending_edit(self) -> None:
        store, _view, _viewport, _out = _run(b"x\n", ["!", "ESC"])

        self.assertEqual(store.get(0), Line("x", Terminator.LF))

    def test_navigation_commits_the_edit_before_moving(self) -> None:
        store, _view, viewport, _out = _run(b"x\ny\n", ["!", "DOWN", "ESC"])

        self.assertEqual(store.get(0), Line("x!", Terminator.LF))
        self.assertEqual(viewport.cursor, 1)

    def test_end_of_keyboard_input_ends_cleanly(self) -> None:
        _store, _view, viewport, out = _run(b"x\n", [""])

        self.assertEqual(viewport.cursor, 0)
        self.assertTrue(out.endswith(ansi.CURSOR_ON))

    def test_keyboard_failure_propagates_after_restoring_cursor(self) -> None:
        store = LineStore(io.BytesIO(b"x\n"))
        out = io.StringIO()

        def failing_read(_fd: int) -> str:
            raise OSError(5, "Input/output error")

        editor = LineEditor(out, 0, read=failing_read)
        with self.assertRaises(EditorError):
            run_main_loop(store, View(), _FakeTerminal(), editor, out)

        self.assertTrue(out.getvalue().endswith(ansi.CURSOR_ON))

    def test_terminal_failure_propagates(self) -> None:
        class _BrokenTerminal(_FakeTerminal):
            def size(self) -> tuple[int, int]:
                raise TerminalError("cannot query terminal size")

        store = LineStore(io.BytesIO(b"x\n"))
        out = io.StringIO()
        editor = LineEditor(out, 0, read=lambda _fd: "ESC")
        with self.assertRaises(TerminalError):
            run_main_loop(store, View(), _BrokenTerminal(), editor, out)

    def test_unmapped_function_key_does_not_end_the_session(self) -> None:
        input_mod._PENDING_BYTES.clear()
        store = LineStore(io.BytesIO(b"x\n"))
        out = io.StringIO()
        read_fd, write_fd = os.pipe()
        try:
            # "!", PageUp, Enter, then the keyboard stream ends.
            os.write(write_fd, b"!\x1b[5~\r")
            os.close(write_fd)
            write_fd = -1
            editor = LineEditor(out, read_fd)
            run_main_loop(store, View(), _FakeTerminal(), editor, out)
        finally:
            os.close(read_fd)
            if write_fd != -1:
                os.close(write_fd)

        self.assertEqual(store.get(0), Line("x!", Terminator.LF))

    def test_long_line_edit_stays_on_one_terminal_row(self) -> None:
        terminal = _FakeTerminal(columns=10)
        store, _view, _viewport, out = _run(b"A" * 30 + b"\n", ["!", "ENTER", "ESC"], terminal=terminal)

        self.assertEqual(store.get(0), Line("A" * 30 + "!", Terminator.LF))
        self.assertNotIn("\x1b[30C", out)
        self.assertNotIn("\x1b[31C", out)
        self.assertIn(f"{ansi.RESET}{'A' * 7}!{ansi.ERASE_LINE}\r\x1b[8C", out)

    def test_raw_mode_is_entered_once_per_session(self) -> None:
        terminal = _FakeTerminal()
        _run(b"a\nb\n", ["DOWN", "UP", "ESC"], terminal=terminal)

        self.assertEqual(terminal.raw_entries, 3)

    def test_cursor_returns_to_window_top_between_passes(self) -> None:
        _store, _view, _viewport, out = _run(b"a\nb\nc\n", ["DOWN", "ESC"])

        # Three rows plus the status row, then up to row 0 for the first edit.
        self.assertIn("\r\x1b[4A", out)
        # After moving down, the next pass climbs to row 1.
        self.assertIn("\r\x1b[3A", out)
        # Exit parks the cursor below the status row.
        self.assertIn(f"\r\x1b[3B{ansi.CURSOR_ON}", out)


class LoopHelperTests(unittest.TestCase):
    def test_line_supplier_walks_store_from_start(self) -> None:
        store = LineStore(io.BytesIO(b"a\nb"))
        next_line = line_supplier(store, 1)

        self.assertIsNone(next_line())
        store.get(0)
        next_line = line_supplier(store, 1)
        self.assertEqual(next_line(), Line("b", Terminator.NONE))
        self.assertIsNone(next_line())

    def test_status_text_marks_pending_input(self) -> None:
        store = LineStore(io.BytesIO(b"a\nb\n"))
        store.get(0)

        self.assertIn("line 1/1+", status_text("f.txt", store, Viewport()))
        store.get(1)
        store.get(2)
        self.assertIn("line 1/3 ", status_text("f.txt", store, Viewport()))


if __name__ == "__main__":
    unittest.main()
