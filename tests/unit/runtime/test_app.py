from __future__ import annotations

import io
from contextlib import contextmanager
import unittest
from unittest import mock

from lazyedit.buffer import LineStore
from lazyedit.runtime.app import run_editor
from lazyedit.runtime.config import EditorSettings
from lazyedit.runtime.viewport import Viewport


class _FakeTerminal:
    tty_fd = 42


class RunEditorWiringTests(unittest.TestCase):
    def test_settings_flow_into_view_and_editor(self) -> None:
        events: list[str] = []

        @contextmanager
        def fake_open():
            events.append("open")
            yield _FakeTerminal()
            events.append("close")

        @contextmanager
        def fake_vt():
            events.append("vt on")
            yield
            events.append("vt off")

        settings = EditorSettings(tab_width=2, show_terminators=False, terminator_color="0;36", prompt="> ")
        out = io.StringIO()
        with mock.patch("lazyedit.runtime.app.TerminalController.open", side_effect=fake_open), mock.patch(
            "lazyedit.runtime.app.virtual_terminal_processing", side_effect=fake_vt
        ), mock.patch("lazyedit.runtime.app.run_main_loop", return_value=Viewport()) as loop_mock:
            store = run_editor(io.BytesIO(b"a\n"), "a.txt", settings, out)

        self.assertEqual(events, ["vt on", "open", "close", "vt off"])
        self.assertIsInstance(store, LineStore)
        store_arg, view, terminal, editor, out_arg = loop_mock.call_args.args
        self.assertIs(store_arg, store)
        self.assertEqual(view.options.tab_width, 2)
        self.assertFalse(view.options.show_terminators)
        self.assertEqual(view.options.terminator_color, "0;36")
        self.assertEqual(editor.keyboard_fd, 42)
        self.assertEqual(editor.prompt, "> ")
        self.assertEqual(editor.tab_width, 2)
        self.assertIs(out_arg, out)
        self.assertEqual(loop_mock.call_args.kwargs, {"source_name": "a.txt", "show_status": True})

    def test_terminal_released_when_loop_fails(self) -> None:
        events: list[str] = []

        @contextmanager
        def fake_open():
            try:
                yield _FakeTerminal()
            finally:
                events.append("close")

        with mock.patch("lazyedit.runtime.app.TerminalController.open", side_effect=fake_open), mock.patch(
            "lazyedit.runtime.app.run_main_loop", side_effect=RuntimeError("boom")
        ):
            with self.assertRaises(RuntimeError):
                run_editor(io.BytesIO(b""), "empty", EditorSettings(), io.StringIO())

        self.assertEqual(events, ["close"])


if __name__ == "__main__":
    unittest.main()
