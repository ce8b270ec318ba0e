import importlib
import os
import sys
import tempfile
import types
import unittest
from unittest import mock

from tests._support import FakeScreen, make_fake_curses, make_tree
from walked.core.config import AppConfig

_RELOADED = (
    "walked.theme",
    "walked.utils",
    "walked.ui.key_input",
    "walked.ui.rendering",
    "walked.core.bootstrap",
    "walked.core.event_loop",
    "walked.core.app",
)


class _FakeCursesTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._prev_curses = sys.modules.get("curses")
        cls.fake_curses = make_fake_curses()
        sys.modules["curses"] = cls.fake_curses
        for name in _RELOADED:
            sys.modules.pop(name, None)
        cls.event_loop = importlib.import_module("walked.core.event_loop")
        cls.app_mod = importlib.import_module("walked.core.app")

    @classmethod
    def tearDownClass(cls):
        for name in _RELOADED:
            sys.modules.pop(name, None)
        if cls._prev_curses is not None:
            sys.modules["curses"] = cls._prev_curses
        else:
            sys.modules.pop("curses", None)


class EventLoopTests(_FakeCursesTestCase):
    def _make_app(self):
        stdscr = types.SimpleNamespace(
            erase=mock.Mock(),
            noutrefresh=mock.Mock(),
            get_wch=mock.Mock(return_value="a"),
        )
        return types.SimpleNamespace(
            stdscr=stdscr,
            draw=mock.Mock(),
            handle_key=mock.Mock(),
            cleanup=mock.Mock(),
            running=True,
        )

    def test_draw_frame_renders_and_flushes(self):
        app = self._make_app()
        self.fake_curses.doupdate.reset_mock()

        self.event_loop.draw_frame(app)

        app.stdscr.erase.assert_called_once_with()
        app.draw.assert_called_once_with()
        app.stdscr.noutrefresh.assert_called_once_with()
        self.fake_curses.doupdate.assert_called_once_with()

    def test_read_input_key_handles_curses_error(self):
        stdscr = types.SimpleNamespace(get_wch=mock.Mock(side_effect=self.fake_curses.error()))
        self.assertIsNone(self.event_loop.read_input_key(stdscr))
        stdscr.get_wch = mock.Mock(return_value="x")
        self.assertEqual(self.event_loop.read_input_key(stdscr), "x")

    def test_dispatch_input_routes_keys_and_resize(self):
        app = self._make_app()
        self.fake_curses.update_lines_cols.reset_mock()

        self.event_loop.dispatch_input(app, None)
        self.event_loop.dispatch_input(app, self.fake_curses.KEY_RESIZE)
        self.event_loop.dispatch_input(app, "j")

        self.fake_curses.update_lines_cols.assert_called_once_with()
        app.handle_key.assert_called_once_with("j")

    def test_run_app_loop_always_cleans_up(self):
        app = self._make_app()
        app.draw.side_effect = RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            self.event_loop.run_app_loop(app)

        app.cleanup.assert_called_once_with()

    def test_run_app_loop_stops_when_not_running(self):
        app = self._make_app()

        def stop(_key):
            app.running = False

        app.handle_key.side_effect = stop
        self.event_loop.run_app_loop(app)

        app.handle_key.assert_called_once_with("a")
        app.cleanup.assert_called_once_with()


class WalkedAppTests(_FakeCursesTestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory(dir=os.getcwd())
        self.addCleanup(self.tmp.cleanup)
        self.root = os.path.realpath(self.tmp.name)
        make_tree(self.root, {"sub": {"f": ""}})

    def test_startup_configures_terminal(self):
        screen = FakeScreen(error=self.fake_curses.error)
        self.fake_curses.raw.reset_mock()
        self.fake_curses.set_escdelay.reset_mock()

        app = self.app_mod.WalkedApp(screen, AppConfig(), self.root)

        self.assertTrue(app.running)
        self.fake_curses.raw.assert_called_once_with()
        self.fake_curses.set_escdelay.assert_called_once()
        self.assertEqual(app.window.working_directory, self.root)

    def test_session_walks_then_quits_with_directory(self):
        screen = FakeScreen(keys=[" ", "j", "q"], error=self.fake_curses.error)
        app = self.app_mod.WalkedApp(screen, AppConfig(), self.root)

        final = app.run()

        self.assertEqual(final, os.path.join(self.root, "sub"))
        self.assertFalse(app.running)

    def test_alt_sequence_reaches_window(self):
        screen = FakeScreen(keys=["L"], error=self.fake_curses.error)
        app = self.app_mod.WalkedApp(screen, AppConfig(), self.root)

        app.handle_key("\x1b")

        self.assertEqual(app.window.panel_count(), 2)

    def test_cleanup_defaults_to_focused_directory(self):
        screen = FakeScreen(error=self.fake_curses.error)
        app = self.app_mod.WalkedApp(screen, AppConfig(), self.root)

        app.cleanup()

        self.assertEqual(app.exit_directory, self.root)

    def test_unknown_key_is_ignored(self):
        screen = FakeScreen(error=self.fake_curses.error)
        app = self.app_mod.WalkedApp(screen, AppConfig(), self.root)
        self.assertIsNone(app.handle_key(99999))


if __name__ == "__main__":
    unittest.main()
