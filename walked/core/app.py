"""
Main walked application class.
"""
import logging
import os

from ..ui.key_input import read_key_event
from ..ui.rendering import draw_window
from ..utils import init_colors
from .actions import ActionType
from .bootstrap import configure_terminal
from .config import AppConfig
from .event_loop import run_app_loop
from .window import Window

LOGGER = logging.getLogger(__name__)


class WalkedApp:
    """Ties the panel grid to a curses screen."""

    def __init__(self, stdscr, config=None, start_path=None):
        self.stdscr = stdscr
        self.config = config or AppConfig()
        self.running = True
        self.exit_directory = None

        self.window = Window(start_path or os.getcwd(), self.config)
        LOGGER.debug('starting in %s', self.window.working_directory)

        configure_terminal(stdscr)
        init_colors(self.config.theme)

    def handle_key(self, key):
        """Translate a raw key and route it through the window."""
        event = read_key_event(self.stdscr, key)
        if event is None:
            return None
        result = self.window.handle_key(event)
        if result is not None and result.type == ActionType.QUIT:
            self.exit_directory = result.payload
            self.running = False
        return result

    def draw(self):
        draw_window(self.stdscr, self.window)

    def cleanup(self):
        """Record where the session ended."""
        if self.exit_directory is None:
            self.exit_directory = self.window.working_directory
        LOGGER.debug('exiting in %s', self.exit_directory)

    def run(self):
        """Main event loop. Returns the directory to report to the shell."""
        run_app_loop(self)
        return self.exit_directory
