"""Terminal bootstrap helpers for walked startup."""

import curses
import logging

from ..constants import ESC_DELAY_MS

LOGGER = logging.getLogger(__name__)


def configure_terminal(stdscr):
    """Apply core curses terminal setup.

    Raw mode delivers Ctrl+C, Ctrl+Y and the flow-control keys to the app
    as ordinary characters.
    """
    try:
        curses.curs_set(0)
    except curses.error:
        LOGGER.debug('terminal does not support hiding the cursor')
    curses.noecho()
    curses.raw()
    stdscr.keypad(True)
    stdscr.nodelay(False)
    set_escdelay = getattr(curses, 'set_escdelay', None)
    if callable(set_escdelay):
        set_escdelay(ESC_DELAY_MS)
