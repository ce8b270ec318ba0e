"""Translate raw curses input into walked KeyEvents."""

import curses
import logging

from ..core.keys import (
    BACKSPACE,
    DELETE,
    DOWN,
    END,
    ENTER,
    ESC,
    HOME,
    LEFT,
    PAGE_DOWN,
    PAGE_UP,
    RIGHT,
    TAB,
    UP,
    KeyEvent,
    Modifier,
)

LOGGER = logging.getLogger(__name__)

# curses attribute name -> (key code, extra modifiers)
_CURSES_KEYS = {
    "KEY_UP": (UP, Modifier.NONE),
    "KEY_DOWN": (DOWN, Modifier.NONE),
    "KEY_LEFT": (LEFT, Modifier.NONE),
    "KEY_RIGHT": (RIGHT, Modifier.NONE),
    "KEY_HOME": (HOME, Modifier.NONE),
    "KEY_END": (END, Modifier.NONE),
    "KEY_PPAGE": (PAGE_UP, Modifier.NONE),
    "KEY_NPAGE": (PAGE_DOWN, Modifier.NONE),
    "KEY_DC": (DELETE, Modifier.NONE),
    "KEY_BACKSPACE": (BACKSPACE, Modifier.NONE),
    "KEY_ENTER": (ENTER, Modifier.NONE),
    "KEY_BTAB": (TAB, Modifier.SHIFT),
}
_CURSES_KEYS.update({f"KEY_F{n}": (f"F{n}", Modifier.NONE) for n in range(1, 13)})

_CHAR_KEYS = {
    "\n": ENTER,
    "\r": ENTER,
    "\t": TAB,
    "\x7f": BACKSPACE,
    "\b": BACKSPACE,
    "\x1b": ESC,
}


def _curses_key_table():
    table = {}
    for name, value in _CURSES_KEYS.items():
        code = getattr(curses, name, None)
        if isinstance(code, int):
            table[code] = value
    return table


def translate_key(key, modifiers=Modifier.NONE):
    """Map one get_wch() result to a KeyEvent, or None when it means nothing."""
    if key is None:
        return None

    if isinstance(key, int):
        mapped = _curses_key_table().get(key)
        if mapped is None:
            LOGGER.debug('ignoring curses key code %s', key)
            return None
        code, extra = mapped
        return KeyEvent(code, Modifier(modifiers | extra))

    if not isinstance(key, str) or len(key) != 1:
        return None
    if key in _CHAR_KEYS:
        return KeyEvent(_CHAR_KEYS[key], Modifier(modifiers))

    value = ord(key)
    if 1 <= value <= 26:
        return KeyEvent.char(chr(value + 96), modifiers | Modifier.CONTROL)
    if value < 32:
        return None
    return KeyEvent.char(key, modifiers)


def _read_pending(stdscr):
    """Read a key that is already buffered, without blocking."""
    stdscr.nodelay(True)
    try:
        return stdscr.get_wch()
    except curses.error:
        return None
    finally:
        stdscr.nodelay(False)


def read_key_event(stdscr, key):
    """Translate ``key``; an Escape followed by a buffered key means Alt."""
    if key == "\x1b":
        follow = _read_pending(stdscr)
        if follow is not None and follow != "\x1b":
            return translate_key(follow, Modifier.ALT)
    return translate_key(key)
