"""Theme definitions and lookup helpers for walked."""

from dataclasses import dataclass
import curses
from typing import Optional

from .constants import (
    C_BODY,
    C_BORDER,
    C_BORDER_FOCUS,
    C_CURSOR,
    C_ERROR,
    C_HEADER,
    C_RANGE,
    C_STATUS,
    C_TITLE,
)

# Test doubles may expose only a subset of color constants.
for _name, _fallback in {
    "COLOR_BLACK": 0,
    "COLOR_RED": 1,
    "COLOR_GREEN": 2,
    "COLOR_YELLOW": 3,
    "COLOR_BLUE": 4,
    "COLOR_CYAN": 6,
    "COLOR_WHITE": 7,
}.items():
    if not hasattr(curses, _name):
        setattr(curses, _name, _fallback)

# Terminal default color (requires use_default_colors()).
DEFAULT_COLOR = -1

DEFAULT_THEME = "classic"

ROLE_TO_PAIR_ID = {
    "border": C_BORDER,
    "border_focus": C_BORDER_FOCUS,
    "title": C_TITLE,
    "error": C_ERROR,
    "body": C_BODY,
    "cursor": C_CURSOR,
    "range": C_RANGE,
    "header": C_HEADER,
    "status": C_STATUS,
}


def _mk_pairs(fg_bg):
    return dict(zip(ROLE_TO_PAIR_ID, fg_bg))


@dataclass(frozen=True)
class Theme:
    """Semantic theme definition."""

    key: str
    label: str
    pairs: dict[str, tuple[int, int]]


THEMES = {
    "classic": Theme(
        key="classic",
        label="Classic",
        pairs=_mk_pairs(
            (
                (curses.COLOR_WHITE, DEFAULT_COLOR),
                (curses.COLOR_CYAN, DEFAULT_COLOR),
                (curses.COLOR_CYAN, DEFAULT_COLOR),
                (curses.COLOR_WHITE, curses.COLOR_RED),
                (DEFAULT_COLOR, DEFAULT_COLOR),
                (curses.COLOR_BLACK, curses.COLOR_CYAN),
                (curses.COLOR_BLACK, curses.COLOR_YELLOW),
                (curses.COLOR_BLUE, DEFAULT_COLOR),
                (curses.COLOR_BLUE, DEFAULT_COLOR),
            )
        ),
    ),
    "hacker": Theme(
        key="hacker",
        label="Hacker",
        pairs=_mk_pairs(
            (
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_BLACK, curses.COLOR_GREEN),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_BLACK, curses.COLOR_GREEN),
                (curses.COLOR_BLACK, curses.COLOR_GREEN),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
            )
        ),
    ),
    "mono": Theme(
        key="mono",
        label="Monochrome",
        pairs=_mk_pairs(((DEFAULT_COLOR, DEFAULT_COLOR),) * len(ROLE_TO_PAIR_ID)),
    ),
}


def list_themes():
    """Return themes in deterministic UI order."""
    order = ("classic", "hacker", "mono")
    return [THEMES[key] for key in order]


def get_theme(theme_key: Optional[str]) -> Theme:
    """Resolve theme by key with fallback to default."""
    if not theme_key:
        return THEMES[DEFAULT_THEME]
    return THEMES.get(theme_key, THEMES[DEFAULT_THEME])
