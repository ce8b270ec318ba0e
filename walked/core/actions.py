"""
Typed action contract shared by key bindings, panels and the window grid.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ActionType(str, Enum):
    """Result kinds reported back to the caller of a key handler."""

    CHANGED = "changed"
    QUIT = "quit"


class Action(str, Enum):
    """Named, rebindable actions. The value is the config key."""

    # Panel, normal mode.
    UP = "up"
    DOWN = "down"
    SELECT_UP = "select_up"
    SELECT_DOWN = "select_down"
    LEFT = "left"
    RIGHT = "right"
    DIR_WALK = "dir_walk"
    DIR_UP = "dir_up"
    NEW_FILE = "new_file"
    NEW_DIRECTORY = "new_directory"
    DUPLICATE = "duplicate"
    REMOVE = "remove"
    COPY = "copy"
    PASTE = "paste"
    REFRESH = "refresh"
    INSERT_MODE = "insert_mode"
    PROMPT = "prompt"
    QUIT = "quit"

    # Panel, insert/prompt mode.
    NORMAL_MODE = "normal_mode"
    CANCEL_EDIT = "cancel_edit"

    # Window grid.
    FOCUS_LEFT = "focus_left"
    FOCUS_RIGHT = "focus_right"
    FOCUS_UP = "focus_up"
    FOCUS_DOWN = "focus_down"
    SPLIT_LEFT = "split_left"
    SPLIT_RIGHT = "split_right"
    SPLIT_UP = "split_up"
    SPLIT_DOWN = "split_down"
    CLOSE_PANEL = "close_panel"


EDIT_ACTIONS = frozenset({Action.NORMAL_MODE, Action.CANCEL_EDIT})

WINDOW_ACTIONS = frozenset({
    Action.FOCUS_LEFT,
    Action.FOCUS_RIGHT,
    Action.FOCUS_UP,
    Action.FOCUS_DOWN,
    Action.SPLIT_LEFT,
    Action.SPLIT_RIGHT,
    Action.SPLIT_UP,
    Action.SPLIT_DOWN,
    Action.CLOSE_PANEL,
})

NORMAL_ACTIONS = frozenset(set(Action) - EDIT_ACTIONS - WINDOW_ACTIONS)


@dataclass(frozen=True)
class ActionResult:
    """Message emitted by panel/window key handlers."""

    type: ActionType
    payload: Any = None
