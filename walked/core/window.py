"""Panel grid, focus and split/close management for walked."""
import logging

from .actions import WINDOW_ACTIONS, Action, ActionType
from .clipboard import Clipboard
from .config import AppConfig
from .panel import Panel, PanelMode

LOGGER = logging.getLogger(__name__)


class Window:
    """A grid of panels: rows of panels, one of them focused.

    Every row holds at least one panel and there is always at least one
    row; the last panel can only go away by quitting.
    """

    _DISPATCH = {
        Action.FOCUS_LEFT: "focus_left",
        Action.FOCUS_RIGHT: "focus_right",
        Action.FOCUS_UP: "focus_up",
        Action.FOCUS_DOWN: "focus_down",
        Action.SPLIT_LEFT: "split_left",
        Action.SPLIT_RIGHT: "split_right",
        Action.SPLIT_UP: "split_up",
        Action.SPLIT_DOWN: "split_down",
        Action.CLOSE_PANEL: "close_panel",
    }

    def __init__(self, start_path, config=None, clipboard=None):
        self.config = config or AppConfig()
        self.clipboard = clipboard or Clipboard(sync_system=self.config.sync_system_clipboard)
        self.panels = [[Panel(start_path)]]
        self.focus_row = 0
        self.focus_col = 0

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def focus(self):
        return self.focus_row, self.focus_col

    @property
    def focused_panel(self):
        return self.panels[self.focus_row][self.focus_col]

    @property
    def working_directory(self):
        """Directory reported to the shell on exit."""
        return self.focused_panel.working_directory

    def iter_panels(self):
        for row in self.panels:
            yield from row

    def panel_count(self):
        return sum(len(row) for row in self.panels)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _accepts_window_actions(self):
        panel = self.focused_panel
        return panel.mode == PanelMode.NORMAL and not panel.errors

    def handle_key(self, event):
        """Route one key event; returns the focused panel's result, if any."""
        if self._accepts_window_actions():
            action = self.config.action_for(event, WINDOW_ACTIONS)
            if action is not None:
                LOGGER.debug('window: %s', action.value)
                getattr(self, self._DISPATCH[action])()
                return None

        panel = self.focused_panel
        result = panel.handle_key(event, self.config, self.clipboard)
        if result is not None and result.type == ActionType.CHANGED:
            self.refresh_others(panel)
        return result

    def refresh_others(self, source):
        """Re-read every panel except ``source`` after a filesystem change."""
        for panel in self.iter_panels():
            if panel is not source:
                panel.refresh()

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    def _clamp_focus(self):
        self.focus_row = max(0, min(self.focus_row, len(self.panels) - 1))
        row = self.panels[self.focus_row]
        self.focus_col = max(0, min(self.focus_col, len(row) - 1))

    def focus_left(self):
        if self.focus_col > 0:
            self.focus_col -= 1

    def focus_right(self):
        if self.focus_col < len(self.panels[self.focus_row]) - 1:
            self.focus_col += 1

    def focus_up(self):
        if self.focus_row > 0:
            self.focus_row -= 1
            self._clamp_focus()

    def focus_down(self):
        if self.focus_row < len(self.panels) - 1:
            self.focus_row += 1
            self._clamp_focus()

    # ------------------------------------------------------------------
    # Split / close
    # ------------------------------------------------------------------

    def _new_panel(self):
        return Panel(self.focused_panel.working_directory)

    def split_up(self):
        """New single-panel row above the focused row."""
        self.panels.insert(self.focus_row, [self._new_panel()])
        self.focus_col = 0

    def split_down(self):
        """New single-panel row below the focused row."""
        self.panels.insert(self.focus_row + 1, [self._new_panel()])
        self.focus_row += 1
        self.focus_col = 0

    def split_left(self):
        """New panel before the focused one in the same row."""
        self.panels[self.focus_row].insert(self.focus_col, self._new_panel())

    def split_right(self):
        """New panel after the focused one in the same row."""
        self.panels[self.focus_row].insert(self.focus_col + 1, self._new_panel())
        self.focus_col += 1

    def close_panel(self):
        """Close the focused panel; returns False for the last panel."""
        row = self.panels[self.focus_row]
        if len(row) > 1:
            row.pop(self.focus_col)
            self.focus_col = max(0, self.focus_col - 1)
            return True
        if len(self.panels) > 1:
            self.panels.pop(self.focus_row)
            self.focus_row = max(0, self.focus_row - 1)
            self._clamp_focus()
            return True
        return False
