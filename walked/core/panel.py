"""
Panel: one directory listing with a cursor, a selection range and a modal
edit buffer, driven by abstract key events.
"""
import logging
import os
from dataclasses import dataclass
from enum import Enum

from ..constants import NEW_DIRECTORY_NAME, NEW_FILE_NAME, RESERVED_NAME_CHARS
from .actions import EDIT_ACTIONS, NORMAL_ACTIONS, Action, ActionResult, ActionType
from .errors import ErrorQueue, Message, PathAllocationError, PathKind, PathNotFound, map_os_error
from .file_operations import (
    allocate_path,
    copy_entry,
    create_entry,
    entry_type,
    list_directory,
    remove_entry,
    rename_entry,
)
from .keys import BACKSPACE, ENTER, Modifier

LOGGER = logging.getLogger(__name__)


class PanelMode(str, Enum):
    NORMAL = "normal"
    INSERT = "insert"
    PROMPT = "prompt"


@dataclass(frozen=True)
class PanelRow:
    """Render-ready projection of one entry."""

    index: int
    header: str
    name: str
    kind: str
    selected: bool = False
    in_range: bool = False


def _same_path(a, b):
    return os.path.normcase(os.path.normpath(a)) == os.path.normcase(os.path.normpath(b))


class Panel:
    """A single directory-browsing view."""

    _next_id = 0

    # Normal-mode actions that need no extra context.
    _NORMAL_DISPATCH = {
        Action.UP: "move_up",
        Action.DOWN: "move_down",
        Action.SELECT_UP: "select_up",
        Action.SELECT_DOWN: "select_down",
        Action.LEFT: "cursor_left",
        Action.RIGHT: "cursor_right",
        Action.DIR_WALK: "walk",
        Action.DIR_UP: "parent",
        Action.NEW_FILE: "new_file",
        Action.NEW_DIRECTORY: "new_directory",
        Action.DUPLICATE: "duplicate_selection",
        Action.REMOVE: "remove_selection",
        Action.REFRESH: "refresh",
        Action.INSERT_MODE: "enter_insert_mode",
        Action.PROMPT: "enter_prompt_mode",
    }

    def __init__(self, working_directory):
        self.id = Panel._next_id
        Panel._next_id += 1
        self.working_directory = os.path.abspath(os.fspath(working_directory))
        self.entries = []           # List[str], enumeration order
        self.mode = PanelMode.NORMAL
        self.cursor_index = None
        self.cursor_offset = 0
        self.edit_buffer = ''
        self.selection_start = None
        self.errors = ErrorQueue()
        self.read_working_dir()
        self.select_first()

    def __repr__(self):
        return f'<Panel {self.id} {self.working_directory!r} {self.mode.value}>'

    # ------------------------------------------------------------------
    # Listing and cursor bookkeeping
    # ------------------------------------------------------------------

    def read_working_dir(self, report_errors=True):
        """Replace ``entries`` with a fresh listing of the working directory."""
        try:
            entries = list_directory(self.working_directory)
        except OSError as exc:
            if report_errors:
                self.errors.push(map_os_error(
                    exc, self.working_directory, PathKind.DIR,
                    f"Couldn't read directory '{self.working_directory}'",
                ))
            else:
                LOGGER.debug('panel %s: re-read of %s failed: %s', self.id, self.working_directory, exc)
            return False
        self.entries = entries
        self.refresh_cursor()
        return True

    def refresh(self):
        """Re-read the listing after an external change."""
        self.read_working_dir(report_errors=False)

    def select_first(self):
        self.cursor_index = 0 if self.entries else None
        self.selection_start = None
        self.refresh_cursor()

    def refresh_cursor(self):
        """Clamp cursor, anchor and text offset to the current listing."""
        count = len(self.entries)
        if count == 0:
            self.cursor_index = None
        elif self.cursor_index is None:
            self.cursor_index = 0
        else:
            self.cursor_index = max(0, min(self.cursor_index, count - 1))
        if self.selection_start is not None and self.selection_start >= count:
            self.selection_start = None

        if self.mode == PanelMode.NORMAL:
            limit = len(self.selected_name())
        else:
            limit = len(self.edit_buffer)
        self.cursor_offset = max(0, min(self.cursor_offset, limit))

    def selected_entry(self):
        if self.cursor_index is None:
            return None
        return self.entries[self.cursor_index]

    def selected_name(self):
        entry = self.selected_entry()
        if entry is None:
            return ''
        return os.path.basename(entry) or '..'

    def selection_range(self):
        """Inclusive (low, high) index range for multi-entry operations."""
        if self.cursor_index is None:
            return None
        anchor = self.cursor_index if self.selection_start is None else self.selection_start
        return min(anchor, self.cursor_index), max(anchor, self.cursor_index)

    def selected_paths(self):
        bounds = self.selection_range()
        if bounds is None:
            return []
        low, high = bounds
        return self.entries[low:high + 1]

    def _change_directory(self, path):
        """Switch to ``path`` if it can be listed; the cursor goes to the top."""
        try:
            entries = list_directory(path)
        except OSError as exc:
            self.errors.push(map_os_error(exc, path, PathKind.DIR, f"Couldn't read directory '{path}'"))
            return False
        self.working_directory = path
        self.entries = entries
        self.select_first()
        return True

    # ------------------------------------------------------------------
    # Key handling
    # ------------------------------------------------------------------

    def handle_key(self, event, config, clipboard):
        """Process one key event. Returns an ActionResult or None."""
        if self.errors:
            if event.is_press:
                self.errors.clear()
            return None

        if self.mode == PanelMode.NORMAL:
            return self._handle_normal_key(event, config, clipboard)
        return self._handle_edit_key(event, config)

    def _handle_normal_key(self, event, config, clipboard):
        action = config.action_for(event, NORMAL_ACTIONS)
        if action is None:
            return None
        LOGGER.debug('panel %s: %s', self.id, action.value)

        if action == Action.QUIT:
            return ActionResult(ActionType.QUIT, self.working_directory)
        if action == Action.COPY:
            result = self.copy_selection(clipboard)
        elif action == Action.PASTE:
            result = self.paste(clipboard)
        else:
            result = getattr(self, self._NORMAL_DISPATCH[action])()
        self.refresh_cursor()
        return result

    def _handle_edit_key(self, event, config):
        action = config.action_for(event, EDIT_ACTIONS)
        if action == Action.CANCEL_EDIT:
            self._end_edit()
            return None
        if action == Action.NORMAL_MODE or (event.code == ENTER and event.is_press):
            if self.mode == PanelMode.PROMPT:
                return self._commit_prompt()
            return self._commit_rename()

        if not event.is_press:
            return None
        if event.code == BACKSPACE:
            self._backspace()
        elif event.is_char and not event.modifiers & (Modifier.CONTROL | Modifier.ALT):
            self._insert_char(event.code)
        return None

    # ------------------------------------------------------------------
    # Normal mode actions
    # ------------------------------------------------------------------

    def _move(self, delta):
        if self.cursor_index is None:
            return
        self.cursor_index = max(0, min(self.cursor_index + delta, len(self.entries) - 1))

    def move_up(self):
        self.selection_start = None
        self._move(-1)

    def move_down(self):
        self.selection_start = None
        self._move(1)

    def select_up(self):
        if self.selection_start is None:
            self.selection_start = self.cursor_index
        self._move(-1)

    def select_down(self):
        if self.selection_start is None:
            self.selection_start = self.cursor_index
        self._move(1)

    def cursor_left(self):
        """Move the highlighted cell in the name; editing always starts at the end."""
        if self.cursor_offset > 0:
            self.cursor_offset -= 1

    def cursor_right(self):
        """Counterpart of cursor_left; only affects where the cell is drawn."""
        if self.cursor_offset < len(self.selected_name()):
            self.cursor_offset += 1

    def walk(self):
        """Enter the selected directory."""
        entry = self.selected_entry()
        if entry is None or not os.path.isdir(entry):
            return None
        self._change_directory(entry)
        return None

    def parent(self):
        """Go to the parent of the working directory, if there is one."""
        parent = os.path.dirname(self.working_directory)
        if parent == self.working_directory:
            return None
        self._change_directory(parent)
        return None

    def _new_entry(self, is_directory):
        name = NEW_DIRECTORY_NAME if is_directory else NEW_FILE_NAME
        try:
            path = allocate_path(os.path.join(self.working_directory, name))
        except PathAllocationError as exc:
            self.errors.push(exc.to_walked_error())
            return None
        if not create_entry(path, self.errors, is_directory=is_directory):
            return None

        self.read_working_dir()
        for i, entry in enumerate(self.entries):
            if entry == path:
                self.cursor_index = i
                self.selection_start = None
                self._begin_edit(PanelMode.INSERT, '')
                break
        return ActionResult(ActionType.CHANGED, path)

    def new_file(self):
        return self._new_entry(is_directory=False)

    def new_directory(self):
        return self._new_entry(is_directory=True)

    def duplicate_selection(self):
        """Copy every entry of the range next to itself."""
        paths = self.selected_paths()
        if not paths:
            return None
        self.selection_start = None

        changed = False
        for source in paths:
            try:
                destination = allocate_path(source)
            except PathAllocationError as exc:
                self.errors.push(exc.to_walked_error())
                continue
            changed = copy_entry(source, destination, self.errors) or changed
        if not changed:
            return None
        self.read_working_dir()
        return ActionResult(ActionType.CHANGED)

    def remove_selection(self):
        """Delete every entry of the range."""
        paths = self.selected_paths()
        if not paths:
            return None
        self.selection_start = None

        for path in paths:
            remove_entry(path, self.errors)
        self.read_working_dir()
        return ActionResult(ActionType.CHANGED)

    def copy_selection(self, clipboard):
        """Replace the clipboard with the selected entry or range."""
        paths = self.selected_paths()
        if not paths:
            return None
        clipboard.set(paths, source_panel=self.id)
        return None

    def paste(self, clipboard):
        """Copy every clipboard path into the working directory."""
        changed = False
        for source in clipboard.paths:
            name = os.path.basename(source.rstrip(os.sep)) or os.path.basename(source)
            try:
                destination = allocate_path(os.path.join(self.working_directory, name))
            except PathAllocationError as exc:
                self.errors.push(exc.to_walked_error())
                continue
            changed = copy_entry(source, destination, self.errors) or changed
        if not changed:
            return None
        self.read_working_dir()
        return ActionResult(ActionType.CHANGED)

    def enter_insert_mode(self):
        if self.selected_entry() is None:
            return None
        self._begin_edit(PanelMode.INSERT, self.selected_name())
        return None

    def enter_prompt_mode(self):
        self._begin_edit(PanelMode.PROMPT, '')
        return None

    # ------------------------------------------------------------------
    # Insert / prompt editing
    # ------------------------------------------------------------------

    def _begin_edit(self, mode, text):
        self.mode = mode
        self.edit_buffer = text
        self.cursor_offset = len(text)

    def _end_edit(self):
        self.mode = PanelMode.NORMAL
        self.edit_buffer = ''
        self.refresh_cursor()

    def _backspace(self):
        if self.cursor_offset <= 0:
            return
        offset = self.cursor_offset
        self.edit_buffer = self.edit_buffer[:offset - 1] + self.edit_buffer[offset:]
        self.cursor_offset -= 1

    def _insert_char(self, ch):
        offset = self.cursor_offset
        self.edit_buffer = self.edit_buffer[:offset] + ch + self.edit_buffer[offset:]
        self.cursor_offset += 1

    def _commit_rename(self):
        """Validate the edit buffer and rename the selected entry to it."""
        source = self.selected_entry()
        if source is None:
            self._end_edit()
            return None

        name = self.edit_buffer
        if not name:
            self.errors.push(Message("Name can't be empty"))
            return None
        if any(ch in name for ch in RESERVED_NAME_CHARS):
            self.errors.push(Message(
                "Paths can't contain the following characters: " + ' '.join(RESERVED_NAME_CHARS)
            ))
            return None

        target = os.path.join(self.working_directory, name)
        if os.path.lexists(target):
            if not _same_path(target, source):
                self.errors.push(Message(f"'{target}' already exists"))
                return None
            self._end_edit()
            return None

        if not rename_entry(source, target, self.errors):
            return None
        self.entries[self.cursor_index] = target
        self._end_edit()
        return ActionResult(ActionType.CHANGED, target)

    def _commit_prompt(self):
        """Navigate to the directory typed into the prompt."""
        text = self.edit_buffer.strip()
        if not text:
            self._end_edit()
            return None
        target = os.path.normpath(os.path.join(self.working_directory, os.path.expanduser(text)))
        if not os.path.isdir(target):
            self.errors.push(PathNotFound(target, PathKind.DIR))
            return None
        if self._change_directory(target):
            self._end_edit()
        return None

    # ------------------------------------------------------------------
    # Projection for renderers
    # ------------------------------------------------------------------

    def rows(self, config):
        """Return one PanelRow per entry."""
        width = len(str(len(self.entries)))
        has_range = self.selection_start is not None
        low, high = self.selection_range() or (-1, -1)
        type_text = {
            'file': config.file_text,
            'dir': config.directory_text,
            'symlink': config.symlink_text,
            'other': config.other_text,
        }

        rows = []
        for i, path in enumerate(self.entries):
            kind = entry_type(path)
            header = ''
            if config.show_entry_number:
                header = f'{i:>{width}}'
            if config.show_entry_type:
                if config.show_entry_number:
                    header += ':'
                header += type_text[kind]
            selected = i == self.cursor_index
            name = os.path.basename(path) or '..'
            if selected and self.mode == PanelMode.INSERT:
                name = self.edit_buffer
            rows.append(PanelRow(
                index=i,
                header=header,
                name=name,
                kind=kind,
                selected=selected,
                in_range=has_range and low <= i <= high,
            ))
        return rows

    def title(self, config):
        """Pending errors replace the normal title until dismissed."""
        if self.errors:
            return ' | '.join(self.errors.messages())
        if not config.show_working_directory:
            return ''
        if config.simple_working_directory:
            return os.path.basename(self.working_directory) or self.working_directory
        return self.working_directory

    def status(self, config):
        return {
            PanelMode.NORMAL: config.normal_mode_text,
            PanelMode.INSERT: config.insert_mode_text,
            PanelMode.PROMPT: config.prompt_mode_text,
        }[self.mode]
