"""Config loader/saver and key bindings for walked."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from ..constants import APP_NAME
from ..theme import DEFAULT_THEME, list_themes
from .actions import Action
from .keys import BindingError, format_binding, parse_binding

LOGGER = logging.getLogger(__name__)

DEFAULT_BINDINGS = {
    Action.NEW_FILE: "ctrl+n",
    Action.NEW_DIRECTORY: "ctrl+a",
    Action.DUPLICATE: "ctrl+d",
    Action.REMOVE: "ctrl+x",
    Action.COPY: "ctrl+y",
    Action.PASTE: "ctrl+p",
    Action.REFRESH: "ctrl+r",
    Action.UP: "k",
    Action.DOWN: "j",
    Action.SELECT_UP: "shift+k",
    Action.SELECT_DOWN: "shift+j",
    Action.LEFT: "h",
    Action.RIGHT: "l",
    Action.DIR_WALK: "space",
    Action.DIR_UP: "x",
    Action.INSERT_MODE: "i",
    Action.PROMPT: ":",
    Action.QUIT: "q",
    Action.NORMAL_MODE: "esc",
    Action.CANCEL_EDIT: "ctrl+c",
    Action.FOCUS_LEFT: "alt+h",
    Action.FOCUS_DOWN: "alt+j",
    Action.FOCUS_UP: "alt+k",
    Action.FOCUS_RIGHT: "alt+l",
    Action.SPLIT_LEFT: "alt+shift+h",
    Action.SPLIT_DOWN: "alt+shift+j",
    Action.SPLIT_UP: "alt+shift+k",
    Action.SPLIT_RIGHT: "alt+shift+l",
    Action.CLOSE_PANEL: "alt+c",
}


def default_bindings():
    return {action: parse_binding(text) for action, text in DEFAULT_BINDINGS.items()}


@dataclass(frozen=True)
class AppConfig:
    """Display options, theme and key bindings. Read-only after startup."""

    normal_mode_text: str = "NORMAL"
    insert_mode_text: str = "INSERT"
    prompt_mode_text: str = "GOTO"
    show_entry_number: bool = True
    show_entry_type: bool = True
    show_working_directory: bool = True
    simple_working_directory: bool = False
    directory_text: str = "D"
    file_text: str = "F"
    symlink_text: str = "S"
    other_text: str = "O"
    theme: str = DEFAULT_THEME
    sync_system_clipboard: bool = False
    bindings: dict = field(default_factory=default_bindings)

    def action_for(self, event, allowed=None):
        """Return the first action bound to ``event`` (press only).

        ``allowed`` restricts the lookup to a subset of actions.
        """
        if not event.is_press:
            return None
        pattern = event.pattern()
        for action in Action:
            if allowed is not None and action not in allowed:
                continue
            bound = self.bindings.get(action)
            if bound is not None and bound.pattern() == pattern:
                return action
        return None


DISPLAY_TEXT_FIELDS = (
    "normal_mode_text",
    "insert_mode_text",
    "prompt_mode_text",
    "directory_text",
    "file_text",
    "symlink_text",
    "other_text",
)
DISPLAY_BOOL_FIELDS = (
    "show_entry_number",
    "show_entry_type",
    "show_working_directory",
    "simple_working_directory",
)


def default_config_path() -> Path:
    """Return default config path (~/.config/walked/config.toml)."""
    return Path.home() / ".config" / APP_NAME / "config.toml"


def _coerce_bool(value, default=False):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in ("1", "true", "yes", "on"):
            return True
        if lower in ("0", "false", "no", "off"):
            return False
    return default


def _section(raw, name):
    value = raw.get(name, {})
    if not isinstance(value, dict):
        LOGGER.warning("config section [%s] is not a table; ignoring it", name)
        return {}
    return value


def _normalize_bindings(keys: dict) -> dict:
    bindings = default_bindings()
    for name, text in keys.items():
        try:
            action = Action(name)
        except ValueError:
            LOGGER.warning("unknown action %r in [keys]", name)
            continue
        try:
            bindings[action] = parse_binding(text)
        except BindingError as exc:
            LOGGER.warning("keeping default binding for %s: %s", name, exc)
    return bindings


def _normalize_config(raw: dict) -> AppConfig:
    defaults = AppConfig()
    display = _section(raw, "display")
    clipboard = _section(raw, "clipboard")

    values = {}
    for name in DISPLAY_TEXT_FIELDS:
        value = display.get(name, getattr(defaults, name))
        values[name] = str(value)
    for name in DISPLAY_BOOL_FIELDS:
        values[name] = _coerce_bool(display.get(name), default=getattr(defaults, name))

    theme = str(display.get("theme", DEFAULT_THEME)).strip().lower() or DEFAULT_THEME
    known = [entry.key for entry in list_themes()]
    if theme not in known:
        LOGGER.warning("unknown theme %r (available: %s); using %s", theme, ", ".join(known), DEFAULT_THEME)
        theme = DEFAULT_THEME
    values["theme"] = theme
    values["sync_system_clipboard"] = _coerce_bool(clipboard.get("sync_system"), default=False)
    values["bindings"] = _normalize_bindings(_section(raw, "keys"))
    return replace(defaults, **values)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from TOML file; return defaults when missing/invalid."""
    cfg_path = Path(path) if path is not None else default_config_path()
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except OSError:
        return AppConfig()
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        LOGGER.warning("ignoring malformed config %s: %s", cfg_path, exc)
        return AppConfig()
    return _normalize_config(raw)


def _toml_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _toml_bool(value: bool) -> str:
    return "true" if value else "false"


def serialize_config(config: AppConfig) -> str:
    """Serialize AppConfig as TOML text."""
    lines = ["# walked user configuration", "[display]"]
    for item in fields(config):
        if item.name in DISPLAY_TEXT_FIELDS:
            lines.append(f"{item.name} = {_toml_string(getattr(config, item.name))}")
        elif item.name in DISPLAY_BOOL_FIELDS:
            lines.append(f"{item.name} = {_toml_bool(getattr(config, item.name))}")
    lines.append(f"theme = {_toml_string(config.theme)}")
    lines.append("")
    lines.append("[clipboard]")
    lines.append(f"sync_system = {_toml_bool(config.sync_system_clipboard)}")
    lines.append("")
    lines.append("[keys]")
    for action in Action:
        event = config.bindings.get(action)
        if event is not None:
            lines.append(f"{action.value} = {_toml_string(format_binding(event))}")
    return "\n".join(lines) + "\n"


def save_config(config: AppConfig, path: str | Path | None = None) -> Path:
    """Persist config and return written path."""
    cfg_path = Path(path) if path is not None else default_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(serialize_config(config), encoding="utf-8", newline="\n")
    return cfg_path
