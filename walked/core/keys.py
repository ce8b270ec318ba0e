"""
Abstract key events and the textual binding syntax used in the config file.

A binding string is a ``+``-joined list of modifiers followed by a key, for
example ``"ctrl+n"``, ``"shift+k"``, ``"alt+h"``, ``"esc"`` or ``"space"``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag


class Modifier(IntFlag):
    NONE = 0
    SHIFT = 1
    CONTROL = 2
    ALT = 4


class KeyKind(str, Enum):
    PRESS = "press"
    RELEASE = "release"


# Named (non-character) key codes.
ENTER = "Enter"
BACKSPACE = "Backspace"
ESC = "Esc"
TAB = "Tab"
UP = "Up"
DOWN = "Down"
LEFT = "Left"
RIGHT = "Right"
HOME = "Home"
END = "End"
DELETE = "Delete"
PAGE_UP = "PageUp"
PAGE_DOWN = "PageDown"

NAMED_KEYS = {
    "enter": ENTER,
    "return": ENTER,
    "backspace": BACKSPACE,
    "esc": ESC,
    "escape": ESC,
    "tab": TAB,
    "up": UP,
    "down": DOWN,
    "left": LEFT,
    "right": RIGHT,
    "home": HOME,
    "end": END,
    "delete": DELETE,
    "del": DELETE,
    "pageup": PAGE_UP,
    "pagedown": PAGE_DOWN,
}
NAMED_KEYS.update({f"f{n}": f"F{n}" for n in range(1, 13)})

CHAR_ALIASES = {
    "space": " ",
    "plus": "+",
}

MODIFIER_NAMES = {
    "shift": Modifier.SHIFT,
    "ctrl": Modifier.CONTROL,
    "control": Modifier.CONTROL,
    "alt": Modifier.ALT,
    "meta": Modifier.ALT,
}


class BindingError(ValueError):
    """Raised when a binding string cannot be parsed."""


@dataclass(frozen=True)
class KeyEvent:
    """One key press/release: a character or named key plus modifiers."""

    code: str
    modifiers: Modifier = Modifier.NONE
    kind: KeyKind = KeyKind.PRESS

    @classmethod
    def char(cls, ch, modifiers=Modifier.NONE, kind=KeyKind.PRESS):
        """Build a character event, adding SHIFT for uppercase letters."""
        if len(ch) != 1:
            raise ValueError(f"expected a single character, got {ch!r}")
        if ch.isalpha() and ch.isupper():
            modifiers |= Modifier.SHIFT
        return cls(ch, Modifier(modifiers), kind)

    @property
    def is_char(self) -> bool:
        return len(self.code) == 1

    @property
    def is_press(self) -> bool:
        return self.kind == KeyKind.PRESS

    def pattern(self):
        """Return the (code, modifiers) pair bindings are matched against."""
        return self.code, Modifier(self.modifiers)


def parse_binding(text: str) -> KeyEvent:
    """Parse a binding string into the press event it describes."""
    if not isinstance(text, str) or not text:
        raise BindingError(f"empty binding: {text!r}")

    # A bare "+" is a key, not a separator.
    if text == "+":
        return KeyEvent.char("+")
    tokens = text.split("+")
    if any(token == "" for token in tokens):
        raise BindingError(f"malformed binding: {text!r}")

    modifiers = Modifier.NONE
    for token in tokens[:-1]:
        flag = MODIFIER_NAMES.get(token.strip().lower())
        if flag is None:
            raise BindingError(f"unknown modifier {token!r} in {text!r}")
        modifiers |= flag

    key = tokens[-1].strip() if tokens[-1].strip() else tokens[-1]
    lowered = key.lower()
    if lowered in NAMED_KEYS and len(key) > 1:
        return KeyEvent(NAMED_KEYS[lowered], modifiers)
    if lowered in CHAR_ALIASES:
        key = CHAR_ALIASES[lowered]
    if len(key) != 1:
        raise BindingError(f"unknown key {key!r} in {text!r}")

    if key.isalpha():
        if modifiers & Modifier.SHIFT:
            key = key.upper()
        elif modifiers & Modifier.CONTROL:
            key = key.lower()
    else:
        # Shifted punctuation is already encoded in the character itself.
        modifiers &= ~Modifier.SHIFT
    return KeyEvent.char(key, modifiers)


def format_binding(event: KeyEvent) -> str:
    """Inverse of parse_binding for press events."""
    parts = []
    modifiers = Modifier(event.modifiers)
    if modifiers & Modifier.CONTROL:
        parts.append("ctrl")
    if modifiers & Modifier.ALT:
        parts.append("alt")
    if modifiers & Modifier.SHIFT:
        parts.append("shift")

    if event.is_char:
        if event.code == " ":
            key = "space"
        elif event.code == "+":
            key = "plus"
        else:
            key = event.code.lower() if event.code.isalpha() else event.code
    else:
        key = event.code.lower()
    parts.append(key)
    return "+".join(parts)
