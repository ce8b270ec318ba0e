"""
Shared path clipboard for walked panels.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import pyperclip

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClipboardSnapshot:
    """Paths captured by one copy action and the panel they came from."""

    paths: tuple = ()
    source_panel: int | None = None

    def __bool__(self):
        return bool(self.paths)

    def __len__(self):
        return len(self.paths)

    def __iter__(self):
        return iter(self.paths)


EMPTY_SNAPSHOT = ClipboardSnapshot()


def _system_copy(text: str) -> bool:
    """Mirror text to the system clipboard; False when no backend works."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException:
        LOGGER.debug("system clipboard unavailable", exc_info=True)
        return False
    return True


class Clipboard:
    """Holds the current snapshot; each copy replaces it wholesale."""

    def __init__(self, sync_system: bool = False):
        self.sync_system = sync_system
        self.snapshot = EMPTY_SNAPSHOT

    def set(self, paths, source_panel=None) -> ClipboardSnapshot:
        self.snapshot = ClipboardSnapshot(tuple(paths), source_panel)
        LOGGER.debug("clipboard: %d path(s) from panel %s", len(self.snapshot), source_panel)
        if self.sync_system and self.snapshot:
            _system_copy("\n".join(self.snapshot.paths))
        return self.snapshot

    @property
    def paths(self):
        return self.snapshot.paths

    def __bool__(self):
        return bool(self.snapshot)
