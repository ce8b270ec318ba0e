"""
User-facing error records and the per-panel error queue.

Filesystem failures never end the session: they are caught where they
happen, mapped to a ``WalkedError`` and queued on the panel that issued the
operation. The queue is cleared by the next key press.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

LOGGER = logging.getLogger(__name__)


class PathKind(str, Enum):
    """What a failing path was expected to be."""

    FILE = "file"
    DIR = "dir"
    AMBIGUOUS = "ambiguous"

    @property
    def label(self):
        return {"file": "File", "dir": "Directory", "ambiguous": "Path"}[self.value]


@dataclass(frozen=True)
class WalkedError:
    """Base class of the queued error variants."""

    def describe(self) -> str:
        raise NotImplementedError

    def __str__(self):
        return self.describe()


@dataclass(frozen=True)
class PathNotFound(WalkedError):
    path: str
    kind: PathKind = PathKind.AMBIGUOUS

    def describe(self):
        return f"{self.kind.label} '{self.path}' not found"


@dataclass(frozen=True)
class PermissionDenied(WalkedError):
    path: str
    kind: PathKind = PathKind.AMBIGUOUS

    def describe(self):
        return f"Permission denied for {self.kind.label.lower()} '{self.path}'"


@dataclass(frozen=True)
class Message(WalkedError):
    text: str

    def describe(self):
        return self.text


@dataclass(frozen=True)
class AllocationExhausted(WalkedError):
    path: str
    attempts: int

    def describe(self):
        return f"No free name for '{self.path}' after {self.attempts} attempts"


class PathAllocationError(RuntimeError):
    """Raised when no collision-free path is found within the attempt cap."""

    def __init__(self, path, attempts):
        super().__init__(f"no free path for {path!r} after {attempts} attempts")
        self.path = path
        self.attempts = attempts

    def to_walked_error(self):
        return AllocationExhausted(self.path, self.attempts)


def map_os_error(exc, path, kind, message, denied_path=None):
    """Translate an OSError into the matching WalkedError variant.

    ``path`` is reported for a missing path, ``denied_path`` (defaulting to
    ``path``) for a permission failure and ``message`` is used for anything
    else.
    """
    if isinstance(exc, FileNotFoundError):
        return PathNotFound(path, kind)
    if isinstance(exc, PermissionError):
        return PermissionDenied(denied_path if denied_path is not None else path, kind)
    detail = getattr(exc, "strerror", None) or str(exc)
    if detail:
        return Message(f"{message}: {detail}")
    return Message(message)


class ErrorQueue:
    """Ordered list of pending errors, dismissed all at once."""

    def __init__(self):
        self._items = []

    def push(self, error: WalkedError) -> None:
        LOGGER.debug("queued error: %s", error)
        self._items.append(error)

    def clear(self) -> None:
        self._items.clear()

    def messages(self):
        return [error.describe() for error in self._items]

    def __len__(self):
        return len(self._items)

    def __bool__(self):
        return bool(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def __getitem__(self, index):
        return self._items[index]

    def append(self, error: WalkedError) -> None:
        """List-style alias so the queue can be passed as an error sink."""
        self.push(error)
