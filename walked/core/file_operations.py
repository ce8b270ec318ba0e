"""
Filesystem operations used by panels.

Every operation takes an ``errors`` sink (anything with ``append``) and
converts failures into queued ``WalkedError`` records instead of raising,
so a multi-entry operation keeps going after an individual failure.
"""
import logging
import os
import shutil

from ..constants import ALLOCATION_SUFFIX, MAX_ALLOCATION_ATTEMPTS
from .errors import Message, PathAllocationError, PathKind, PathNotFound, map_os_error

LOGGER = logging.getLogger(__name__)


def allocate_path(path, max_attempts=MAX_ALLOCATION_ATTEMPTS):
    """Return ``path`` or the first ``path + '.1' * n`` that does not exist."""
    candidate = os.fspath(path)
    for _ in range(max_attempts):
        if not os.path.lexists(candidate):
            return candidate
        candidate += ALLOCATION_SUFFIX
    raise PathAllocationError(os.fspath(path), max_attempts)


def list_directory(path):
    """Return child paths of ``path`` in enumeration order. Raises OSError."""
    with os.scandir(path) as it:
        return [entry.path for entry in it]


def entry_type(path):
    """Classify a path as 'file', 'dir', 'symlink' or 'other'."""
    if os.path.isfile(path):
        return "file"
    if os.path.isdir(path):
        return "dir"
    if os.path.islink(path):
        return "symlink"
    return "other"


def is_same_or_inside(path, ancestor):
    """True when ``path`` resolves to ``ancestor`` or somewhere below it."""
    p1 = os.path.normcase(os.path.realpath(ancestor))
    p2 = os.path.normcase(os.path.realpath(path))
    return p1 == p2 or p2.startswith(p1.rstrip(os.sep) + os.sep)


def create_entry(path, errors, *, is_directory):
    """Create an empty file or directory at ``path``."""
    kind = PathKind.DIR if is_directory else PathKind.FILE
    try:
        if is_directory:
            os.mkdir(path)
        else:
            with open(path, "x", encoding="utf-8"):
                pass
    except OSError as exc:
        label = "directory" if is_directory else "file"
        errors.append(map_os_error(exc, path, kind, f"Couldn't create {label} '{path}'"))
        return False
    LOGGER.debug("created %s %s", kind.value, path)
    return True


def copy_file(source, destination, errors):
    """Copy one file's bytes and metadata."""
    try:
        shutil.copy2(source, destination)
    except OSError as exc:
        errors.append(
            map_os_error(
                exc,
                source,
                PathKind.FILE,
                f"Couldn't copy file from '{source}' to '{destination}'",
                denied_path=destination,
            )
        )
        return False
    return True


def _make_directory(path, errors):
    try:
        os.mkdir(path)
    except OSError as exc:
        errors.append(map_os_error(exc, path, PathKind.DIR, f"Couldn't create directory '{path}'"))
        return False
    return True


def copy_tree_contents(source, destination, errors):
    """Copy every descendant of ``source`` into the existing ``destination``.

    Files (and symlinks to files) are copied, real directories are created
    and walked, everything else is skipped. Failures are appended to
    ``errors`` and the walk carries on with the remaining entries.
    """
    try:
        with os.scandir(source) as it:
            children = list(it)
    except OSError as exc:
        errors.append(map_os_error(exc, source, PathKind.DIR, f"Couldn't read directory '{source}'"))
        return

    for child in children:
        target = os.path.join(destination, child.name)
        try:
            is_file = child.is_file()
            is_dir = child.is_dir(follow_symlinks=False)
        except OSError as exc:
            errors.append(map_os_error(exc, child.path, PathKind.AMBIGUOUS, f"Couldn't stat '{child.path}'"))
            continue
        if is_file:
            copy_file(child.path, target, errors)
        elif is_dir:
            if _make_directory(target, errors):
                copy_tree_contents(child.path, target, errors)
        else:
            LOGGER.debug("skipping %s during tree copy", child.path)


def copy_entry(source, destination, errors):
    """Copy a single top-level entry (file or whole directory).

    A symlink to a directory is followed here, so its contents are copied
    into a real directory. Links further down the tree are not.
    Returns True when the filesystem may have changed.
    """
    if not os.path.lexists(source):
        errors.append(PathNotFound(source, PathKind.AMBIGUOUS))
        return False
    if os.path.isfile(source):
        copy_file(source, destination, errors)
        return True
    if os.path.isdir(source):
        if is_same_or_inside(os.path.dirname(destination), source):
            errors.append(Message(f"Can't copy directory '{source}' into itself"))
            return False
        if _make_directory(destination, errors):
            copy_tree_contents(source, destination, errors)
        return True
    errors.append(Message(f"Can't copy '{source}': not a file or directory"))
    return False


def remove_entry(path, errors):
    """Delete a file, an empty directory, or a directory tree.

    Empty directories are removed with ``os.rmdir``; only non-empty ones go
    through ``shutil.rmtree``. Anything that is not a real directory
    (files, symlinks, sockets) is unlinked.
    """
    if os.path.isdir(path) and not os.path.islink(path):
        try:
            with os.scandir(path) as it:
                has_children = any(True for _ in it)
            if has_children:
                shutil.rmtree(path)
            else:
                os.rmdir(path)
        except OSError as exc:
            errors.append(map_os_error(exc, path, PathKind.DIR, f"Couldn't remove directory '{path}'"))
        return True

    try:
        os.remove(path)
    except OSError as exc:
        errors.append(map_os_error(exc, path, PathKind.FILE, f"Couldn't remove file '{path}'"))
    return True


def rename_entry(source, destination, errors):
    """Move ``source`` to ``destination``; True on success."""
    try:
        os.rename(source, destination)
    except OSError as exc:
        errors.append(
            map_os_error(
                exc,
                source,
                PathKind.AMBIGUOUS,
                f"Couldn't rename '{source}' to '{destination}'",
            )
        )
        return False
    LOGGER.debug("renamed %s -> %s", source, destination)
    return True
