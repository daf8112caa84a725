"""
scratchfs.base.fs

Directory helpers: post-order removal, recursive creation and temp-directory lookup.

Removal is best effort and only logs failures. Creation reports success as a bool.
Neither raises for filesystem errors.
"""

from __future__ import annotations

import os
import stat
from typing import Callable, Optional, Union

from .logging import describe_os_error, get_logger

log = get_logger(__name__)

PathLike = Union[str, "os.PathLike[str]"]
EnvLookup = Callable[[str], Optional[str]]

TEST_TMPDIR_VAR = "TEST_TMPDIR"
TMPDIR_VAR = "TMPDIR"
DEFAULT_TEMP_DIRECTORY = "/tmp"


# ----------------------------------------------------------------------
# REMOVAL
# ----------------------------------------------------------------------

def _delete_entry(path: str, is_dir: bool) -> None:
    try:
        if is_dir:
            os.rmdir(path)
        else:
            os.unlink(path)
        log.debug(f"🗑️ Deleted: {path}")
    except OSError as exc:
        log.warning(f"Failed to delete {path}: {describe_os_error(exc)}")


def _remove_tree(path: str) -> None:
    try:
        with os.scandir(path) as entries:
            children = [(entry.path, entry.is_dir(follow_symlinks=False)) for entry in entries]
    except OSError as exc:
        log.warning(f"Failed to list {path}: {describe_os_error(exc)}")
        children = []

    for child, is_dir in children:
        if is_dir:
            _remove_tree(child)
        else:
            _delete_entry(child, is_dir=False)

    _delete_entry(path, is_dir=True)


def remove_directory(path: PathLike) -> None:
    """
    Delete `path` and everything beneath it, children before parents.

    Symbolic links are removed as leaves and never traversed, including when
    `path` itself is a link. Failures on individual entries are logged and the
    walk carries on with the remaining entries.
    """
    root = os.fspath(path)
    try:
        st = os.lstat(root)
    except FileNotFoundError:
        log.debug(f"Directory not found (skip delete): {root}")
        return
    except OSError as exc:
        log.warning(f"Failed to stat {root}: {describe_os_error(exc)}")
        return

    if stat.S_ISDIR(st.st_mode):
        _remove_tree(root)
    else:
        _delete_entry(root, is_dir=False)


# ----------------------------------------------------------------------
# CREATION
# ----------------------------------------------------------------------

def _is_dir(path: str) -> Optional[bool]:
    """Return whether `path` is a directory, or None when nothing is there."""
    try:
        return stat.S_ISDIR(os.stat(path).st_mode)
    except OSError:
        return None


def _make_directory(path: str, mode: int) -> bool:
    existing = _is_dir(path)
    if existing is not None:
        return existing

    parent = os.path.dirname(path)
    if not parent or parent == path or _make_directory(parent, mode):
        try:
            os.mkdir(path, mode)
            log.debug(f"📁 Created directory: {path}")
        except FileExistsError:
            # Another process got there first; the final check decides.
            pass
        except OSError as exc:
            log.debug(f"mkdir failed for {path}: {describe_os_error(exc)}")

    return bool(_is_dir(path))


def make_directory(path: PathLike, mode: Optional[int] = None) -> bool:
    """
    Create `path` and any missing ancestors.

    Args:
        path: Directory to create. Trailing separators are ignored.
        mode: Permission bits for new directories (before umask). Defaults to
            the configured `dir_mode` (0o777).

    Returns:
        True if `path` is a directory once the call finishes, False otherwise
        (for example when one of its components is a regular file).
    """
    target = os.fspath(path)
    stripped = target.rstrip(os.sep) or target
    if mode is None:
        from scratchfs.shared.loader import current_files_settings

        mode = current_files_settings().dir_mode
    return _make_directory(stripped, mode)


# ----------------------------------------------------------------------
# TEMP DIRECTORY
# ----------------------------------------------------------------------

def get_temp_directory(getenv: Optional[EnvLookup] = None) -> str:
    """
    Resolve the scratch directory: $TEST_TMPDIR, then $TMPDIR, then /tmp.

    `getenv` is the environment lookup to consult (any callable mapping a
    variable name to its value or None, e.g. `dict.get`). It defaults to
    `os.environ.get`.
    """
    lookup = getenv if getenv is not None else os.environ.get
    for name in (TEST_TMPDIR_VAR, TMPDIR_VAR):
        value = lookup(name)
        if value is not None:
            return value
    return DEFAULT_TEMP_DIRECTORY
