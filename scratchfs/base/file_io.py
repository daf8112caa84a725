"""Atomic file content helpers: write-to-temp-then-rename, whole-file reads."""

from __future__ import annotations

import json
import os
import tempfile
from typing import Any, Mapping, Optional, Union

import yaml

from .fs import PathLike, get_temp_directory
from .logging import describe_os_error, get_logger

log = get_logger(__name__)

DEFAULT_ENCODING = "utf-8"

Buffer = Union[bytes, bytearray, memoryview]


def _discard(temp_path: str) -> None:
    try:
        os.remove(temp_path)
    except OSError as exc:
        log.warning(f"Failed to remove temp file {temp_path}: {describe_os_error(exc)}")


def set_contents(
    path: PathLike,
    contents: Buffer,
    scratch_directory: Optional[PathLike] = None,
) -> bool:
    """
    Atomically replace the file at `path` with `contents`.

    The bytes are written to a unique temp file inside `scratch_directory`
    (or `get_temp_directory()` when it is None or empty) which is then renamed
    onto `path`. Readers see either the old file or the complete new one.
    The temp file is fsynced before the rename. The scratch directory must
    be on the same filesystem as `path` for the rename to be atomic.

    Returns:
        True on success. On failure nothing is renamed, the temp file is
        removed, and False is returned.
    """
    target = os.fspath(path)
    view = memoryview(contents)
    payload = view.cast("B") if view.c_contiguous else memoryview(view.tobytes())
    scratch = os.fspath(scratch_directory) if scratch_directory is not None else ""
    if not scratch:
        scratch = get_temp_directory()

    from scratchfs.shared.loader import current_files_settings

    prefix = current_files_settings().temp_prefix
    try:
        fd, temp_path = tempfile.mkstemp(prefix=prefix, dir=scratch)
    except OSError as exc:
        log.error(f"Failed to make temp file in {scratch}: {describe_os_error(exc)}")
        return False

    try:
        handle = os.fdopen(fd, "wb")
    except OSError as exc:
        os.close(fd)
        log.error(f"Failed to open temp file {temp_path}: {describe_os_error(exc)}")
        _discard(temp_path)
        return False

    try:
        with handle:
            written = handle.write(payload)
            if written == len(payload):
                handle.flush()
                os.fsync(handle.fileno())
    except OSError as exc:
        log.error(f"Failed to write to temp file {temp_path}: {describe_os_error(exc)}")
        _discard(temp_path)
        return False
    if written != len(payload):
        log.error(f"Short write to temp file {temp_path}: {written} of {len(payload)} bytes")
        _discard(temp_path)
        return False

    try:
        os.replace(temp_path, target)
    except OSError as exc:
        log.error(f"Failed to rename temp file to: {target} {describe_os_error(exc)}")
        _discard(temp_path)
        return False

    log.debug(f"💾 Wrote {len(payload)} bytes to {target}")
    return True


def get_contents(path: PathLike) -> Optional[bytes]:
    """Return the full contents of `path`, or None if it cannot be opened."""
    try:
        with open(os.fspath(path), "rb") as handle:
            return handle.read()
    except OSError as exc:
        log.debug(f"Cannot read {os.fspath(path)}: {describe_os_error(exc)}")
        return None


# ----------------------------------------------------------------------
# STRUCTURED HELPERS
# ----------------------------------------------------------------------

def read_text(path: PathLike, encoding: str = DEFAULT_ENCODING) -> Optional[str]:
    data = get_contents(path)
    return None if data is None else data.decode(encoding)


def write_text(
    path: PathLike,
    content: str,
    encoding: str = DEFAULT_ENCODING,
    scratch_directory: Optional[PathLike] = None,
) -> bool:
    return set_contents(path, content.encode(encoding), scratch_directory)


def _read_required(path: PathLike) -> str:
    text = read_text(path)
    if text is None:
        raise FileNotFoundError(f"File not found or unreadable: {os.fspath(path)}")
    return text


def read_json(path: PathLike) -> Any:
    return json.loads(_read_required(path))


def write_json(
    path: PathLike,
    payload: Any,
    *,
    indent: int = 2,
    sort_keys: bool = False,
    scratch_directory: Optional[PathLike] = None,
) -> bool:
    text = json.dumps(payload, indent=indent, sort_keys=sort_keys)
    return write_text(path, text, scratch_directory=scratch_directory)


def read_yaml(path: PathLike) -> Mapping[str, Any] | list[Any]:
    data = yaml.safe_load(_read_required(path))
    return data if data is not None else {}


def write_yaml(
    path: PathLike,
    payload: Mapping[str, Any] | list[Any],
    scratch_directory: Optional[PathLike] = None,
) -> bool:
    text = yaml.safe_dump(payload, sort_keys=False)
    return write_text(path, text, scratch_directory=scratch_directory)
