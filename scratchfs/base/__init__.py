"""Low-level filesystem utilities for scratchfs."""

from .logging import get_logger, setup_logging, ScratchLogger
from .fs import remove_directory, make_directory, get_temp_directory
from .file_io import (
    set_contents,
    get_contents,
    read_text,
    write_text,
    read_json,
    write_json,
    read_yaml,
    write_yaml,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ScratchLogger",
    "remove_directory",
    "make_directory",
    "get_temp_directory",
    "set_contents",
    "get_contents",
    "read_text",
    "write_text",
    "read_json",
    "write_json",
    "read_yaml",
    "write_yaml",
]
