"""
scratchfs

Small filesystem utility layer:
  - Directory removal (post-order, symlinks never followed)
  - Recursive directory creation
  - Temp directory resolution ($TEST_TMPDIR, $TMPDIR, /tmp)
  - Atomic content writes (temp file + rename) and whole-file reads
"""

from scratchfs.base.logging import setup_logging, get_logger, ScratchLogger
from scratchfs.base.fs import remove_directory, make_directory, get_temp_directory
from scratchfs.base.file_io import (
    set_contents,
    get_contents,
    read_text,
    write_text,
    read_json,
    write_json,
    read_yaml,
    write_yaml,
)
from scratchfs.shared.loader import FilesSettings, load_files_config, load_logging_config

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "ScratchLogger",

    # Directories
    "remove_directory",
    "make_directory",
    "get_temp_directory",

    # Contents
    "set_contents",
    "get_contents",
    "read_text",
    "write_text",
    "read_json",
    "write_json",
    "read_yaml",
    "write_yaml",

    # Configuration
    "FilesSettings",
    "load_files_config",
    "load_logging_config",
]
