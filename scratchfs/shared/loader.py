"""
Shared configuration loading and validation helpers.

Provides:
 - `load_config`: basic YAML loader
 - `load_logging_config`: validated `logging` section
 - `load_files_config`: cached `FilesSettings` from the `files` section
 - `current_files_settings`: settings for the core operations, never raising
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from scratchfs.base.file_io import read_yaml
from scratchfs.base.logging import get_logger

log = get_logger(__name__)

ConfigDict = Dict[str, Any]

DEFAULT_CONFIG_FILENAME = "config.yaml"
LOGGING_SECTION_KEY = "logging"
FILES_SECTION_KEY = "files"
CONFIGS_DIR = Path(__file__).resolve().parents[2] / "configs"

LOGGING_ALLOWED_KEYS = {"level", "use_rich", "log_dir", "file_prefix"}
FILES_ALLOWED_KEYS = {"temp_prefix", "dir_mode"}

DEFAULT_TEMP_PREFIX = "scratchfs_temp_file_"
DEFAULT_DIR_MODE = 0o777
MAX_DIR_MODE = 0o7777


@dataclass(frozen=True)
class FilesSettings:
    temp_prefix: str = DEFAULT_TEMP_PREFIX
    dir_mode: int = DEFAULT_DIR_MODE


def load_config(path: str | Path | None) -> Mapping[str, Any] | Dict[str, Any]:
    if not path:
        return {}

    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {cfg_path}")

    data = read_yaml(cfg_path)
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration root must be a mapping in {cfg_path}")

    return data


def _resolve_config_path(config_path: str | Path | None) -> Optional[Path]:
    if config_path:
        return Path(config_path).expanduser()

    candidate = CONFIGS_DIR / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.exists() else None


def _extract_section(
    root: Mapping[str, Any],
    key: str,
    allowed: set[str],
    config_path: Optional[Path],
) -> ConfigDict:
    section = root.get(key, {})
    if not section:
        return {}
    if not isinstance(section, Mapping):
        raise ValueError(f"'{key}' section must be a mapping in {config_path}")

    invalid = [name for name in section if name not in allowed]
    if invalid:
        invalid_keys = ", ".join(sorted(invalid))
        raise ValueError(f"'{key}' contains unsupported keys in {config_path}: {invalid_keys}")
    return dict(section)


def load_logging_config(config_path: str | Path | None = None) -> ConfigDict:
    resolved_path = _resolve_config_path(config_path)
    root = load_config(resolved_path)
    return _extract_section(root, LOGGING_SECTION_KEY, LOGGING_ALLOWED_KEYS, resolved_path)


def _coerce_temp_prefix(value: Any, config_path: Optional[Path]) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Configuration '{config_path}' field 'temp_prefix' must be a non-empty string.")
    if "/" in value:
        raise ValueError(
            f"Configuration '{config_path}' field 'temp_prefix' must not contain a path separator."
        )
    return value


def _coerce_dir_mode(value: Any, config_path: Optional[Path]) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Configuration '{config_path}' field 'dir_mode' must be an octal mode.")
    if isinstance(value, int):
        mode = value
    else:
        text = str(value).strip().lower()
        if text.startswith("0o"):
            text = text[2:]
        try:
            mode = int(text, 8)
        except ValueError as exc:
            raise ValueError(
                f"Configuration '{config_path}' field 'dir_mode' must be an octal mode."
            ) from exc
    if not 0 <= mode <= MAX_DIR_MODE:
        raise ValueError(f"Configuration '{config_path}' field 'dir_mode' is out of range: {oct(mode)}")
    return mode


@lru_cache(maxsize=None)
def load_files_config(config_path: str | Path | None = None) -> FilesSettings:
    """Load file-operation defaults from the `files` section (built-in defaults if absent)."""
    resolved_path = _resolve_config_path(config_path)
    root = load_config(resolved_path)
    section = _extract_section(root, FILES_SECTION_KEY, FILES_ALLOWED_KEYS, resolved_path)

    overrides: Dict[str, Any] = {}
    if "temp_prefix" in section:
        overrides["temp_prefix"] = _coerce_temp_prefix(section["temp_prefix"], resolved_path)
    if "dir_mode" in section:
        overrides["dir_mode"] = _coerce_dir_mode(section["dir_mode"], resolved_path)
    return replace(FilesSettings(), **overrides)


def current_files_settings() -> FilesSettings:
    """Settings used by the core file operations; a broken config falls back to defaults."""
    try:
        return load_files_config()
    except (OSError, ValueError, yaml.YAMLError) as exc:
        log.warning(f"Ignoring invalid files config, using defaults: {exc}")
        return FilesSettings()
