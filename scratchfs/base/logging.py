"""
scratchfs.base.logging

Logging for scratchfs. The library logs under the `scratchfs` namespace and
stays silent (NullHandler) until an application calls `setup_logging`.

`setup_logging` installs a Rich console handler (plain stream handler when Rich
is off) and a per-run log file. OS errors from the filesystem helpers are
reported through `describe_os_error` so every message carries errno + reason.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, cast

import yaml
from rich.logging import RichHandler

BASE_LOGGER_NAME = "scratchfs"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ScratchLogger(logging.Logger):
    """Logger that remembers whether Rich is active and where the run log lives."""

    rich_enabled: bool = False
    log_file: Optional[Path] = None


def describe_os_error(exc: OSError) -> str:
    """Render an OSError as `<errno> - <reason>` for diagnostics."""
    return f"{exc.errno} - {exc.strerror or exc}"


# ----------------------------------------------------------------------
# CONFIG-DRIVEN DEFAULTS
# ----------------------------------------------------------------------

def _normalize_level(value: Any) -> str:
    if isinstance(value, str):
        candidate = value.strip().upper()
        if isinstance(logging.getLevelName(candidate), int):
            return candidate
    elif isinstance(value, int) and not isinstance(value, bool):
        label = logging.getLevelName(value)
        if isinstance(label, str) and not label.startswith("Level "):
            return label
    return "INFO"


def _normalize_use_rich(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _load_default_logging_settings() -> Dict[str, Any]:
    try:
        from scratchfs.shared.loader import load_logging_config

        raw = load_logging_config(None)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        get_logger(__name__).warning("Ignoring unreadable logging config: %s", exc)
        raw = {}
    return raw


def _console_handler(use_rich: bool) -> logging.Handler:
    if use_rich:
        return RichHandler(
            rich_tracebacks=True,
            markup=False,
            show_path=False,
            log_time_format="[%X]",
        )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    return handler


# ----------------------------------------------------------------------
# SETUP
# ----------------------------------------------------------------------

def setup_logging(
    level: str | int | None = None,
    use_rich: Optional[bool] = None,
    log_dir: Optional[Path | str] = None,
    file_prefix: Optional[str] = None,
) -> ScratchLogger:
    """
    Configure and return the `scratchfs` logger.

    Args:
        level: Logging level. Defaults to config.yaml (INFO if unset).
        use_rich: Force the Rich console handler on or off. None honors config,
            then uses Rich only when stdout is a terminal.
        log_dir: Directory for the run log. Defaults to config.yaml or ./logs.
        file_prefix: Prefix for the run log filename.
    """
    defaults = _load_default_logging_settings()
    resolved_level = _normalize_level(level if level is not None else defaults.get("level"))
    rich_choice = use_rich if use_rich is not None else _normalize_use_rich(defaults.get("use_rich"))
    if rich_choice is None:
        rich_choice = getattr(sys.stdout, "isatty", lambda: False)()
    resolved_log_dir = Path(log_dir or defaults.get("log_dir") or "./logs").expanduser()
    resolved_prefix = file_prefix or defaults.get("file_prefix") or BASE_LOGGER_NAME

    logger = get_logger()
    logger.setLevel(resolved_level)

    # Rebuild from scratch so repeated calls don't stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_console_handler(bool(rich_choice)))
    logger.rich_enabled = bool(rich_choice)

    resolved_log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    log_file_path = resolved_log_dir / f"{resolved_prefix}_{timestamp}.log"
    file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(file_handler)
    logger.log_file = log_file_path

    logger.propagate = False
    logger._initialized = True  # type: ignore[attr-defined]
    logger.info("📄 Log file created at: %s", log_file_path.resolve())
    return logger


def get_logger(name: str = BASE_LOGGER_NAME) -> ScratchLogger:
    """Return `scratchfs` or one of its children; unconfigured loggers stay silent."""
    logging.setLoggerClass(ScratchLogger)
    base = cast(ScratchLogger, logging.getLogger(BASE_LOGGER_NAME))

    if not getattr(base, "_initialized", False) and not base.handlers:
        base.addHandler(logging.NullHandler())

    if not name or name == BASE_LOGGER_NAME:
        return base
    if name.startswith(BASE_LOGGER_NAME + "."):
        return cast(ScratchLogger, logging.getLogger(name))
    return cast(ScratchLogger, base.getChild(name))
