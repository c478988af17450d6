"""Logging configuration for devmux.

Uses Python's standard logging module with support for:
- File logging via settings or the DEVMUX_LOG environment variable
- Verbosity levels: error(0), warning(1), info(2), verbose(3), trace(4)
- Stderr output only when stderr is a real terminal

Stdout is never touched: callers of ``devmux pick`` and
``devmux-remote --list-projects`` capture it as data.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devmux.config.schema import LoggingConfig

# Custom log levels
TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

logger = logging.getLogger("devmux")

_initialized = False

_LEVEL_MAP = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "VERBOSE": VERBOSE,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# -v count to level; the default (0) keeps the interactive screen quiet
_VERBOSITY_MAP = {
    0: logging.WARNING,
    1: logging.INFO,
    2: VERBOSE,
    3: logging.DEBUG,
    4: TRACE,
}


class _LowercaseLevelFormatter(logging.Formatter):
    """Formatter that emits lowercase level names."""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        return super().format(record)


def level_for(config: LoggingConfig | None, verbosity: int = 0) -> int:
    """Resolve the effective log level.

    A non-zero ``-v`` count wins over the configured level name.
    """
    if verbosity > 0:
        return _VERBOSITY_MAP.get(verbosity, TRACE)
    if config and config.level:
        return _LEVEL_MAP.get(config.level.upper(), logging.WARNING)
    return logging.WARNING


def setup_logging(config: LoggingConfig | None = None, verbosity: int = 0) -> None:
    """Initialize logging. Subsequent calls are no-ops.

    Args:
        config: Optional LoggingConfig with level and file settings.
        verbosity: Count of -v flags given on the command line.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    log_level = level_for(config, verbosity)
    logger.setLevel(log_level)

    formatter = _LowercaseLevelFormatter(
        "%(asctime)s %(levelname)s: %(message)s", datefmt="%H:%M:%S"
    )

    log_path = config.file if config and config.file else os.environ.get("DEVMUX_LOG")

    if log_path:
        log_path = os.path.expanduser(log_path)
        try:
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            if sys.stderr.isatty():
                print(f"[devmux] Failed to open log file: {e}", file=sys.stderr)
                _add_stderr_handler(formatter, log_level)
    elif sys.stderr.isatty():
        _add_stderr_handler(formatter, log_level)


def reset_logging() -> None:
    """Drop handlers so setup_logging() can run again (tests)."""
    global _initialized
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    _initialized = False


def _add_stderr_handler(formatter: logging.Formatter, level: int = logging.DEBUG) -> None:
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Optional name for a child logger (e.g., "picker", "remote").
              If None, returns the root devmux logger.
    """
    if name:
        return logger.getChild(name)
    return logger
