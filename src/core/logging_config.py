"""Structured logging configuration.

This module hands out structlog loggers with a stable JSON event format.
Until ``configure_logging`` runs, events render to stdout only, so every
component can be exercised without a live log destination.
"""

from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path
import sys
from typing import Any, Callable

import structlog

from core.constants import LOGGER_NAME
from core.errors import TickMergeSetupError
from core.naming import build_log_file_name

_PROCESSORS: list[Any] = [
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.add_log_level,
    structlog.processors.JSONRenderer(),
]


def get_logger(name: str) -> Any:
    """Return a lazy structured logger for a module.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger bound to the shared run sink and tagged with ``component``.
    """
    return structlog.get_logger(LOGGER_NAME, component=name)


def configure_logging(
    log_dir: Path,
    clock: Callable[[], datetime] = datetime.now,
) -> Path:
    """Route structured events to stdout and a timestamped run log file.

    Args:
        log_dir: Directory receiving ``merge_process_<ts>.log``. Created if missing.
        clock: Source of the run timestamp.

    Returns:
        Path of the opened log file.

    Raises:
        TickMergeSetupError: If the directory or file cannot be created.
    """
    log_path = log_dir / build_log_file_name(clock())
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as error:
        raise TickMergeSetupError(
            f"Failed to initialize log file {log_path}: {error}. "
            "Check that the log directory is writable."
        ) from error
    sink = _reset_sink()
    formatter = logging.Formatter("%(message)s")
    console_handler = logging.StreamHandler(sys.stdout)
    for handler in (console_handler, file_handler):
        handler.setFormatter(formatter)
        sink.addHandler(handler)
    structlog.configure(
        processors=list(_PROCESSORS),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    return log_path


def close_logging() -> None:
    """Release run log handlers and fall back to stdout rendering."""
    _reset_sink()
    structlog.configure(
        processors=list(_PROCESSORS),
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        cache_logger_on_first_use=False,
    )


def _reset_sink() -> logging.Logger:
    """Close and detach every handler on the shared stdlib logger."""
    sink = logging.getLogger(LOGGER_NAME)
    for handler in list(sink.handlers):
        sink.removeHandler(handler)
        handler.close()
    sink.setLevel(logging.INFO)
    sink.propagate = False
    return sink


close_logging()
