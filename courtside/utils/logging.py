"""Logging configuration for Courtside.

The engine logs two streams on the ``courtside`` logger tree:

- per-event detail at DEBUG (contradictions detected, objections matched,
  strategy branch taken, skipped comparisons), one or more records per
  processed event
- batch summaries at INFO

During a live session the console usually wants summaries only, while a
session log file wants the full per-event trail for later review. The
per-event loggers therefore get their own level, independent of the console.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


# Console output goes to stderr; stdout belongs to the host
console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(message)s"

ROOT_LOGGER = "courtside"

# Modules that log once or more per processed event
EVENT_LOGGERS = (
    "courtside.detection.contradictions",
    "courtside.detection.objections",
    "courtside.trial.state",
    "courtside.trial.strategy",
    "courtside.trial.session",
)


def _to_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    rich_output: bool = True,
    event_level: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the ``courtside`` logger tree.

    Args:
        level: Console log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional session log file; it receives every record the
            loggers emit
        rich_output: Whether to use Rich for console output
        event_level: Level for the per-event loggers. Defaults to DEBUG
            when a log file is given, otherwise to ``level``

    Returns:
        Configured package logger
    """
    console_level = _to_level(level)
    if event_level:
        detail_level = _to_level(event_level)
    else:
        detail_level = logging.DEBUG if log_file else console_level

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(console_level)
    logger.handlers.clear()

    if rich_output:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler.setLevel(console_level)
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    # Child records reach the package handlers whatever the parent level is
    for name in EVENT_LOGGERS:
        logging.getLogger(name).setLevel(detail_level)

    return logger


def setup_logging_from_settings(settings) -> logging.Logger:
    """Configure logging from a Settings instance."""
    return setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        event_level=settings.event_log_level,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)
