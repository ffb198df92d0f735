"""Utility functions for Courtside."""

from .logging import get_logger, setup_logging, setup_logging_from_settings
from .text import last_name, truncate, words

__all__ = [
    "get_logger",
    "setup_logging",
    "setup_logging_from_settings",
    "last_name",
    "truncate",
    "words",
]
