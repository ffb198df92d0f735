"""Tests for logging setup."""

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from courtside.config import Settings
from courtside.trial import process_event
from courtside.utils import setup_logging, setup_logging_from_settings
from courtside.utils.logging import EVENT_LOGGERS


@pytest.fixture
def package_logger():
    """Restore the package logger tree after each test."""
    logger = logging.getLogger("courtside")
    yield logger
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    for name in EVENT_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)


class TestSetupLogging:
    """Handler configuration."""

    def test_rich_console_handler(self, package_logger):
        """Console output goes through Rich by default."""
        logger = setup_logging("warning")

        assert logger is package_logger
        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0], RichHandler)

    def test_plain_console_handler(self, package_logger):
        """rich_output=False falls back to a plain stream handler."""
        logger = setup_logging(rich_output=False)

        assert not isinstance(logger.handlers[0], RichHandler)
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_repeated_setup_does_not_stack_handlers(self, package_logger):
        """Calling setup twice leaves one console handler."""
        setup_logging()
        logger = setup_logging()

        assert len(logger.handlers) == 1


class TestEventDetailLevel:
    """Per-event loggers are levelled separately from the console."""

    def test_follows_console_without_file(self, package_logger):
        """With no session file, per-event detail obeys the console level."""
        setup_logging("WARNING")

        for name in EVENT_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_debug_when_file_configured(self, package_logger, tmp_path: Path):
        """A session file turns on the full per-event trail."""
        setup_logging("ERROR", log_file=tmp_path / "session.log")

        assert package_logger.level == logging.ERROR
        for name in EVENT_LOGGERS:
            assert logging.getLogger(name).level == logging.DEBUG

    def test_explicit_level_wins(self, package_logger, tmp_path: Path):
        """An explicit event level overrides the file default."""
        setup_logging("INFO", log_file=tmp_path / "session.log", event_level="INFO")

        assert logging.getLogger("courtside.detection.contradictions").level == logging.INFO

    def test_settings_carry_event_level(self, package_logger):
        """setup_logging_from_settings passes the event level through."""
        setup_logging_from_settings(Settings(log_level="INFO", event_log_level="ERROR"))

        assert logging.getLogger("courtside.trial.session").level == logging.ERROR

    def test_file_receives_engine_debug_output(
        self, package_logger, tmp_path: Path, fresh_state, make_event, cash_finding
    ):
        """Detector detail reaches the file while the console stays at ERROR."""
        log_file = tmp_path / "logs" / "session.log"
        setup_logging_from_settings(Settings(log_level="ERROR", log_file=log_file))

        process_event(fresh_state, make_event("I never received that cash payment"), [cash_finding])

        contents = log_file.read_text(encoding="utf-8")
        assert "keyword_negation" in contents
        assert "courtside.detection.contradictions" in contents
        assert package_logger.handlers[0].level == logging.ERROR
