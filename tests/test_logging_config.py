"""
Tests for logging configuration.
"""

import logging
from datetime import date

from polarissync.domain.config import LoggingSettings
from polarissync.infrastructure.logging_config import ColoredFormatter, log_file_path, setup_logging


class TestLogFilePath:
    """Test cases for the daily log file name."""

    def test_disabled(self):
        assert log_file_path(LoggingSettings(enabled=False)) is None

    def test_name_has_no_zero_padding(self, tmp_path):
        settings = LoggingSettings(enabled=True, location=str(tmp_path))
        path = log_file_path(settings, today=date(2024, 3, 7))
        assert path == tmp_path / "polarissync202437.log"


class TestSetupLogging:
    """Test cases for setup_logging()."""

    def teardown_method(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    def test_file_is_appended(self, tmp_path):
        log_file = tmp_path / "logs" / "polarissync2024101.log"

        setup_logging(logging.INFO, log_file, use_colors=False)
        logging.getLogger("polarissync.test").info("first run")
        setup_logging(logging.INFO, log_file, use_colors=False)
        logging.getLogger("polarissync.test").info("second run")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "first run" in text
        assert "second run" in text
        assert "INFO" in text

    def test_debug_always_reaches_file(self, tmp_path):
        log_file = tmp_path / "debug.log"

        setup_logging(logging.WARNING, log_file, use_colors=False)
        logging.getLogger("polarissync.test").debug("details")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "details" in log_file.read_text(encoding="utf-8")


class TestColoredFormatter:
    """Test cases for ColoredFormatter."""

    def test_restores_record_for_other_handlers(self):
        formatter = ColoredFormatter("%(levelname)s %(name)s %(message)s", use_colors=True)
        record = logging.LogRecord("polarissync", logging.ERROR, __file__, 1, "boom", None, None)

        colored = formatter.format(record)

        assert "\033[" in colored
        assert record.levelname == "ERROR"
        assert record.name == "polarissync"
