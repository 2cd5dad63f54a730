"""Tests for server logging configuration."""

import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

import pytest

from src.services.logging import QUIET_LOGGERS, get_log_level, setup_server_logging


class TestGetLogLevel:
    @pytest.mark.parametrize(
        "name,expected",
        [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), ("bogus", logging.INFO)],
    )
    def test_named_levels(self, name, expected) -> None:
        assert get_log_level(name) == expected

    def test_falls_back_to_env(self) -> None:
        with patch.dict("os.environ", {"LOG_LEVEL": "ERROR"}, clear=False):
            assert get_log_level() == logging.ERROR


class TestServerLogging:
    """Test server logging configuration."""

    def setup_method(self):
        """Save original handlers before each test."""
        self.root_logger = logging.getLogger()
        self.original_handlers = self.root_logger.handlers.copy()
        self.original_level = self.root_logger.level

    def teardown_method(self):
        """Restore original handlers after each test."""
        for handler in self.root_logger.handlers[:]:
            handler.close()
            self.root_logger.removeHandler(handler)
        for handler in self.original_handlers:
            self.root_logger.addHandler(handler)
        self.root_logger.setLevel(self.original_level)
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.NOTSET)

    def test_creates_log_directory_and_two_handlers(self, tmp_path) -> None:
        log_file = tmp_path / "nested" / "server.log"

        setup_server_logging(str(log_file), "INFO")

        assert log_file.parent.exists()
        assert len(self.root_logger.handlers) == 2

    def test_explicit_level_applies_to_all_handlers(self, tmp_path) -> None:
        with patch.dict("os.environ", {"LOG_LEVEL": "ERROR"}, clear=False):
            setup_server_logging(str(tmp_path / "server.log"), "DEBUG")

        assert self.root_logger.level == logging.DEBUG
        for handler in self.root_logger.handlers:
            assert handler.level == logging.DEBUG

    def test_writes_formatted_lines_to_file(self, tmp_path) -> None:
        log_file = tmp_path / "server.log"
        setup_server_logging(str(log_file), "INFO")

        logging.getLogger("src.services.payment_service").warning("Deleted payment 7")

        contents = log_file.read_text()
        assert "src.services.payment_service - WARNING - Deleted payment 7" in contents
        assert contents.startswith("[20")

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path) -> None:
        dummy_handler = logging.StreamHandler()
        self.root_logger.addHandler(dummy_handler)

        setup_server_logging(str(tmp_path / "server.log"))
        setup_server_logging(str(tmp_path / "server.log"))

        assert len(self.root_logger.handlers) == 2
        assert dummy_handler not in self.root_logger.handlers

    def test_file_handler_rotates(self, tmp_path) -> None:
        setup_server_logging(str(tmp_path / "server.log"), "INFO", max_bytes=1024, backup_count=2)

        file_handlers = [h for h in self.root_logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 1024
        assert file_handlers[0].backupCount == 2

    def test_library_loggers_quiet_unless_debug(self, tmp_path) -> None:
        setup_server_logging(str(tmp_path / "server.log"), "INFO")
        assert logging.getLogger("stripe").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

        setup_server_logging(str(tmp_path / "server.log"), "DEBUG")
        assert logging.getLogger("stripe").level == logging.NOTSET
