"""Unit tests for package-level functionality."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import patch

import colorlog
import pytest

import connmate
from connmate import get_logger, setup_logging
from connmate.config import Settings
from connmate.log import PACKAGE_LOGGER_NAME
from connmate.types import Environment, IsolationLevel


class TestLogging:
    """Test logging functionality."""

    def test_setup_logging_defaults(self) -> None:
        """Test setup_logging with default parameters."""
        with patch("connmate.log.settings", Settings()):
            setup_logging()
        root_logger = logging.getLogger()
        assert root_logger.level == logging.INFO

    def test_setup_logging_level_from_settings(self) -> None:
        """Test the configured log level is applied when none is given."""
        with patch("connmate.log.settings", Settings(log_level="WARNING")):
            setup_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_production_enables_file_logging(self, tmp_path: Path) -> None:
        """Test production settings turn on the rotating log file."""
        production = Settings(environment=Environment.PRODUCTION)
        with patch("connmate.log.settings", production):
            setup_logging(log_dir=tmp_path)

        handlers = logging.getLogger().handlers
        assert any(isinstance(h, RotatingFileHandler) for h in handlers)
        assert (tmp_path / "connmate.log").exists()

    def test_setup_logging_custom_level(self) -> None:
        """Test setup_logging with custom level."""
        setup_logging(level=logging.DEBUG)
        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG

    def test_setup_logging_level_name(self) -> None:
        """Test setup_logging accepts level names."""
        setup_logging(level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_setup_logging_unknown_level(self) -> None:
        """Test an unknown level name is rejected."""
        with pytest.raises(ValueError):
            setup_logging(level="LOUD")

    def test_colored_console_handler(self) -> None:
        """Test the console handler uses colorlog when colors are on."""
        setup_logging(use_colors=True)
        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, colorlog.ColoredFormatter)

        setup_logging(use_colors=False)
        handler = logging.getLogger().handlers[0]
        assert not isinstance(handler.formatter, colorlog.ColoredFormatter)

    def test_file_logging(self, tmp_path: Path) -> None:
        """Test file logging writes into the given directory."""
        setup_logging(enable_file_logging=True, log_dir=tmp_path, is_test_env=True)
        get_logger("connmate.test").info("to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "to file" in (tmp_path / "test.log").read_text()

    def test_get_logger(self) -> None:
        """Test get_logger returns a logger instance."""
        logger = get_logger("test_logger")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test_logger"

    def test_package_logger_has_null_handler(self) -> None:
        """Test the package logger never warns about missing handlers."""
        handlers = logging.getLogger(PACKAGE_LOGGER_NAME).handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)

    @patch("sys.stdout")
    def test_logging_output(self, mock_stdout) -> None:
        """Test that logging actually outputs to stdout."""
        setup_logging(level=logging.INFO)
        logger = get_logger("test")
        logger.info("Test message")

        # Verify that stdout was called (indicating log output)
        assert mock_stdout.write.called


def test_public_api_exports() -> None:
    """Test the package root exposes the command functions."""
    for name in ("execute", "execute_scalar", "execute_reader", "with_command"):
        assert callable(getattr(connmate, name))
    assert connmate.IsolationLevel is IsolationLevel


def test_isolation_level_sql_names() -> None:
    """Test isolation levels render as SQL keywords."""
    assert IsolationLevel.READ_COMMITTED.sql_name == "READ COMMITTED"
    assert IsolationLevel.SERIALIZABLE.sql_name == "SERIALIZABLE"
