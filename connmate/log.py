"""Logging configuration for connmate."""

import logging
import logging.handlers
import sys
from pathlib import Path

import colorlog

from .config import settings

PACKAGE_LOGGER_NAME = "connmate"

# Base format string for log messages (without colors)
BASE_LOG_FORMAT = (
    "%(asctime)s %(levelname)8s %(message)s (%(name)s@%(filename)s:%(lineno)d)"
)
DATE_FORMAT = "%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

# Library code stays silent unless the application configures logging.
logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def setup_logging(
    level: int | str | None = None,
    format_string: str | None = None,
    use_colors: bool = True,
    enable_file_logging: bool | None = None,
    log_dir: Path | None = None,
    is_test_env: bool | None = None,
) -> None:
    """Configure root logging for applications using connmate.

    Args:
        level: Logging level, as a number or a name such as ``"DEBUG"``
            (defaults to ``settings.log_level``)
        format_string: Custom format string for log messages
        use_colors: Whether to use colored output for console
        enable_file_logging: Whether to enable file logging (defaults to on
            in production)
        log_dir: Directory for log files (defaults to ./logs or ./logs/test)
        is_test_env: Whether this is a test environment (defaults to the
            configured environment)
    """
    if level is None:
        level = settings.log_level
    if is_test_env is None:
        is_test_env = settings.is_testing
    if enable_file_logging is None:
        enable_file_logging = settings.is_production

    if log_dir is None:
        log_dir = Path("logs")
        if is_test_env:
            log_dir = log_dir / "test"

    if enable_file_logging:
        log_dir.mkdir(parents=True, exist_ok=True)

    console_format = format_string or _get_console_format(use_colors)

    handlers = [_create_console_handler(console_format, use_colors)]

    if enable_file_logging:
        handlers.append(_create_file_handler(log_dir, is_test_env))

    logging.basicConfig(
        level=_resolve_level(level),
        handlers=handlers,
        force=True,
    )


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown logging level: {level}")
    return resolved


def _get_console_format(use_colors: bool) -> str:
    """Get console format string based on color preference."""
    if use_colors:
        return (
            "%(asctime)s %(log_color)s%(levelname)8s%(reset)s %(message)s "
            "\033[90m(%(name)s@%(filename)s:%(lineno)d)\033[0m"
        )
    return BASE_LOG_FORMAT


def _create_console_handler(format_string: str, use_colors: bool) -> logging.Handler:
    """Create console handler with appropriate formatter."""
    console_handler = logging.StreamHandler(sys.stdout)

    if use_colors:
        console_formatter: logging.Formatter = colorlog.ColoredFormatter(
            format_string,
            datefmt=DATE_FORMAT,
            log_colors=LOG_COLORS,
            style="%",
        )
    else:
        console_formatter = logging.Formatter(format_string, datefmt=DATE_FORMAT)

    console_handler.setFormatter(console_formatter)
    return console_handler


def _create_file_handler(log_dir: Path, is_test_env: bool) -> logging.Handler:
    """Create file handler; tests overwrite, production rotates."""
    file_handler: logging.Handler
    if is_test_env:
        file_handler = logging.FileHandler(log_dir / "test.log", mode="w")
    else:
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "connmate.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=4,
            encoding="utf-8",
        )

    file_handler.setFormatter(logging.Formatter(BASE_LOG_FORMAT, datefmt=DATE_FORMAT))
    return file_handler


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_production_logging(level: int | str | None = None) -> None:
    """Setup logging for production environment with file rotation."""
    setup_logging(level=level, enable_file_logging=True, is_test_env=False)


def setup_test_logging(level: int | str = logging.DEBUG) -> None:
    """Setup logging for test environment with file overwrite."""
    setup_logging(level=level, enable_file_logging=True, is_test_env=True)
