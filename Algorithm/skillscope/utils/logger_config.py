"""
Logging configuration for SkillScope.

All package loggers live under the "skillscope" namespace; modules use
logging.getLogger(__name__).
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "skillscope"

# Third-party loggers that are chatty at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the skillscope logger.

    Level and format default to the values in Settings. Calling this
    again replaces the handlers instead of stacking them.

    Args:
        level: Logging level name (DEBUG, INFO, ...)
        format_string: Log record format
        log_file: Optional file to also write logs to

    Returns:
        The skillscope root logger
    """
    from skillscope.config.settings import get_settings

    settings = get_settings()
    level = level or settings.log_level
    format_string = format_string or settings.log_format

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(format_string)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(numeric_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Request-level transport noise only when debugging
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
        )

    return root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the skillscope namespace ("skillscope.<name>")."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)


class LogContext:
    """
    Temporarily change a logger's level.

    Example:
        with LogContext("DEBUG", "analytics.history"):
            build_time_series(...)
    """

    def __init__(self, level: str = "DEBUG", logger_name: Optional[str] = None):
        self.level = getattr(logging, level.upper(), logging.DEBUG)
        self.logger = get_logger(logger_name)
        self._previous: Optional[int] = None

    def __enter__(self):
        self._previous = self.logger.level
        self.logger.setLevel(self.level)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._previous is not None:
            self.logger.setLevel(self._previous)
        return False
