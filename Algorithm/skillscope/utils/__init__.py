"""
Utility module for SkillScope.

Provides logging configuration and defensive value coercion.
"""

from skillscope.utils.logger_config import (
    setup_logging,
    get_logger,
    LogContext,
)
from skillscope.utils.validation import (
    to_float,
    to_int,
    to_bool,
    to_str,
    parse_timestamp,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "LogContext",
    "to_float",
    "to_int",
    "to_bool",
    "to_str",
    "parse_timestamp",
]
