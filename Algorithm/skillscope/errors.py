"""
Exception hierarchy for SkillScope.

Only the data-fetch boundary raises to callers; aggregation and
reconstruction degrade to defaults instead.
"""

from typing import Optional


class SkillScopeError(Exception):
    """Base class for all SkillScope errors."""


class ConfigurationError(SkillScopeError):
    """Raised when required settings are missing or invalid."""


class DataSourceError(SkillScopeError):
    """
    Raised when the remote data source fails.

    Attributes:
        operation: Name of the query that failed (RPC name)
        status_code: HTTP status code, if the failure came from a response
        retryable: Whether the caller should offer a retry
    """

    def __init__(
        self,
        message: str,
        operation: str = "",
        status_code: Optional[int] = None,
        retryable: bool = True
    ):
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.retryable = retryable

    def to_dict(self):
        return {
            "error": str(self),
            "operation": self.operation,
            "status_code": self.status_code,
            "retryable": self.retryable,
        }
