"""
API middleware for SkillScope.
"""

from skillscope.api.middleware.logging import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
]
