"""
Configuration module for SkillScope.
"""

from skillscope.config.settings import (
    Settings,
    get_settings,
    configure,
    reset_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure",
    "reset_settings",
]
