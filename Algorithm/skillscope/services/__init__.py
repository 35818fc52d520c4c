"""
Service layer for SkillScope.
"""

from skillscope.services.comparative import (
    ComparativeLeaderboard,
    HistoryView,
    SkillProfile,
)

__all__ = [
    "ComparativeLeaderboard",
    "HistoryView",
    "SkillProfile",
]
