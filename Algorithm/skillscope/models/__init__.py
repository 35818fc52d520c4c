"""
Data models for SkillScope.

Contains:
- Rating history snapshots and the composite entity key
- Leaderboard rows
"""

from skillscope.models.timeseries import EntityKey, RatingSnapshot, TimeRange
from skillscope.models.leaderboard import LeaderboardEntry

__all__ = [
    "EntityKey",
    "RatingSnapshot",
    "TimeRange",
    "LeaderboardEntry",
]
