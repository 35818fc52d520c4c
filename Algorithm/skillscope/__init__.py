"""
SkillScope - Skill Analytics for the Game Arena Leaderboard

Turns per-environment TrueSkill ratings and sparse rating snapshots into
the data behind the comparative leaderboard.

Key Features:
- Weighted aggregation of environment ratings into a cognitive skill vector
- Hour-aligned, forward-filled rating history with ±σ bands
- Comparative view state: detail panel, filters, pagination, highlight
- Supabase RPC data source with retryable errors
"""

__version__ = "0.1.0"
__author__ = "SkillScope Team"

from skillscope.core.rating import TrueSkillRating
from skillscope.core.skills import Skill, SKILLS
from skillscope.core.performance import EnvironmentPerformance
from skillscope.aggregation.skills import SkillScore, aggregate_skills
from skillscope.analytics.history import TimeSeriesPoint, build_time_series
from skillscope.interaction.state import ComparativeViewState

__all__ = [
    # Core
    "TrueSkillRating",
    "Skill",
    "SKILLS",
    "EnvironmentPerformance",
    # Pipeline
    "SkillScore",
    "aggregate_skills",
    "TimeSeriesPoint",
    "build_time_series",
    "ComparativeViewState",
]
