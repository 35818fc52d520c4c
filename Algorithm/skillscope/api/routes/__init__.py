"""
API Routes for SkillScope.

Organized by resource type:
- skills: Skill radar vectors and contribution breakdowns
- history: Aligned rating history lines
- leaderboard: Filtered, paginated rankings
"""

from skillscope.api.routes.skills import router as skills_router
from skillscope.api.routes.history import router as history_router
from skillscope.api.routes.leaderboard import router as leaderboard_router

__all__ = [
    "skills_router",
    "history_router",
    "leaderboard_router",
]
