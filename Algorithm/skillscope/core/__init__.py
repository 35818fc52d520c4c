"""
Core module for SkillScope.

Contains the rating value type, the cognitive skill set and the
per-environment performance record.
"""

from skillscope.core.constants import (
    TRUESKILL_MU_0,
    TRUESKILL_SIGMA_0,
    MAX_SKILL_SLOTS,
    ITEMS_PER_PAGE,
)
from skillscope.core.rating import TrueSkillRating
from skillscope.core.skills import Skill, SKILLS, SKILL_EXPLANATIONS, parse_skill
from skillscope.core.performance import (
    SkillTag,
    EnvironmentPerformance,
    dedupe_environments,
    parse_environments,
)

__all__ = [
    # Constants
    "TRUESKILL_MU_0",
    "TRUESKILL_SIGMA_0",
    "MAX_SKILL_SLOTS",
    "ITEMS_PER_PAGE",
    # Rating
    "TrueSkillRating",
    # Skills
    "Skill",
    "SKILLS",
    "SKILL_EXPLANATIONS",
    "parse_skill",
    # Performance
    "SkillTag",
    "EnvironmentPerformance",
    "dedupe_environments",
    "parse_environments",
]
