"""
Skill aggregation module.

Turns per-environment ratings into the skill radar vector.
"""

from skillscope.aggregation.skills import (
    SkillContribution,
    SkillScore,
    aggregate_skills,
    skill_radar_domain,
    top_contributors,
    score_for,
)

__all__ = [
    "SkillContribution",
    "SkillScore",
    "aggregate_skills",
    "skill_radar_domain",
    "top_contributors",
    "score_for",
]
