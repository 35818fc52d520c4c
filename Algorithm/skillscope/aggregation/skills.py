"""
Skill aggregation.

Maps per-environment ratings onto the fixed cognitive skill set using a
weight-normalized average:

    rating_s = Σ_e (rating_e · w_{e,s}) / Σ_e w_{e,s}

An environment exercising a skill strongly (high weight) dominates that
skill's score; one that touches it weakly barely moves it.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Iterable, Sequence, Tuple

from skillscope.core.constants import RADAR_DEFAULT_DOMAIN
from skillscope.core.performance import EnvironmentPerformance
from skillscope.core.skills import Skill, SKILLS, SKILL_EXPLANATIONS, parse_skill

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkillContribution:
    """One environment's share of a skill score."""
    environment: str
    rating: float
    weight: float
    relative_weight: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment,
            "rating": self.rating,
            "weight": self.weight,
            "relative_weight": self.relative_weight,
        }


@dataclass(frozen=True)
class SkillScore:
    """
    Aggregate score for one skill.

    Attributes:
        skill: Skill identifier
        rating: Weighted average rating (0 when nothing contributes)
        total_weight: Sum of contributing weights
        contributions: Contributing environments in input order
    """
    skill: Skill
    rating: float
    total_weight: float
    contributions: Tuple[SkillContribution, ...] = field(default_factory=tuple)

    @property
    def explanation(self) -> str:
        return SKILL_EXPLANATIONS.get(self.skill, "")

    @property
    def has_data(self) -> bool:
        return self.total_weight > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skill": self.skill.value,
            "rating": self.rating,
            "total_weight": self.total_weight,
            "explanation": self.explanation,
            "contributions": [c.to_dict() for c in self.contributions],
        }


@dataclass
class _SkillBucket:
    weighted_sum: float = 0.0
    total_weight: float = 0.0
    entries: List[Tuple[str, float, float]] = field(default_factory=list)


def aggregate_skills(
    records: Iterable[EnvironmentPerformance],
    balanced_only: bool = False,
    skills: Sequence[Skill] = SKILLS
) -> List[SkillScore]:
    """
    Aggregate environment ratings into one score per skill.

    Tags that are unknown, or whose weight is not a positive number, are
    skipped silently. Empty input gives all-zero scores.

    Args:
        records: Environment performance records for one entity
        balanced_only: Only use records flagged as balanced subset
        skills: Skills to score, in output order

    Returns:
        One SkillScore per skill, in the order of `skills`
    """
    buckets: Dict[Skill, _SkillBucket] = {skill: _SkillBucket() for skill in skills}

    for record in records:
        if balanced_only and not record.is_balanced_subset:
            continue

        for tag in record.skill_tags:
            skill = parse_skill(tag.skill)
            if skill is None or skill not in buckets:
                if tag.skill:
                    logger.debug(f"Ignoring unknown skill tag {tag.skill!r} on {record.name}")
                continue

            weight = tag.weight
            if not isinstance(weight, (int, float)) or math.isnan(weight) or weight <= 0:
                continue

            bucket = buckets[skill]
            bucket.weighted_sum += record.rating * weight
            bucket.total_weight += weight
            bucket.entries.append((record.name, record.rating, weight))

    scores = []
    for skill in skills:
        bucket = buckets[skill]
        total = bucket.total_weight
        contributions = tuple(
            SkillContribution(
                environment=name,
                rating=rating,
                weight=weight,
                relative_weight=weight / total if total > 0 else 0.0,
            )
            for name, rating, weight in bucket.entries
        )
        scores.append(SkillScore(
            skill=skill,
            rating=bucket.weighted_sum / total if total > 0 else 0.0,
            total_weight=total,
            contributions=contributions,
        ))

    return scores


def skill_radar_domain(scores: Iterable[SkillScore]) -> Tuple[float, float]:
    """
    Radial axis bounds for the skill radar.

    Non-positive ratings are ignored. Adds 10% headroom (at least 1)
    above the best skill.

    Returns:
        (lower, upper)
    """
    values = [s.rating for s in scores if s.rating > 0]
    if not values:
        return RADAR_DEFAULT_DOMAIN

    peak = max(values)
    buffer = max(1.0, peak * 0.1)
    return (0, math.ceil(peak + buffer))


def top_contributors(score: SkillScore, limit: int = None) -> List[SkillContribution]:
    """Contributions ordered by relative weight, largest first."""
    ordered = sorted(score.contributions, key=lambda c: c.relative_weight, reverse=True)
    if limit is not None:
        return ordered[:limit]
    return ordered


def score_for(scores: Iterable[SkillScore], skill: Skill) -> SkillScore:
    """Find the score for one skill; a zero score if absent."""
    for score in scores:
        if score.skill == skill:
            return score
    return SkillScore(skill=skill, rating=0.0, total_weight=0.0)
