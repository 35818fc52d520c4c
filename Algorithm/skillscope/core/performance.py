"""
Per-environment performance records.

An EnvironmentPerformance is one entity's standing in one game
environment, as returned by the performance RPC.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Iterable, Tuple

from skillscope.core.constants import (
    MAX_SKILL_SLOTS,
    TRUESKILL_MU_0,
    UNKNOWN_ENVIRONMENT,
)
from skillscope.utils.validation import to_bool, to_float, to_int, to_str

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkillTag:
    """A raw (skill, weight) slot. The skill string is not validated here."""
    skill: str
    weight: float


@dataclass(frozen=True)
class EnvironmentPerformance:
    """
    One entity's observed performance in one environment.

    Attributes:
        name: Environment identifier (unique per entity after dedupe)
        rating: TrueSkill μ in this environment
        games: Games played
        win_rate: Fraction of games won, in [0, 1]
        avg_move_time: Average decision time in seconds
        wins, draws, losses: Outcome counts
        skill_tags: Up to five (skill, weight) slots
        is_balanced_subset: Counts toward cross-skill comparison
    """
    name: str
    rating: float
    games: int = 0
    win_rate: float = 0.0
    avg_move_time: float = 0.0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    skill_tags: Tuple[SkillTag, ...] = field(default_factory=tuple)
    is_balanced_subset: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the upstream row layout."""
        data = {
            "name": self.name,
            "trueskill": self.rating,
            "games": self.games,
            "win_rate": self.win_rate,
            "avg_move_time": self.avg_move_time,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "is_balancedsubset": self.is_balanced_subset,
        }
        for i, tag in enumerate(self.skill_tags, 1):
            data[f"skill_{i}"] = tag.skill
            data[f"skill_{i}_weight"] = tag.weight
        return data

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        default_rating: float = TRUESKILL_MU_0
    ) -> 'EnvironmentPerformance':
        """
        Create from an upstream row.

        Missing or non-numeric numbers become 0 (the rating falls back to
        default_rating), missing booleans become False. Empty skill slots
        are dropped; weights are kept as-is so the aggregator can decide.
        """
        name = to_str(data.get("name")) or to_str(data.get("env_name")) or UNKNOWN_ENVIRONMENT

        raw_rating = data.get("trueskill")
        if raw_rating is None:
            raw_rating = data.get("elo", data.get("rating"))

        tags = []
        for i in range(1, MAX_SKILL_SLOTS + 1):
            skill = to_str(data.get(f"skill_{i}"))
            if not skill:
                continue
            tags.append(SkillTag(skill=skill, weight=to_float(data.get(f"skill_{i}_weight"))))

        return cls(
            name=name,
            rating=to_float(raw_rating, default_rating),
            games=max(0, to_int(data.get("games"))),
            win_rate=to_float(data.get("win_rate")),
            avg_move_time=max(0.0, to_float(data.get("avg_move_time"))),
            wins=max(0, to_int(data.get("wins"))),
            draws=max(0, to_int(data.get("draws"))),
            losses=max(0, to_int(data.get("losses"))),
            skill_tags=tuple(tags),
            is_balanced_subset=to_bool(data.get("is_balancedsubset", data.get("is_balanced_subset"))),
        )


def dedupe_environments(
    records: Iterable[EnvironmentPerformance]
) -> List[EnvironmentPerformance]:
    """
    Keep one record per environment name.

    The record with the most games wins. On a tie the first-seen record
    is kept. Output preserves first-appearance order of names.

    Args:
        records: Possibly duplicated records for one entity

    Returns:
        Deduplicated list
    """
    unique: Dict[str, EnvironmentPerformance] = {}
    for record in records:
        current = unique.get(record.name)
        if current is None or record.games > current.games:
            if current is not None:
                logger.debug(
                    f"Replacing duplicate environment {record.name!r} "
                    f"({current.games} -> {record.games} games)"
                )
            unique[record.name] = record
    return list(unique.values())


def parse_environments(
    rows: Iterable[Dict[str, Any]],
    default_rating: float = TRUESKILL_MU_0
) -> List[EnvironmentPerformance]:
    """Coerce upstream rows and deduplicate them."""
    records = []
    for row in rows or []:
        if not isinstance(row, dict):
            logger.debug(f"Skipping non-mapping environment row: {row!r}")
            continue
        records.append(EnvironmentPerformance.from_dict(row, default_rating=default_rating))
    return dedupe_environments(records)
