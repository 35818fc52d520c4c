"""
Leaderboard rows.

One ranked entity as returned by the leaderboard RPC for a subset.
"""

from dataclasses import dataclass
from typing import Dict, Any

from skillscope.models.timeseries.ratings import EntityKey
from skillscope.utils.validation import to_bool, to_float, to_int, to_str


@dataclass(frozen=True)
class LeaderboardEntry:
    """A ranked (model, human) pair."""
    model_id: int
    human_id: int
    model_name: str = ""
    human_name: str = ""
    trueskill: float = 0.0
    trueskill_sd: float = 0.0
    games_played: int = 0
    win_rate: float = 0.0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    avg_time: float = 0.0
    is_standard: bool = False
    is_active: bool = False
    small_category: bool = False

    @property
    def entity(self) -> EntityKey:
        return EntityKey(model_id=self.model_id, human_id=self.human_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model_id": self.model_id,
            "human_id": self.human_id,
            "composite_id": self.entity.composite_id,
            "model_name": self.model_name,
            "human_name": self.human_name,
            "trueskill": self.trueskill,
            "trueskill_sd": self.trueskill_sd,
            "games_played": self.games_played,
            "win_rate": self.win_rate,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "avg_time": self.avg_time,
            "is_standard": self.is_standard,
            "is_active": self.is_active,
            "small_category": self.small_category,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LeaderboardEntry':
        """Create from an upstream row with defensive coercion."""
        return cls(
            model_id=to_int(data.get("model_id")),
            human_id=to_int(data.get("human_id")),
            model_name=to_str(data.get("model_name")),
            human_name=to_str(data.get("human_name")),
            trueskill=to_float(data.get("trueskill")),
            trueskill_sd=max(0.0, to_float(data.get("trueskill_sd"))),
            games_played=max(0, to_int(data.get("games_played"))),
            win_rate=to_float(data.get("win_rate")),
            wins=max(0, to_int(data.get("wins"))),
            draws=max(0, to_int(data.get("draws"))),
            losses=max(0, to_int(data.get("losses"))),
            avg_time=max(0.0, to_float(data.get("avg_time"))),
            is_standard=to_bool(data.get("is_standard")),
            is_active=to_bool(data.get("is_active")),
            small_category=to_bool(data.get("small_category")),
        )
