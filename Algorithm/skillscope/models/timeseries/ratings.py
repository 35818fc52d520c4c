"""
Rating history snapshots.

One row of the rating-history RPCs: an entity's TrueSkill μ/σ at the
start of an interval.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Any, Optional, Tuple

from skillscope.core.rating import TrueSkillRating
from skillscope.utils.validation import parse_timestamp, to_float, to_int, to_str

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class EntityKey:
    """
    Composite entity identifier.

    The same model can be driven by different human operators, so an
    entity is the (model_id, human_id) pair.
    """
    model_id: int
    human_id: int

    @property
    def composite_id(self) -> str:
        return f"{self.model_id}-{self.human_id}"

    @property
    def series_key(self) -> str:
        """Column prefix used in flat chart rows."""
        return f"model_{self.model_id}_human_{self.human_id}"

    @classmethod
    def parse(cls, value: str) -> 'EntityKey':
        """
        Parse a "model-human" composite id.

        Raises:
            ValueError: If the string is not two integers joined by "-"
        """
        model_part, sep, human_part = str(value).partition("-")
        if not sep:
            raise ValueError(f"Invalid composite id: {value!r}")
        return cls(model_id=int(model_part), human_id=int(human_part))

    def __str__(self) -> str:
        return self.composite_id


class TimeRange(str, Enum):
    """History windows offered by the backend."""
    LAST_48H = "48H"
    LAST_7D = "7D"
    LAST_30D = "30D"

    @property
    def duration(self) -> timedelta:
        return _RANGE_DURATIONS[self]

    def window(self, now: datetime) -> Tuple[datetime, datetime]:
        """(start, end) of this range ending at now."""
        return (now - self.duration, now)


_RANGE_DURATIONS: Dict[TimeRange, timedelta] = {
    TimeRange.LAST_48H: timedelta(hours=48),
    TimeRange.LAST_7D: timedelta(days=7),
    TimeRange.LAST_30D: timedelta(days=30),
}


@dataclass(frozen=True)
class RatingSnapshot:
    """
    A rating observation for one entity.

    Attributes:
        entity: Composite entity identifier
        interval_start: Start of the interval the rating belongs to (UTC)
        mu: Rating mean
        sigma: Rating uncertainty, never negative
        model_name: Display name, if supplied
        human_name: Operator display name, if supplied
    """
    entity: EntityKey
    interval_start: datetime
    mu: float
    sigma: float
    model_name: str = ""
    human_name: str = ""

    def __post_init__(self):
        if self.sigma < 0:
            object.__setattr__(self, "sigma", 0.0)

    @property
    def rating(self) -> TrueSkillRating:
        return TrueSkillRating(mu=self.mu, sigma=self.sigma)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the upstream row layout."""
        return {
            "model_id": self.entity.model_id,
            "human_id": self.entity.human_id,
            "model_name": self.model_name,
            "human_name": self.human_name,
            "interval_start": self.interval_start.isoformat(),
            "trueskill_value": self.mu,
            "trueskill_sd_value": self.sigma,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional['RatingSnapshot']:
        """
        Create from an upstream history row.

        Returns:
            RatingSnapshot, or None when the row has no usable timestamp
            or entity id
        """
        interval_start = parse_timestamp(data.get("interval_start"))
        if interval_start is None:
            logger.debug(f"Skipping history row without timestamp: {data!r}")
            return None

        model_id = to_int(data.get("model_id"), -1)
        if model_id < 0:
            logger.debug(f"Skipping history row without model_id: {data!r}")
            return None

        return cls(
            entity=EntityKey(model_id=model_id, human_id=to_int(data.get("human_id"))),
            interval_start=interval_start,
            mu=to_float(data.get("trueskill_value", data.get("mu"))),
            sigma=max(0.0, to_float(data.get("trueskill_sd_value", data.get("sigma")))),
            model_name=to_str(data.get("model_name")),
            human_name=to_str(data.get("human_name")),
        )
