"""
Rating history reconstruction.

Turns sparse, irregularly timed rating snapshots for several entities
into one hour-aligned series in which every tracked entity has a value
at every bucket:

1. Truncate each snapshot to its hour.
2. Group by hour; later snapshots (input order) overwrite earlier ones.
3. Attach ±σ bounds to every observed cell.
4. Sort buckets ascending.
5. Forward fill each tracked entity: the baseline rating until its first
   observation, then its last observed value.

Forward fill makes quiet periods look flat. That is what the chart is
meant to show; it is not interpolation.
"""

import math
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Dict, List, Any, Iterable, Optional, Tuple, Union

from skillscope.config.settings import get_settings
from skillscope.core.rating import TrueSkillRating
from skillscope.models.timeseries.ratings import EntityKey, RatingSnapshot
from skillscope.utils.validation import parse_timestamp

logger = logging.getLogger(__name__)

BUCKET_SIZE = timedelta(hours=1)


@dataclass(frozen=True)
class SeriesValue:
    """
    One entity's value at one bucket.

    Attributes:
        value: Rating mean
        sigma: Rating uncertainty
        upper: value + sigma
        lower: value - sigma
        observed: False when the value was carried forward or seeded
    """
    value: float
    sigma: float
    upper: float
    lower: float
    observed: bool = True

    @classmethod
    def from_rating(cls, value: float, sigma: float, observed: bool = True) -> 'SeriesValue':
        return cls.from_trueskill(TrueSkillRating(mu=value, sigma=sigma), observed=observed)

    @classmethod
    def from_trueskill(cls, rating: TrueSkillRating, observed: bool = True) -> 'SeriesValue':
        """Value with the rating's ±σ band; negative σ is already clamped to 0."""
        return cls(
            value=rating.mu,
            sigma=rating.sigma,
            upper=rating.upper,
            lower=rating.lower,
            observed=observed,
        )

    def carried(self) -> 'SeriesValue':
        """Copy of this value marked as not observed."""
        if not self.observed:
            return self
        return replace(self, observed=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "sigma": self.sigma,
            "upper": self.upper,
            "lower": self.lower,
            "observed": self.observed,
        }


@dataclass
class TimeSeriesPoint:
    """An hour bucket with one value per entity."""
    timestamp: datetime
    values: Dict[EntityKey, SeriesValue] = field(default_factory=dict)

    def get(self, entity: EntityKey) -> Optional[SeriesValue]:
        return self.values.get(entity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "values": {
                entity.composite_id: value.to_dict()
                for entity, value in sorted(self.values.items())
            },
        }


@dataclass
class SeriesSummary:
    """Summary statistics of one entity's line."""
    entity: EntityKey
    start: float = 0.0
    end: float = 0.0
    change: float = 0.0
    change_pct: float = 0.0
    peak: float = 0.0
    trough: float = 0.0
    volatility: float = 0.0
    observed_points: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity": self.entity.composite_id,
            "start": self.start,
            "end": self.end,
            "change": self.change,
            "change_pct": self.change_pct,
            "peak": self.peak,
            "trough": self.trough,
            "volatility": self.volatility,
            "observed_points": self.observed_points,
        }


def truncate_to_hour(ts: datetime) -> datetime:
    """Zero minutes, seconds and microseconds."""
    return ts.replace(minute=0, second=0, microsecond=0)


def _coerce_snapshot(item: Union[RatingSnapshot, Dict[str, Any]]) -> Optional[RatingSnapshot]:
    if isinstance(item, RatingSnapshot):
        return item
    if isinstance(item, dict):
        return RatingSnapshot.from_dict(item)
    logger.debug(f"Skipping unsupported snapshot: {item!r}")
    return None


def _hour_grid(start: datetime, end: datetime, max_hours: int) -> List[datetime]:
    start = parse_timestamp(start)
    end = parse_timestamp(end)
    if start is None or end is None:
        return []

    hour = truncate_to_hour(start)
    last = truncate_to_hour(end)
    span = (last - hour) // BUCKET_SIZE + 1
    if span > max_hours:
        raise ValueError(
            f"Requested range spans {span} hours, limit is {max_hours}"
        )

    grid = []
    while hour <= last:
        grid.append(hour)
        hour += BUCKET_SIZE
    return grid


def build_time_series(
    snapshots: Iterable[Union[RatingSnapshot, Dict[str, Any]]],
    tracked: Iterable[EntityKey],
    default_mu: float = None,
    default_sigma: float = None,
    start: datetime = None,
    end: datetime = None
) -> List[TimeSeriesPoint]:
    """
    Build an hour-aligned, gap-free series for the tracked entities.

    Snapshots are expected in time order and are not re-sorted: within
    one hour the last snapshot seen for an entity wins. Snapshots of
    untracked entities still create buckets but are not filled.

    When both start and end are given, every hour between them is a
    bucket even if no snapshot falls in it. Otherwise only hours with at
    least one snapshot exist.

    Args:
        snapshots: RatingSnapshot objects or raw history rows
        tracked: Entities that must have a value at every bucket
        default_mu: Baseline mean before an entity's first observation
        default_sigma: Baseline uncertainty
        start: Optional start of the requested range
        end: Optional end of the requested range

    Returns:
        Points sorted by timestamp ascending, timestamps in UTC

    Raises:
        ValueError: If start..end covers more than max_history_hours
    """
    settings = get_settings()
    if default_mu is None:
        default_mu = settings.default_mu
    if default_sigma is None:
        default_sigma = settings.default_sigma

    tracked_entities = list(dict.fromkeys(tracked))

    buckets: Dict[datetime, Dict[EntityKey, SeriesValue]] = {}

    if start is not None and end is not None:
        for hour in _hour_grid(start, end, settings.max_history_hours):
            buckets[hour] = {}

    skipped = 0
    for item in snapshots or []:
        snapshot = _coerce_snapshot(item)
        if snapshot is None:
            skipped += 1
            continue
        interval_start = parse_timestamp(snapshot.interval_start)
        if interval_start is None:
            skipped += 1
            continue
        hour = truncate_to_hour(interval_start)
        buckets.setdefault(hour, {})[snapshot.entity] = SeriesValue.from_trueskill(snapshot.rating)

    if skipped:
        logger.debug(f"Skipped {skipped} unusable history rows")

    points = [
        TimeSeriesPoint(timestamp=hour, values=buckets[hour])
        for hour in sorted(buckets)
    ]

    baseline = SeriesValue.from_rating(default_mu, default_sigma, observed=False)
    for entity in tracked_entities:
        last = baseline
        for point in points:
            current = point.values.get(entity)
            if current is None:
                point.values[entity] = last
            else:
                last = current.carried()

    return points


def series_for(
    points: Iterable[TimeSeriesPoint],
    entity: EntityKey
) -> List[Tuple[datetime, SeriesValue]]:
    """One entity's line as (timestamp, value) pairs; gaps are omitted."""
    return [
        (point.timestamp, point.values[entity])
        for point in points
        if entity in point.values
    ]


def summarize_series(points: Iterable[TimeSeriesPoint], entity: EntityKey) -> SeriesSummary:
    """
    Summary statistics for one entity's line.

    Volatility is the population standard deviation of successive
    changes.
    """
    line = series_for(points, entity)
    summary = SeriesSummary(entity=entity)
    if not line:
        return summary

    values = [value.value for _, value in line]
    summary.start = values[0]
    summary.end = values[-1]
    summary.change = summary.end - summary.start
    if summary.start != 0:
        summary.change_pct = (summary.change / summary.start) * 100
    summary.peak = max(values)
    summary.trough = min(values)
    summary.observed_points = sum(1 for _, value in line if value.observed)

    if len(values) > 1:
        changes = [values[i + 1] - values[i] for i in range(len(values) - 1)]
        mean_change = sum(changes) / len(changes)
        variance = sum((c - mean_change) ** 2 for c in changes) / len(changes)
        summary.volatility = math.sqrt(variance)

    return summary


def to_chart_rows(
    points: Iterable[TimeSeriesPoint],
    names: Dict[EntityKey, str] = None
) -> List[Dict[str, Any]]:
    """
    Flatten points into charting rows.

    Each row has a "date" column and, per entity, the columns
    model_{m}_human_{h}, ..._sd, ..._upper, ..._lower and ..._name.
    """
    names = names or {}
    rows = []
    for point in points:
        row: Dict[str, Any] = {"date": point.timestamp.isoformat()}
        for entity, value in point.values.items():
            key = entity.series_key
            row[key] = value.value
            row[f"{key}_sd"] = value.sigma
            row[f"{key}_upper"] = value.upper
            row[f"{key}_lower"] = value.lower
            if entity in names:
                row[f"{key}_name"] = names[entity]
        rows.append(row)
    return rows
