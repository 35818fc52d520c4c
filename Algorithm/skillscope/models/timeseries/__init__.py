"""
Time series data models.

Contains the rating-history snapshot and the composite entity key that
aligns multiple entities on one chart.
"""

from skillscope.models.timeseries.ratings import (
    EntityKey,
    RatingSnapshot,
    TimeRange,
)

__all__ = [
    "EntityKey",
    "RatingSnapshot",
    "TimeRange",
]
