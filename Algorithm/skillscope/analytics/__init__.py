"""
Analytics module for SkillScope.

Reconstructs aligned rating histories for the comparison chart.
"""

from skillscope.analytics.history import (
    SeriesValue,
    TimeSeriesPoint,
    SeriesSummary,
    truncate_to_hour,
    build_time_series,
    series_for,
    summarize_series,
    to_chart_rows,
)

__all__ = [
    "SeriesValue",
    "TimeSeriesPoint",
    "SeriesSummary",
    "truncate_to_hour",
    "build_time_series",
    "series_for",
    "summarize_series",
    "to_chart_rows",
]
