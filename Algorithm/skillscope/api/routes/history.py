"""
Rating history API endpoints.

Serves hour-aligned, forward-filled rating lines for chart comparison.
"""

from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from skillscope.analytics.history import build_time_series
from skillscope.api.dependencies import get_data_source
from skillscope.api.schemas import (
    ErrorResponse,
    HistoryResponse,
    SeriesRequest,
    SeriesResponse,
)
from skillscope.config.settings import get_settings
from skillscope.core.constants import DEFAULT_SUBSET
from skillscope.database.source import ArenaDataSource, subset_env_ids
from skillscope.models.timeseries.ratings import EntityKey, TimeRange


router = APIRouter(prefix="/history", tags=["history"])

VALID_TIME_RANGES = [r.value for r in TimeRange]


def _parse_time_range(value: str) -> TimeRange:
    try:
        return TimeRange(value.upper())
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid time_range: {value}. Valid time ranges: {VALID_TIME_RANGES}"
        )


@router.get(
    "",
    response_model=HistoryResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Get rating history",
    description="Hour-bucketed rating history for (model, human) pairs over a time range."
)
async def get_history(
    model_ids: List[int] = Query(..., description="Model ids, paired by position with human_ids"),
    human_ids: List[int] = Query(..., description="Human ids, paired by position with model_ids"),
    time_range: str = Query("7D", description="48H, 7D or 30D"),
    subset: str = Query(DEFAULT_SUBSET, description="Environment subset"),
    source: ArenaDataSource = Depends(get_data_source)
):
    """Fetch snapshots for the entities and reconstruct their lines."""
    if len(model_ids) != len(human_ids):
        raise HTTPException(
            status_code=400,
            detail=f"model_ids ({len(model_ids)}) and human_ids ({len(human_ids)}) must have the same length"
        )

    parsed_range = _parse_time_range(time_range)
    entities = list(dict.fromkeys(
        EntityKey(model_id=m, human_id=h) for m, h in zip(model_ids, human_ids)
    ))

    snapshots = await source.get_rating_history(
        entities, parsed_range, subset=subset, env_ids=subset_env_ids(subset)
    )

    names = {}
    for snapshot in snapshots:
        if snapshot.model_name:
            names[snapshot.entity] = snapshot.model_name

    start, end = parsed_range.window(datetime.now(timezone.utc))
    settings = get_settings()
    points = build_time_series(
        snapshots,
        entities,
        default_mu=settings.default_mu,
        default_sigma=settings.default_sigma,
        start=start,
        end=end,
    )

    return {
        "time_range": parsed_range.value,
        "entities": [
            {"composite_id": e.composite_id, "name": names.get(e, "")}
            for e in entities
        ],
        "points": [point.to_dict() for point in points],
        "snapshot_count": len(snapshots),
        "empty": not snapshots,
    }


@router.post(
    "/series",
    response_model=SeriesResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Reconstruct a series",
    description="Bucket and forward-fill posted snapshots without touching the data source."
)
async def reconstruct_series(request: SeriesRequest):
    """Reconstruct posted snapshots."""
    try:
        tracked = [EntityKey.parse(value) for value in request.tracked]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        points = build_time_series(
            request.snapshots,
            tracked,
            default_mu=request.default_mu,
            default_sigma=request.default_sigma,
            start=request.start,
            end=request.end,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "points": [point.to_dict() for point in points],
        "count": len(points),
    }
