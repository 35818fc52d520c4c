"""
Leaderboard API endpoints.

Serves one filtered, paginated page of the ranked entity list.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from skillscope.api.dependencies import get_data_source
from skillscope.api.schemas import ErrorResponse, LeaderboardPageResponse
from skillscope.config.settings import get_settings
from skillscope.database.source import ArenaDataSource
from skillscope.interaction.filters import LeaderboardFilters, StandardFilter
from skillscope.interaction.state import ComparativeViewState, ViewPreferences
from skillscope.services.comparative import ComparativeLeaderboard


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

VALID_STANDARD_FILTERS = [f.value for f in StandardFilter]


@router.get(
    "",
    response_model=LeaderboardPageResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Get leaderboard page",
    description="One page of the leaderboard for a subset after standard/active/small-model filters."
)
async def get_leaderboard(
    subset: Optional[str] = Query(None, description="Environment subset (default from settings)"),
    standard: str = Query("All", description="All, Standard or Non-standard"),
    show_inactive: bool = Query(False),
    show_small_models: bool = Query(False),
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1, le=100),
    source: ArenaDataSource = Depends(get_data_source)
):
    """Get a filtered leaderboard page. Pages past the end are clamped."""
    if standard not in VALID_STANDARD_FILTERS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid standard filter: {standard}. Valid filters: {VALID_STANDARD_FILTERS}"
        )

    settings = get_settings()
    preferences = ViewPreferences(
        filters=LeaderboardFilters(
            standard=StandardFilter(standard),
            show_inactive=show_inactive,
            show_small_models=show_small_models,
            subset=subset or settings.default_subset,
        ),
        items_per_page=per_page or settings.items_per_page,
    )
    service = ComparativeLeaderboard(source, state=ComparativeViewState(preferences), settings=settings)

    await service.load_leaderboard()
    current_page = service.set_page(page)
    filtered = service.filtered_entries()
    visible = service.visible_entries()

    first_rank = (current_page - 1) * service.state.items_per_page + 1
    entries = [
        {"rank": rank, **entry.to_dict()}
        for rank, entry in enumerate(visible, first_rank)
    ]

    return {
        "filters": preferences.filters.to_dict(),
        "page": current_page,
        "total_pages": service.total_pages(),
        "total": len(filtered),
        "entries": entries,
        "empty": not filtered,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }
