"""
Skill profile API endpoints.

Serves the skill radar vector and its per-environment breakdown.
"""

from fastapi import APIRouter, Depends, Query

from skillscope.aggregation.skills import aggregate_skills
from skillscope.api.dependencies import get_data_source
from skillscope.api.schemas import (
    AggregateRequest,
    ErrorResponse,
    SkillProfileResponse,
)
from skillscope.config.settings import get_settings
from skillscope.core.performance import parse_environments
from skillscope.database.source import ArenaDataSource
from skillscope.services.comparative import ComparativeLeaderboard, SkillProfile


router = APIRouter(prefix="/skills", tags=["skills"])


@router.get(
    "/{entity_id}",
    response_model=SkillProfileResponse,
    responses={502: {"model": ErrorResponse}},
    summary="Get skill profile",
    description="Aggregate an entity's environment ratings into the skill radar vector."
)
async def get_skill_profile(
    entity_id: str,
    balanced_only: bool = Query(True, description="Only use balanced-subset environments"),
    source: ArenaDataSource = Depends(get_data_source)
):
    """Fetch environments for an entity and aggregate them."""
    service = ComparativeLeaderboard(source)
    profile = await service.load_skill_profile(entity_id, balanced_only=balanced_only)
    return profile.to_dict()


@router.post(
    "/aggregate",
    response_model=SkillProfileResponse,
    summary="Aggregate environment rows",
    description="Aggregate posted environment rows without touching the data source."
)
async def aggregate_environment_rows(request: AggregateRequest):
    """Aggregate posted rows (deduplicated first)."""
    environments = parse_environments(request.environments, default_rating=get_settings().default_mu)
    profile = SkillProfile(
        entity_id="",
        balanced_only=request.balanced_only,
        environments=environments,
        scores=aggregate_skills(environments, balanced_only=request.balanced_only),
    )
    return profile.to_dict()
