"""
Pydantic schemas for API request/response validation.

Request bodies that carry upstream rows stay loosely typed
(Dict[str, Any]): malformed rows are coerced by the core, not rejected.
"""

from typing import Dict, List, Optional, Any
from datetime import datetime
from pydantic import BaseModel, Field


# =============================================================================
# Common
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    data_source_configured: bool
    timestamp: str


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    detail: Optional[str] = None
    code: str
    retryable: bool = False


# =============================================================================
# Skills
# =============================================================================

class SkillContributionSchema(BaseModel):
    """One environment's share of a skill score."""
    environment: str
    rating: float
    weight: float
    relative_weight: float


class SkillScoreSchema(BaseModel):
    """Aggregate score for one skill."""
    skill: str
    rating: float
    total_weight: float
    explanation: str = ""
    contributions: List[SkillContributionSchema] = Field(default_factory=list)


class SkillProfileResponse(BaseModel):
    """Skill radar data for one entity."""
    entity_id: str
    balanced_only: bool
    environment_count: int
    skills: List[SkillScoreSchema]
    domain: List[float] = Field(..., description="Radial axis [lower, upper]")
    empty: bool


class AggregateRequest(BaseModel):
    """Aggregate posted environment rows."""
    environments: List[Dict[str, Any]] = Field(default_factory=list, description="Upstream environment rows")
    balanced_only: bool = Field(False, description="Only use balanced-subset environments")


# =============================================================================
# History
# =============================================================================

class SeriesValueSchema(BaseModel):
    """One entity's value at one bucket."""
    value: float
    sigma: float
    upper: float
    lower: float
    observed: bool


class TimeSeriesPointSchema(BaseModel):
    """One hour bucket."""
    timestamp: str
    values: Dict[str, SeriesValueSchema]


class HistoryEntitySchema(BaseModel):
    """A charted entity."""
    composite_id: str
    name: str = ""


class HistoryResponse(BaseModel):
    """Aligned history for a set of entities."""
    time_range: str
    entities: List[HistoryEntitySchema]
    points: List[TimeSeriesPointSchema]
    snapshot_count: int
    empty: bool


class SeriesRequest(BaseModel):
    """Reconstruct a series from posted snapshots."""
    snapshots: List[Dict[str, Any]] = Field(default_factory=list, description="Upstream history rows")
    tracked: List[str] = Field(default_factory=list, description="Composite ids (model-human) to fill")
    default_mu: Optional[float] = Field(None, description="Baseline mean (default from settings)")
    default_sigma: Optional[float] = Field(None, ge=0, description="Baseline uncertainty")
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class SeriesResponse(BaseModel):
    """Reconstructed series."""
    points: List[TimeSeriesPointSchema]
    count: int


# =============================================================================
# Leaderboard
# =============================================================================

class LeaderboardEntrySchema(BaseModel):
    """A ranked entity."""
    rank: int
    model_id: int
    human_id: int
    composite_id: str
    model_name: str
    human_name: str
    trueskill: float
    trueskill_sd: float
    games_played: int
    win_rate: float
    wins: int
    draws: int
    losses: int
    avg_time: float
    is_standard: bool
    is_active: bool
    small_category: bool


class LeaderboardFiltersSchema(BaseModel):
    """Applied filters."""
    standard: str
    show_inactive: bool
    show_small_models: bool
    subset: str


class LeaderboardPageResponse(BaseModel):
    """One page of the filtered leaderboard."""
    filters: LeaderboardFiltersSchema
    page: int
    total_pages: int
    total: int
    entries: List[LeaderboardEntrySchema]
    empty: bool
    generated_at: str
