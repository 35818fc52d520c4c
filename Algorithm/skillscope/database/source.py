"""
Arena data sources.

The backend database is an opaque source of precomputed rows exposed as
PostgREST remote procedures. SupabaseDataSource calls them over HTTP;
InMemoryDataSource serves fixed rows for tests and local runs.

Rows are coerced into core types here; anything malformed degrades to
defaults. Only transport and HTTP failures raise (DataSourceError).
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Any, Callable, Optional, Protocol, Sequence

import httpx

from skillscope.config.settings import Settings, get_settings
from skillscope.core.constants import DEFAULT_SUBSET, GROUP_BASED_SUBSETS, SUBSET_ENVIRONMENT_IDS
from skillscope.core.performance import EnvironmentPerformance, parse_environments
from skillscope.errors import ConfigurationError, DataSourceError
from skillscope.models.leaderboard import LeaderboardEntry
from skillscope.models.timeseries.ratings import EntityKey, RatingSnapshot, TimeRange

logger = logging.getLogger(__name__)


# =============================================================================
# RPC names
# =============================================================================

PERFORMANCE_RPC = "get_model_details_by_name_v2"
LEADERBOARD_RPC = "get_leaderboard_from_mv_trueskill_humans_models"

HISTORY_RPCS: Dict[TimeRange, Dict[str, str]] = {
    TimeRange.LAST_48H: {
        "groups": "get_trueskill_humans_models_history_last48hrs_by_groups",
        "env": "get_trueskill_humans_models_history_last48hrs_by_env",
    },
    TimeRange.LAST_7D: {
        "groups": "get_trueskill_humans_models_history_last7days_by_groups",
        "env": "get_trueskill_humans_models_history_last7days_by_env",
    },
    TimeRange.LAST_30D: {
        "groups": "get_trueskill_humans_models_history_last30days_by_groups",
        "env": "get_trueskill_humans_models_history_last30days_by_env",
    },
}

# Status codes worth retrying
_RETRYABLE_STATUS = {408, 425, 429}


class ArenaDataSource(Protocol):
    """Read-only queries the pipeline needs."""

    async def get_performance(self, entity_id: str) -> List[EnvironmentPerformance]:
        ...

    async def get_rating_history(
        self,
        entities: Sequence[EntityKey],
        time_range: TimeRange,
        subset: str = DEFAULT_SUBSET,
        env_ids: Optional[Sequence[int]] = None
    ) -> List[RatingSnapshot]:
        ...

    async def get_leaderboard(self, subset: str = DEFAULT_SUBSET) -> List[LeaderboardEntry]:
        ...


def _environment_rows(data: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """The performance RPC returns one detail row holding the environment list."""
    if not data:
        return []
    first = data[0]
    if not isinstance(first, dict):
        return []
    rows = first.get("environment_performance")
    if rows is None:
        # Already a flat list of environment rows
        return [
            row for row in data
            if isinstance(row, dict) and ("name" in row or "env_name" in row)
        ]
    return rows if isinstance(rows, list) else []


def _snapshots(rows: List[Any]) -> List[RatingSnapshot]:
    snapshots = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        snapshot = RatingSnapshot.from_dict(row)
        if snapshot is not None:
            snapshots.append(snapshot)
    return snapshots


def _entries(rows: List[Any]) -> List[LeaderboardEntry]:
    return [LeaderboardEntry.from_dict(row) for row in rows if isinstance(row, dict)]


def history_rpc_name(time_range: TimeRange, subset: str) -> str:
    """Group-based subsets use the *_by_groups RPC, single environments *_by_env."""
    kind = "groups" if subset in GROUP_BASED_SUBSETS else "env"
    return HISTORY_RPCS[TimeRange(time_range)][kind]


def subset_env_ids(subset: str) -> Optional[List[int]]:
    """
    Environment ids sent with the *_by_env history RPCs.

    "All" and unknown subsets map to None, which the RPC reads as every
    environment.
    """
    if subset == "All":
        return None
    ids = SUBSET_ENVIRONMENT_IDS.get(subset)
    return list(ids) if ids else None


# =============================================================================
# Supabase
# =============================================================================

class SupabaseDataSource:
    """
    Data source backed by Supabase PostgREST RPCs.

    Args:
        url: Supabase project URL
        anon_key: Public anon key
        timeout: Request timeout in seconds
        client: Optional preconfigured httpx.AsyncClient (owned by caller)
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        default_rating: float = None
    ):
        if not url:
            raise ConfigurationError("SUPABASE_URL is not configured")
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.default_rating = default_rating if default_rating is not None else get_settings().default_mu
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings: Settings = None) -> 'SupabaseDataSource':
        settings = settings or get_settings()
        return cls(
            url=settings.supabase_url,
            anon_key=settings.supabase_anon_key,
            timeout=settings.request_timeout,
            default_rating=settings.default_mu,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.anon_key}",
            "Content-Type": "application/json",
        }

    async def rpc(self, function: str, params: Dict[str, Any]) -> List[Any]:
        """
        Call a remote procedure.

        Returns:
            Result rows (a scalar or object result is wrapped in a list)

        Raises:
            DataSourceError: On transport failure, HTTP error or bad JSON
        """
        url = f"{self.url}/rest/v1/rpc/{function}"
        try:
            response = await self.client.post(url, json=params, headers=self._headers())
        except httpx.TimeoutException as e:
            logger.warning(f"RPC {function} timed out: {e}")
            raise DataSourceError(f"Request to {function} timed out", operation=function) from e
        except httpx.HTTPError as e:
            logger.warning(f"RPC {function} failed: {e}")
            raise DataSourceError(f"Could not reach data source: {e}", operation=function) from e

        if response.status_code >= 400:
            status = response.status_code
            logger.warning(f"RPC {function} returned status {status}: {response.text[:200]}")
            raise DataSourceError(
                f"Data source returned status {status} for {function}",
                operation=function,
                status_code=status,
                retryable=status >= 500 or status in _RETRYABLE_STATUS,
            )

        if response.status_code == 204 or not response.content:
            return []

        try:
            data = response.json()
        except ValueError as e:
            raise DataSourceError(f"Invalid JSON from {function}", operation=function) from e

        if data is None:
            return []
        if isinstance(data, list):
            return data
        return [data]

    async def get_performance(self, entity_id: str) -> List[EnvironmentPerformance]:
        data = await self.rpc(PERFORMANCE_RPC, {"model_name_param": entity_id})
        records = parse_environments(_environment_rows(data), default_rating=self.default_rating)
        logger.debug(f"Loaded {len(records)} environments for {entity_id}")
        return records

    async def get_rating_history(
        self,
        entities: Sequence[EntityKey],
        time_range: TimeRange,
        subset: str = DEFAULT_SUBSET,
        env_ids: Optional[Sequence[int]] = None
    ) -> List[RatingSnapshot]:
        if not entities:
            return []

        function = history_rpc_name(time_range, subset)
        params: Dict[str, Any] = {
            "selected_model_ids": [e.model_id for e in entities],
            "selected_human_ids": [e.human_id for e in entities],
        }
        if subset in GROUP_BASED_SUBSETS:
            params["selected_subset"] = subset
        else:
            if env_ids is None:
                env_ids = subset_env_ids(subset)
            params["selected_env_ids"] = list(env_ids) if env_ids else None

        rows = await self.rpc(function, params)
        snapshots = _snapshots(rows)
        logger.debug(f"Loaded {len(snapshots)}/{len(rows)} history rows via {function}")
        return snapshots

    async def get_leaderboard(self, subset: str = DEFAULT_SUBSET) -> List[LeaderboardEntry]:
        rows = await self.rpc(LEADERBOARD_RPC, {"skill_subset": subset})
        return _entries(rows)


# =============================================================================
# In-memory
# =============================================================================

class InMemoryDataSource:
    """
    Data source serving fixed rows.

    Args:
        performance: {entity_id: [environment rows]}
        history: Raw history rows
        leaderboard: {subset: [leaderboard rows]}
        now: Clock used to apply the time range window (None = no window)
    """

    def __init__(
        self,
        performance: Dict[str, List[Dict[str, Any]]] = None,
        history: List[Dict[str, Any]] = None,
        leaderboard: Dict[str, List[Dict[str, Any]]] = None,
        now: Callable[[], datetime] = None,
        default_rating: float = None
    ):
        self.performance = performance or {}
        self.history = history or []
        self.leaderboard = leaderboard or {}
        self.now = now
        self.default_rating = default_rating if default_rating is not None else get_settings().default_mu
        self.calls: List[str] = []
        self.fail_with: Optional[DataSourceError] = None

    def _check(self, operation: str):
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    async def get_performance(self, entity_id: str) -> List[EnvironmentPerformance]:
        self._check("get_performance")
        return parse_environments(self.performance.get(entity_id, []), default_rating=self.default_rating)

    async def get_rating_history(
        self,
        entities: Sequence[EntityKey],
        time_range: TimeRange,
        subset: str = DEFAULT_SUBSET,
        env_ids: Optional[Sequence[int]] = None
    ) -> List[RatingSnapshot]:
        self._check("get_rating_history")
        wanted = set(entities)
        snapshots = [s for s in _snapshots(self.history) if s.entity in wanted]

        if self.now is not None:
            now = self.now()
            if now.tzinfo is None:
                now = now.replace(tzinfo=timezone.utc)
            start, end = TimeRange(time_range).window(now)
            snapshots = [s for s in snapshots if start <= s.interval_start <= end]

        return snapshots

    async def get_leaderboard(self, subset: str = DEFAULT_SUBSET) -> List[LeaderboardEntry]:
        self._check("get_leaderboard")
        return _entries(self.leaderboard.get(subset, []))
