"""
Comparative leaderboard service.

Coordinates data-source fetches with the interaction state: loads the
ranked list, builds the rating history for the visible page and the
skill profile for one entity.

Each fetch goes through a FetchTracker. A response is applied only if
no newer request for the same slot was started meanwhile, and a failed
fetch clears that slot's data instead of leaving a partial merge.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Any, Callable, Optional, Tuple

from skillscope.aggregation.skills import SkillScore, aggregate_skills, skill_radar_domain
from skillscope.analytics.history import TimeSeriesPoint, build_time_series, to_chart_rows
from skillscope.config.settings import Settings, get_settings
from skillscope.core.performance import EnvironmentPerformance, dedupe_environments
from skillscope.database.source import ArenaDataSource, subset_env_ids
from skillscope.errors import DataSourceError
from skillscope.interaction.state import ComparativeViewState, FetchTracker
from skillscope.models.leaderboard import LeaderboardEntry
from skillscope.models.timeseries.ratings import EntityKey, TimeRange

logger = logging.getLogger(__name__)


@dataclass
class SkillProfile:
    """Skill radar data for one entity."""
    entity_id: str
    balanced_only: bool
    environments: List[EnvironmentPerformance] = field(default_factory=list)
    scores: List[SkillScore] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not any(score.has_data for score in self.scores)

    @property
    def domain(self) -> Tuple[float, float]:
        return skill_radar_domain(self.scores)

    def to_dict(self) -> Dict[str, Any]:
        lower, upper = self.domain
        return {
            "entity_id": self.entity_id,
            "balanced_only": self.balanced_only,
            "environment_count": len(self.environments),
            "skills": [score.to_dict() for score in self.scores],
            "domain": [lower, upper],
            "empty": self.is_empty,
        }


@dataclass
class HistoryView:
    """Aligned rating history for the visible page."""
    time_range: TimeRange
    entities: List[EntityKey] = field(default_factory=list)
    names: Dict[EntityKey, str] = field(default_factory=dict)
    points: List[TimeSeriesPoint] = field(default_factory=list)
    snapshot_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.snapshot_count == 0

    def chart_rows(self) -> List[Dict[str, Any]]:
        return to_chart_rows(self.points, self.names)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time_range": self.time_range.value,
            "entities": [
                {"composite_id": e.composite_id, "name": self.names.get(e, "")}
                for e in self.entities
            ],
            "points": [point.to_dict() for point in self.points],
            "snapshot_count": self.snapshot_count,
            "empty": self.is_empty,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ComparativeLeaderboard:
    """
    Comparative leaderboard controller.

    Args:
        source: Arena data source
        state: Interaction state (a fresh one when omitted)
        settings: Settings providing the forward-fill baseline
        clock: Returns "now" for time range windows
    """

    def __init__(
        self,
        source: ArenaDataSource,
        state: Optional[ComparativeViewState] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = None
    ):
        self.source = source
        self.state = state or ComparativeViewState()
        self.settings = settings or get_settings()
        self.clock = clock or _utcnow

        self.entries: List[LeaderboardEntry] = []
        self.history: Optional[HistoryView] = None
        self.profile: Optional[SkillProfile] = None

    # -------------------------------------------------------------------------
    # Leaderboard
    # -------------------------------------------------------------------------

    async def load_leaderboard(self) -> Optional[List[LeaderboardEntry]]:
        """
        Fetch the ranked list for the selected subset.

        Returns:
            Entries, or None if a newer request superseded this one

        Raises:
            DataSourceError: If the fetch failed and is still current
        """
        subset = self.state.filters.subset
        tracker = self.state.leaderboard
        token = tracker.begin(("leaderboard", subset))

        try:
            entries = await self.source.get_leaderboard(subset)
        except DataSourceError as e:
            self._fail(tracker, token, e, "entries")
            return None

        if not tracker.resolve(token, empty=not entries):
            return None

        self.entries = entries
        self._drop_stale_history()
        logger.info(f"Loaded {len(entries)} leaderboard entries for subset {subset!r}")
        return entries

    def filtered_entries(self) -> List[LeaderboardEntry]:
        return self.state.filtered(self.entries)

    def visible_entries(self) -> List[LeaderboardEntry]:
        """Current page of the filtered list."""
        return self.state.visible(self.entries)

    def total_pages(self) -> int:
        return self.state.total_pages(len(self.filtered_entries()))

    def set_page(self, page: int) -> int:
        page = self.state.set_page(page, len(self.filtered_entries()))
        self._drop_stale_history()
        return page

    async def apply_filter(self, **changes) -> List[LeaderboardEntry]:
        """
        Change filters; reloads the ranked list when the subset changes.

        Returns:
            The new visible page
        """
        previous_subset = self.state.filters.subset
        filters = self.state.set_filter(**changes)
        if filters.subset != previous_subset:
            await self.load_leaderboard()
        self._drop_stale_history()
        return self.visible_entries()

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def _drop_stale_history(self):
        """Forget history built or requested for a page that is no longer shown."""
        tracker = self.state.history
        if tracker.key is None:
            return
        _, _, subset, entities = tracker.key
        visible = tuple(entry.entity for entry in self.visible_entries())
        if subset == self.state.filters.subset and entities == visible:
            return
        tracker.reset()
        self.history = None

    async def load_history(self, time_range: TimeRange = TimeRange.LAST_7D) -> Optional[HistoryView]:
        """
        Build the rating history for the visible page.

        Every visible entity gets a line covering every hour of the
        range, seeded with the configured baseline where no data exists.

        Returns:
            HistoryView, or None if a newer request superseded this one

        Raises:
            DataSourceError: If the fetch failed and is still current
        """
        time_range = TimeRange(time_range)
        visible = self.visible_entries()
        entities = [entry.entity for entry in visible]
        subset = self.state.filters.subset

        tracker = self.state.history
        token = tracker.begin(("history", time_range, subset, tuple(entities)))

        if not entities:
            view = HistoryView(time_range=time_range)
            if tracker.resolve(token, empty=True):
                self.history = view
                return view
            return None

        try:
            snapshots = await self.source.get_rating_history(
                entities, time_range, subset=subset, env_ids=subset_env_ids(subset)
            )
        except DataSourceError as e:
            self._fail(tracker, token, e, "history")
            return None

        start, end = time_range.window(self.clock())
        points = build_time_series(
            snapshots,
            entities,
            default_mu=self.settings.default_mu,
            default_sigma=self.settings.default_sigma,
            start=start,
            end=end,
        )
        view = HistoryView(
            time_range=time_range,
            entities=entities,
            names={entry.entity: entry.model_name for entry in visible},
            points=points,
            snapshot_count=len(snapshots),
        )

        if not tracker.resolve(token, empty=view.is_empty):
            return None

        self.history = view
        logger.debug(
            f"History {time_range.value}: {len(snapshots)} snapshots, "
            f"{len(points)} buckets, {len(entities)} entities"
        )
        return view

    # -------------------------------------------------------------------------
    # Skill profile
    # -------------------------------------------------------------------------

    async def load_skill_profile(
        self,
        entity_id: str,
        balanced_only: bool = True
    ) -> Optional[SkillProfile]:
        """
        Fetch an entity's environments and aggregate its skill vector.

        Returns:
            SkillProfile, or None if a newer request superseded this one

        Raises:
            DataSourceError: If the fetch failed and is still current
        """
        tracker = self.state.profile
        token = tracker.begin(("profile", entity_id, balanced_only))

        try:
            environments = await self.source.get_performance(entity_id)
        except DataSourceError as e:
            self._fail(tracker, token, e, "profile")
            return None

        environments = dedupe_environments(environments)
        profile = SkillProfile(
            entity_id=entity_id,
            balanced_only=balanced_only,
            environments=environments,
            scores=aggregate_skills(environments, balanced_only=balanced_only),
        )

        if not tracker.resolve(token, empty=profile.is_empty):
            return None

        self.profile = profile
        return profile

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    def _fail(self, tracker: FetchTracker, token: int, error: DataSourceError, attribute: str):
        if not tracker.fail(token, str(error)):
            return
        # No stale or partially merged data next to an error
        setattr(self, attribute, [] if attribute == "entries" else None)
        if attribute == "entries":
            self._drop_stale_history()
        raise error

    async def retry(self, slot: str):
        """
        Re-run the failed fetch of a slot ("leaderboard", "history", "profile").

        Raises:
            RuntimeError: If that slot is not in the error state
            ValueError: On an unknown slot
        """
        trackers = {
            "leaderboard": self.state.leaderboard,
            "history": self.state.history,
            "profile": self.state.profile,
        }
        if slot not in trackers:
            raise ValueError(f"Unknown slot: {slot!r}")

        tracker = trackers[slot]
        if not tracker.can_retry:
            raise RuntimeError(f"Nothing to retry for {slot} in state {tracker.state.value}")

        key = tracker.key
        if slot == "leaderboard":
            return await self.load_leaderboard()
        if slot == "history":
            return await self.load_history(key[1])
        return await self.load_skill_profile(key[1], balanced_only=key[2])
