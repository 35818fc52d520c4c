"""
Comparative view interaction state.

Tracks what the comparison view shows: the filtered page of entities,
the highlighted line, the detail panel, and the status of the data
request behind it.

Detail panel transitions:

    COLLAPSED --select_skill / hover_series (pointer) / tap_series--> EXPANDED
    EXPANDED  --dismiss_detail / tap_series on the selected entity--> COLLAPSED

Touch devices have no persistent hover, so hover_series is ignored there
and only an explicit tap expands the panel.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any, Optional, Sequence, Union

from skillscope.config.settings import get_settings
from skillscope.core.constants import (
    CHART_COLORS,
    HIGHLIGHT_COLOR,
    DIMMED_OPACITY,
    BAND_OPACITY,
)
from skillscope.core.skills import Skill, parse_skill
from skillscope.interaction.filters import (
    LeaderboardFilters,
    apply_filters,
    clamp_page,
    paginate,
    total_pages,
)
from skillscope.interaction.storage import PreferenceStore
from skillscope.models.leaderboard import LeaderboardEntry
from skillscope.models.timeseries.ratings import EntityKey

logger = logging.getLogger(__name__)


class DetailPanel(str, Enum):
    """Supplementary detail panel visibility."""
    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


class Device(str, Enum):
    """Input device class."""
    POINTER = "pointer"
    TOUCH = "touch"


class FetchState(str, Enum):
    """Data request status. Exactly one holds at a time."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class ViewPreferences:
    """Session-scoped preferences, persisted through a PreferenceStore."""
    filters: LeaderboardFilters = field(default_factory=LeaderboardFilters)
    detail_panel: DetailPanel = DetailPanel.COLLAPSED
    page: int = 1
    items_per_page: int = 0

    def __post_init__(self):
        if self.items_per_page < 1:
            self.items_per_page = get_settings().items_per_page

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filters": self.filters.to_dict(),
            "detail_panel": self.detail_panel.value,
            "page": self.page,
            "items_per_page": self.items_per_page,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ViewPreferences':
        """Restore from stored data; bad values fall back to defaults."""
        try:
            panel = DetailPanel(data.get("detail_panel", DetailPanel.COLLAPSED.value))
        except ValueError:
            panel = DetailPanel.COLLAPSED

        page = data.get("page", 1)
        per_page = data.get("items_per_page", 0)
        return cls(
            filters=LeaderboardFilters.from_dict(data.get("filters") or {}),
            detail_panel=panel,
            page=page if isinstance(page, int) and page >= 1 else 1,
            items_per_page=per_page if isinstance(per_page, int) else 0,
        )


@dataclass(frozen=True)
class SeriesStyle:
    """How one line is drawn."""
    color: str
    stroke_width: float
    opacity: float
    band_opacity: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color,
            "stroke_width": self.stroke_width,
            "opacity": self.opacity,
            "band_opacity": self.band_opacity,
        }


class FetchTracker:
    """
    Tracks one logical request slot.

    Each begin() supersedes earlier requests. A response is applied only
    if its token is the latest one, so a slow stale response cannot
    overwrite newer data.
    """

    def __init__(self):
        self.state = FetchState.IDLE
        self.key: Any = None
        self.error: Optional[str] = None
        self._token = 0

    @property
    def token(self) -> int:
        return self._token

    def begin(self, key: Any) -> int:
        """Start a request for key and return its token."""
        self._token += 1
        self.key = key
        self.state = FetchState.LOADING
        self.error = None
        return self._token

    def is_current(self, token: int) -> bool:
        return token == self._token

    def resolve(self, token: int, empty: bool = False) -> bool:
        """
        Mark a request as done.

        Returns:
            False if the token is stale and the result must be dropped
        """
        if not self.is_current(token):
            logger.debug(f"Discarding stale response (token {token}, current {self._token})")
            return False
        self.state = FetchState.EMPTY if empty else FetchState.READY
        self.error = None
        return True

    def fail(self, token: int, message: str) -> bool:
        """Mark a request as failed; stale failures are ignored."""
        if not self.is_current(token):
            logger.debug(f"Discarding stale failure (token {token}): {message}")
            return False
        self.state = FetchState.ERROR
        self.error = message
        return True

    @property
    def can_retry(self) -> bool:
        return self.state == FetchState.ERROR

    def retry(self) -> int:
        """
        Restart the failed request with the same key.

        Raises:
            RuntimeError: If the tracker is not in the error state
        """
        if not self.can_retry:
            raise RuntimeError(f"Nothing to retry in state {self.state.value}")
        return self.begin(self.key)

    def reset(self):
        """Back to IDLE; any request still in flight becomes stale."""
        self._token += 1
        self.key = None
        self.state = FetchState.IDLE
        self.error = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "error": self.error,
            "can_retry": self.can_retry,
        }


class ComparativeViewState:
    """
    Interaction state of the comparative leaderboard.

    Args:
        preferences: Initial preferences; loaded from store when omitted
        store: Optional persistence port for preferences
    """

    def __init__(
        self,
        preferences: Optional[ViewPreferences] = None,
        store: Optional[PreferenceStore] = None
    ):
        self.store = store
        if preferences is None:
            preferences = ViewPreferences.from_dict(store.load()) if store else ViewPreferences()
        self.preferences = preferences

        self.selected_skill: Optional[Skill] = None
        self.selected_entity: Optional[EntityKey] = None
        self.highlighted: Optional[EntityKey] = None

        self.leaderboard = FetchTracker()
        self.history = FetchTracker()
        self.profile = FetchTracker()

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    @property
    def filters(self) -> LeaderboardFilters:
        return self.preferences.filters

    @property
    def page(self) -> int:
        return self.preferences.page

    @property
    def items_per_page(self) -> int:
        return self.preferences.items_per_page

    @property
    def detail_panel(self) -> DetailPanel:
        return self.preferences.detail_panel

    @property
    def is_expanded(self) -> bool:
        return self.preferences.detail_panel == DetailPanel.EXPANDED

    def _persist(self):
        if self.store is not None:
            self.store.save(self.preferences.to_dict())

    # -------------------------------------------------------------------------
    # Detail panel
    # -------------------------------------------------------------------------

    def select_skill(self, skill: Union[Skill, str]) -> DetailPanel:
        """
        Show the contribution breakdown for a skill.

        Raises:
            ValueError: If skill is not a known skill
        """
        parsed = parse_skill(skill)
        if parsed is None:
            raise ValueError(f"Unknown skill: {skill!r}")

        self.selected_skill = parsed
        self.selected_entity = None
        self._set_panel(DetailPanel.EXPANDED)
        return self.detail_panel

    def hover_series(self, entity: Optional[EntityKey], device: Device = Device.POINTER) -> DetailPanel:
        """
        Pointer hover over a series.

        Hover also highlights the line. Touch hover is ignored.
        """
        if device == Device.TOUCH:
            return self.detail_panel

        self.set_highlight(entity)
        if entity is not None:
            self.selected_entity = entity
            self.selected_skill = None
            self._set_panel(DetailPanel.EXPANDED)
        return self.detail_panel

    def tap_series(self, entity: EntityKey) -> DetailPanel:
        """Explicit tap on a series; tapping the selected entity again collapses."""
        if self.is_expanded and self.selected_entity == entity:
            return self.dismiss_detail()

        self.selected_entity = entity
        self.selected_skill = None
        self.set_highlight(entity)
        self._set_panel(DetailPanel.EXPANDED)
        return self.detail_panel

    def dismiss_detail(self) -> DetailPanel:
        """Hide the detail panel and clear the selection."""
        self.selected_skill = None
        self.selected_entity = None
        self._set_panel(DetailPanel.COLLAPSED)
        return self.detail_panel

    def _set_panel(self, panel: DetailPanel):
        if self.preferences.detail_panel != panel:
            self.preferences.detail_panel = panel
            self._persist()

    # -------------------------------------------------------------------------
    # Pagination and filters
    # -------------------------------------------------------------------------

    def set_page(self, page: int, total_items: int) -> int:
        """Move to a page, clamped into range. Returns the page used."""
        clamped = clamp_page(page, total_items, self.items_per_page)
        if clamped != self.preferences.page:
            self.preferences.page = clamped
            self._persist()
        return clamped

    def next_page(self, total_items: int) -> int:
        return self.set_page(self.page + 1, total_items)

    def previous_page(self, total_items: int) -> int:
        return self.set_page(self.page - 1, total_items)

    def total_pages(self, total_items: int) -> int:
        return total_pages(total_items, self.items_per_page)

    def set_filter(self, **changes) -> LeaderboardFilters:
        """
        Change filters and go back to the first page.

        The filtered list changes size, so the old page could point past
        the end.

        Raises:
            ValueError: On an unknown filter field or value
        """
        self.preferences.filters = self.preferences.filters.with_changes(**changes)
        self.preferences.page = 1
        self._persist()
        return self.preferences.filters

    def filtered(self, entries: Sequence[LeaderboardEntry]) -> List[LeaderboardEntry]:
        return apply_filters(entries, self.filters)

    def visible(self, entries: Sequence[LeaderboardEntry]) -> List[LeaderboardEntry]:
        """The current page of the filtered entries."""
        filtered = self.filtered(entries)
        page = clamp_page(self.page, len(filtered), self.items_per_page)
        return paginate(filtered, page, self.items_per_page)

    # -------------------------------------------------------------------------
    # Highlight
    # -------------------------------------------------------------------------

    def set_highlight(self, entity: Optional[EntityKey]) -> Optional[EntityKey]:
        """Highlight one entity (or none). Rendering only; fetches nothing."""
        self.highlighted = entity
        return self.highlighted

    def series_style(self, entity: EntityKey, index: int) -> SeriesStyle:
        """Line style for the entity drawn at position index."""
        base_color = CHART_COLORS[index % len(CHART_COLORS)]

        if self.highlighted is None:
            return SeriesStyle(color=base_color, stroke_width=2, opacity=1.0, band_opacity=0.0)
        if self.highlighted == entity:
            return SeriesStyle(
                color=HIGHLIGHT_COLOR,
                stroke_width=4,
                opacity=1.0,
                band_opacity=BAND_OPACITY,
            )
        return SeriesStyle(color=base_color, stroke_width=2, opacity=DIMMED_OPACITY, band_opacity=0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.preferences.to_dict(),
            "selected_skill": self.selected_skill.value if self.selected_skill else None,
            "selected_entity": self.selected_entity.composite_id if self.selected_entity else None,
            "highlighted": self.highlighted.composite_id if self.highlighted else None,
            "leaderboard": self.leaderboard.to_dict(),
            "history": self.history.to_dict(),
            "profile": self.profile.to_dict(),
        }
