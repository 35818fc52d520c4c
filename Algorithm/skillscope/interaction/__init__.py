"""
Interaction module for SkillScope.

Filters, pagination, highlight and detail-panel state of the
comparative leaderboard, with pluggable preference storage.
"""

from skillscope.interaction.filters import (
    StandardFilter,
    LeaderboardFilters,
    apply_filters,
    total_pages,
    clamp_page,
    paginate,
)
from skillscope.interaction.storage import (
    PreferenceStore,
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
)
from skillscope.interaction.state import (
    DetailPanel,
    Device,
    FetchState,
    FetchTracker,
    ViewPreferences,
    SeriesStyle,
    ComparativeViewState,
)

__all__ = [
    # Filters
    "StandardFilter",
    "LeaderboardFilters",
    "apply_filters",
    "total_pages",
    "clamp_page",
    "paginate",
    # Storage
    "PreferenceStore",
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
    # State
    "DetailPanel",
    "Device",
    "FetchState",
    "FetchTracker",
    "ViewPreferences",
    "SeriesStyle",
    "ComparativeViewState",
]
