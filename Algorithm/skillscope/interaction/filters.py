"""
Leaderboard filtering and pagination.

Filters narrow the ranked list; pagination picks the slice that is
charted. Pages are one-based.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Any, Sequence, TypeVar

from skillscope.core.constants import DEFAULT_SUBSET
from skillscope.models.leaderboard import LeaderboardEntry
from skillscope.utils.validation import to_bool, to_str

T = TypeVar("T")


class StandardFilter(str, Enum):
    """Standard / non-standard model filter."""
    ALL = "All"
    STANDARD = "Standard"
    NON_STANDARD = "Non-standard"


@dataclass(frozen=True)
class LeaderboardFilters:
    """
    Filter selection for the leaderboard.

    Attributes:
        standard: Standard / non-standard restriction
        show_inactive: Include entities without recent games
        show_small_models: Include small-category models
        subset: Environment subset the ranking is computed over
    """
    standard: StandardFilter = StandardFilter.ALL
    show_inactive: bool = False
    show_small_models: bool = False
    subset: str = DEFAULT_SUBSET

    def with_changes(self, **changes) -> 'LeaderboardFilters':
        """
        Copy with some fields replaced.

        Raises:
            ValueError: On an unknown field or invalid standard filter
        """
        unknown = set(changes) - set(self.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown filter fields: {sorted(unknown)}")
        if "standard" in changes:
            changes["standard"] = StandardFilter(changes["standard"])
        for name in ("show_inactive", "show_small_models"):
            if name in changes:
                changes[name] = to_bool(changes[name], getattr(self, name))
        if "subset" in changes:
            changes["subset"] = to_str(changes["subset"], DEFAULT_SUBSET)
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "standard": self.standard.value,
            "show_inactive": self.show_inactive,
            "show_small_models": self.show_small_models,
            "subset": self.subset,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LeaderboardFilters':
        """Restore from stored preferences; bad values fall back to defaults."""
        try:
            standard = StandardFilter(data.get("standard", StandardFilter.ALL.value))
        except ValueError:
            standard = StandardFilter.ALL
        return cls(
            standard=standard,
            show_inactive=to_bool(data.get("show_inactive")),
            show_small_models=to_bool(data.get("show_small_models")),
            subset=to_str(data.get("subset"), DEFAULT_SUBSET),
        )


def apply_filters(
    entries: Sequence[LeaderboardEntry],
    filters: LeaderboardFilters
) -> List[LeaderboardEntry]:
    """Filter entries, preserving rank order."""
    filtered = list(entries)

    if filters.standard == StandardFilter.STANDARD:
        filtered = [e for e in filtered if e.is_standard]
    elif filters.standard == StandardFilter.NON_STANDARD:
        filtered = [e for e in filtered if not e.is_standard]

    if not filters.show_inactive:
        filtered = [e for e in filtered if e.is_active]

    if not filters.show_small_models:
        filtered = [e for e in filtered if not e.small_category]

    return filtered


def total_pages(total_items: int, per_page: int) -> int:
    """Number of pages; an empty list still has one (empty) page."""
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    return max(1, math.ceil(max(0, total_items) / per_page))


def clamp_page(page: int, total_items: int, per_page: int) -> int:
    """Clamp a one-based page into [1, total_pages]."""
    return min(max(1, page), total_pages(total_items, per_page))


def paginate(items: Sequence[T], page: int, per_page: int) -> List[T]:
    """The one-based page of items; empty past the end."""
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    start = (max(1, page) - 1) * per_page
    return list(items[start:start + per_page])
