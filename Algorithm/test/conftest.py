"""
Shared fixtures and configuration for SkillScope tests.
"""

import os
import pytest
from unittest.mock import patch
from datetime import datetime, timezone


# =============================================================================
# Settings Isolation
# =============================================================================

@pytest.fixture(autouse=True)
def clean_settings():
    """
    Fresh settings for every test.

    Clears SkillScope environment variables so a developer's .env does
    not leak into assertions about defaults.
    """
    from skillscope.config.settings import reset_settings

    keys = [
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SKILLSCOPE_DEFAULT_MU",
        "SKILLSCOPE_DEFAULT_SIGMA",
        "SKILLSCOPE_ITEMS_PER_PAGE",
        "SKILLSCOPE_REQUEST_TIMEOUT",
        "SKILLSCOPE_DEFAULT_SUBSET",
        "SKILLSCOPE_PREFERENCES_PATH",
        "SKILLSCOPE_MAX_HISTORY_HOURS",
    ]
    with patch.dict(os.environ, {}, clear=False):
        for key in keys:
            os.environ.pop(key, None)
        reset_settings()
        yield
    reset_settings()


# =============================================================================
# Environment Performance Fixtures
# =============================================================================

@pytest.fixture
def poker_row():
    """A balanced-subset environment exercising two skills."""
    return {
        "name": "Poker",
        "trueskill": 30,
        "games": 12,
        "win_rate": 0.5,
        "skill_1": "Bluffing",
        "skill_1_weight": 2,
        "skill_2": "Persuasion",
        "skill_2_weight": 1,
        "is_balancedsubset": True,
    }


@pytest.fixture
def environment_rows(poker_row):
    """Environment rows for one entity, including a duplicate and junk."""
    return [
        poker_row,
        {
            "name": "Chess-v0",
            "trueskill": 40,
            "games": 20,
            "skill_1": "Strategic Planning",
            "skill_1_weight": 3,
            "skill_2": "Spatial Thinking",
            "skill_2_weight": 2,
            "is_balancedsubset": True,
        },
        {
            "name": "Kuhn Poker",
            "trueskill": 20,
            "games": 8,
            "skill_1": "Strategic Planning",
            "skill_1_weight": 1,
            "skill_2": "Not A Skill",
            "skill_2_weight": 5,
            "is_balancedsubset": False,
        },
        {
            "name": "Chess-v0",
            "trueskill": 10,
            "games": 3,
            "skill_1": "Strategic Planning",
            "skill_1_weight": 3,
            "is_balancedsubset": True,
        },
    ]


@pytest.fixture
def environments(environment_rows):
    """Parsed and deduplicated environment records."""
    from skillscope.core.performance import parse_environments
    return parse_environments(environment_rows)


# =============================================================================
# History Fixtures
# =============================================================================

@pytest.fixture
def base_time():
    """Hour 1 of the reconstruction scenarios."""
    return datetime(2025, 3, 1, 1, 0, tzinfo=timezone.utc)


@pytest.fixture
def entity_x():
    from skillscope.models.timeseries.ratings import EntityKey
    return EntityKey(model_id=1, human_id=1)


@pytest.fixture
def entity_y():
    from skillscope.models.timeseries.ratings import EntityKey
    return EntityKey(model_id=2, human_id=1)


@pytest.fixture
def history_rows():
    """Raw history rows for entity 1-1 at hours 1 and 4."""
    return [
        {
            "model_id": 1,
            "human_id": 1,
            "model_name": "Model X",
            "interval_start": "2025-03-01T01:15:00Z",
            "trueskill_value": 25.0,
            "trueskill_sd_value": 8.0,
        },
        {
            "model_id": 1,
            "human_id": 1,
            "model_name": "Model X",
            "interval_start": "2025-03-01T04:05:00Z",
            "trueskill_value": 30.0,
            "trueskill_sd_value": 5.0,
        },
    ]


# =============================================================================
# Leaderboard Fixtures
# =============================================================================

def make_entry_row(model_id, human_id=1, **overrides):
    """Leaderboard row with sensible defaults."""
    row = {
        "model_id": model_id,
        "human_id": human_id,
        "model_name": f"Model {model_id}",
        "human_name": "Operator",
        "trueskill": 40.0 - model_id,
        "trueskill_sd": 2.0,
        "games_played": 50,
        "win_rate": 0.5,
        "wins": 25,
        "draws": 0,
        "losses": 25,
        "avg_time": 1.5,
        "is_standard": True,
        "is_active": True,
        "small_category": False,
    }
    row.update(overrides)
    return row


@pytest.fixture
def leaderboard_rows():
    """25 active standard entries plus a few that default filters hide."""
    rows = [make_entry_row(i) for i in range(1, 26)]
    rows.append(make_entry_row(90, is_active=False))
    rows.append(make_entry_row(91, small_category=True))
    rows.append(make_entry_row(92, is_standard=False))
    return rows


@pytest.fixture
def leaderboard_entries(leaderboard_rows):
    from skillscope.models.leaderboard import LeaderboardEntry
    return [LeaderboardEntry.from_dict(row) for row in leaderboard_rows]


# =============================================================================
# Data Source Fixtures
# =============================================================================

@pytest.fixture
def history_now():
    """Clock for history windows, shortly after the sample rows."""
    return datetime(2025, 3, 1, 5, 30, tzinfo=timezone.utc)


@pytest.fixture
def memory_source(environment_rows, history_rows, leaderboard_rows, history_now):
    """In-memory data source loaded with the sample rows."""
    from skillscope.database.source import InMemoryDataSource
    return InMemoryDataSource(
        performance={"model-x": environment_rows},
        history=history_rows,
        leaderboard={"Balanced Subset": leaderboard_rows, "Chess-v0": leaderboard_rows[:3]},
        now=lambda: history_now,
    )
