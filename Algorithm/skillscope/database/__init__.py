"""
Data source module for SkillScope.

Read-only access to the arena's precomputed statistics.
"""

from skillscope.database.source import (
    ArenaDataSource,
    SupabaseDataSource,
    InMemoryDataSource,
    history_rpc_name,
    PERFORMANCE_RPC,
    LEADERBOARD_RPC,
    HISTORY_RPCS,
)

__all__ = [
    "ArenaDataSource",
    "SupabaseDataSource",
    "InMemoryDataSource",
    "history_rpc_name",
    "PERFORMANCE_RPC",
    "LEADERBOARD_RPC",
    "HISTORY_RPCS",
]
