"""
System constants for SkillScope.

Rating baselines, skill-tag layout and leaderboard paging defaults.
"""

# =============================================================================
# TrueSkill Baseline
# =============================================================================

# Prior mean for an entity with no rating yet
TRUESKILL_MU_0: float = 25.0

# Prior uncertainty (standard deviation)
TRUESKILL_SIGMA_0: float = 8.0

# =============================================================================
# Environment Skill Tags
# =============================================================================

# Upstream rows carry skill_1..skill_5 and skill_1_weight..skill_5_weight
MAX_SKILL_SLOTS: int = 5

# Name used when an environment row has neither name nor env_name
UNKNOWN_ENVIRONMENT: str = "Unknown"

# =============================================================================
# Leaderboard
# =============================================================================

ITEMS_PER_PAGE: int = 10

DEFAULT_SUBSET: str = "Balanced Subset"

# Subsets whose history is served by the group-based RPCs
GROUP_BASED_SUBSETS = frozenset({
    "Balanced Subset",
    "All",
    "Spatial Reasoning",
    "Spatial Thinking",
    "Adaptability",
    "Bluffing",
    "Logical Reasoning",
    "Memory Recall",
    "Pattern Recognition",
    "Persuasion",
    "Strategic Planning",
    "Theory of Mind",
    "Uncertainty Estimation",
    "NeurIPS",
})

# Environment ids behind the single-environment subsets, sent as
# selected_env_ids to the by-env history RPCs
SUBSET_ENVIRONMENT_IDS = {
    "Codenames-v0 (4 Players)": (65,),
    "ColonelBlotto-v0 (2 Players)": (82,),
    "SecretMafia-v0 (6 Players)": (75,),
    "ThreePlayerIPD-v0 (3 Players)": (83,),
}

# Longest span a reconstructed hour grid may cover (31 days)
MAX_HISTORY_HOURS: int = 24 * 31

# =============================================================================
# Chart Styling
# =============================================================================

CHART_COLORS = [
    "#06b6d4",
    "#22c55e",
    "#eab308",
    "#ec4899",
    "#8b5cf6",
    "#14b8a6",
    "#f97316",
    "#06d6a0",
    "#6366f1",
    "#f43f5e",
]

HIGHLIGHT_COLOR: str = "#ffffff"

# Opacity of non-highlighted lines while another line is highlighted
DIMMED_OPACITY: float = 0.15

# Confidence band opacity for the highlighted line
BAND_OPACITY: float = 0.2

# Radar axis fallback when no skill has a positive rating
RADAR_DEFAULT_DOMAIN = (0, 100)
