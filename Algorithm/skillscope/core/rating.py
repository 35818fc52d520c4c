"""
TrueSkill rating value for SkillScope.

Every rating in the arena is reported as a Gaussian θ ~ N(μ, σ²). The
front end shows μ with a ±σ band, so bounds here are one σ wide.
"""

from dataclasses import dataclass
from skillscope.core.constants import (
    TRUESKILL_MU_0,
    TRUESKILL_SIGMA_0,
)


@dataclass(frozen=True)
class TrueSkillRating:
    """
    TrueSkill rating with mean (μ) and uncertainty (σ).

    Attributes:
        mu: Mean skill estimate
        sigma: Uncertainty (standard deviation), clamped to >= 0
    """
    mu: float = TRUESKILL_MU_0
    sigma: float = TRUESKILL_SIGMA_0

    def __post_init__(self):
        if self.sigma < 0:
            object.__setattr__(self, "sigma", 0.0)

    @property
    def upper(self) -> float:
        """Upper edge of the ±σ band."""
        return self.mu + self.sigma

    @property
    def lower(self) -> float:
        """Lower edge of the ±σ band."""
        return self.mu - self.sigma

    def __repr__(self) -> str:
        return f"TrueSkillRating(μ={self.mu:.1f}, σ={self.sigma:.1f})"
