"""
Cognitive skill set for SkillScope.

Environments are tagged with up to five of these skills. The order of
SKILLS is the radar chart's axis order and must stay stable.
"""

from enum import Enum
from typing import Dict, List, Optional


class Skill(str, Enum):
    """Cognitive skill identifiers (values are the upstream tag strings)."""
    STRATEGIC_PLANNING = "Strategic Planning"
    SPATIAL_THINKING = "Spatial Thinking"
    PATTERN_RECOGNITION = "Pattern Recognition"
    THEORY_OF_MIND = "Theory of Mind"
    LOGICAL_REASONING = "Logical Reasoning"
    MEMORY_RECALL = "Memory Recall"
    BLUFFING = "Bluffing"
    PERSUASION = "Persuasion"
    UNCERTAINTY_ESTIMATION = "Uncertainty Estimation"
    ADAPTABILITY = "Adaptability"


# Canonical order
SKILLS: List[Skill] = list(Skill)

SKILL_EXPLANATIONS: Dict[Skill, str] = {
    Skill.STRATEGIC_PLANNING: "Long-term planning and goal-oriented thinking",
    Skill.SPATIAL_THINKING: "Understanding and manipulating spatial relationships",
    Skill.PATTERN_RECOGNITION: "Identifying patterns in data and behavior",
    Skill.THEORY_OF_MIND: "Understanding and predicting others' behavior",
    Skill.LOGICAL_REASONING: "Deductive reasoning and problem solving",
    Skill.MEMORY_RECALL: "Remembering past information and experiences",
    Skill.BLUFFING: "Strategic deception and misdirection",
    Skill.PERSUASION: "Ability to influence decisions and outcomes",
    Skill.UNCERTAINTY_ESTIMATION: "Evaluating and acting under uncertain conditions",
    Skill.ADAPTABILITY: "Adjusting strategies in dynamic environments",
}


def parse_skill(value) -> Optional[Skill]:
    """
    Look up a skill by its tag string.

    Matching is exact (after stripping whitespace); variant spellings are
    not normalized.

    Returns:
        Skill, or None for unknown, empty or non-string tags
    """
    if isinstance(value, Skill):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Skill(value.strip())
    except ValueError:
        return None
