"""Data models for the DraftFlow engine."""

from draftflow.models.champion import (
    BOOLEAN_TAGS,
    ChampionRecord,
    DamageType,
    Scaling,
    build_champion_lookup,
)
from draftflow.models.checks import CheckEvaluation, CheckResult, MissingNeeds, RequiredSummary
from draftflow.models.requirements import (
    DEFAULT_RECOMMENDATION_WEIGHTS,
    DEFAULT_REQUIREMENT_TOGGLES,
    REQUIREMENT_CHECKS,
    RankGoal,
)
from draftflow.models.team_state import TeamState, create_empty_team_state, normalize_team_state
from draftflow.models.tree import BranchPotential, GenerationStats, TreeNode, Viability
from draftflow.utils.role_normalizer import SLOTS, Slot

__all__ = [
    "BOOLEAN_TAGS",
    "ChampionRecord",
    "DamageType",
    "Scaling",
    "build_champion_lookup",
    "CheckEvaluation",
    "CheckResult",
    "MissingNeeds",
    "RequiredSummary",
    "DEFAULT_RECOMMENDATION_WEIGHTS",
    "DEFAULT_REQUIREMENT_TOGGLES",
    "REQUIREMENT_CHECKS",
    "RankGoal",
    "TeamState",
    "create_empty_team_state",
    "normalize_team_state",
    "BranchPotential",
    "GenerationStats",
    "TreeNode",
    "Viability",
    "SLOTS",
    "Slot",
]
