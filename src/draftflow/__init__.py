"""DraftFlow - composition checks and possibility trees for LoL drafts."""

from draftflow.errors import DraftflowError, ValidationError
from draftflow.models.team_state import create_empty_team_state, normalize_team_state
from draftflow.services.composition_checks import evaluate_composition_checks
from draftflow.services.possibility_tree import generate_possibility_tree
from draftflow.services.scorers.composition_scorer import score_node_from_checks

__all__ = [
    "DraftflowError",
    "ValidationError",
    "create_empty_team_state",
    "normalize_team_state",
    "evaluate_composition_checks",
    "generate_possibility_tree",
    "score_node_from_checks",
]
