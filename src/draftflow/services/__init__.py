"""Draft engine services."""

from draftflow.services.candidate_generator import CandidateBatch, CandidateGenerator
from draftflow.services.composition_checks import evaluate_composition_checks
from draftflow.services.possibility_tree import PossibilityTreeBuilder, generate_possibility_tree
from draftflow.services.reachability import Reachability, evaluate_required_reachability

__all__ = [
    "CandidateBatch",
    "CandidateGenerator",
    "evaluate_composition_checks",
    "PossibilityTreeBuilder",
    "generate_possibility_tree",
    "Reachability",
    "evaluate_required_reachability",
]
