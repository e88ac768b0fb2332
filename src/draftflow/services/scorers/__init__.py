"""Scoring components for compositions and candidate picks."""
from draftflow.services.scorers.candidate_scorer import CandidateScore, score_candidate
from draftflow.services.scorers.composition_scorer import (
    detail_score,
    detail_score_ceiling,
    score_node_from_checks,
)

__all__ = [
    "CandidateScore",
    "score_candidate",
    "detail_score",
    "detail_score_ceiling",
    "score_node_from_checks",
]
