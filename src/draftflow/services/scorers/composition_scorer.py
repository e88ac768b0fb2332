"""Composition scorer: reduces a check evaluation to one ranking integer."""
import math
from typing import Mapping, Optional

from draftflow.models.champion import BOOLEAN_TAGS
from draftflow.models.checks import CheckEvaluation
from draftflow.models.requirements import DAMAGE_MIX_CHECK, TOP_THREAT_CHECK
from draftflow.utils.role_normalizer import SLOTS

SATISFIED_REQUIRED_POINTS = 10
UNSATISFIED_REQUIRED_POINTS = 3
TOP_THREAT_BONUS = 5
DAMAGE_MIX_BONUS = 5
FILLED_SLOT_POINTS = 4
UNIQUE_TAG_POINTS = 2


def _weighted_tag_points(evaluation: CheckEvaluation, weights: Optional[Mapping[str, float]]) -> int:
    if not weights:
        return 0
    total = sum(
        max(weights.get(tag, 0), 0) for tag in BOOLEAN_TAGS if evaluation.filled_tags.get(tag)
    )
    return math.floor(total)


def detail_score_ceiling(
    evaluation: CheckEvaluation,
    weights: Optional[Mapping[str, float]] = None,
) -> int:
    """Highest detail score any team can reach under these toggles and weights."""
    required_count = sum(1 for result in evaluation.checks.values() if result.required)
    ceiling = required_count * SATISFIED_REQUIRED_POINTS
    ceiling += TOP_THREAT_BONUS + DAMAGE_MIX_BONUS
    ceiling += len(SLOTS) * FILLED_SLOT_POINTS
    ceiling += len(BOOLEAN_TAGS) * UNIQUE_TAG_POINTS
    if weights:
        ceiling += math.floor(sum(max(weights.get(tag, 0), 0) for tag in BOOLEAN_TAGS))
    return ceiling


def detail_score(
    evaluation: CheckEvaluation,
    weights: Optional[Mapping[str, float]] = None,
) -> int:
    """Raw composition quality, ignoring the required-gap penalty."""
    checks = evaluation.checks
    score = 0

    for result in checks.values():
        if not result.required:
            continue
        score += SATISFIED_REQUIRED_POINTS if result.satisfied else UNSATISFIED_REQUIRED_POINTS

    top_check = checks.get(TOP_THREAT_CHECK)
    if top_check and top_check.required and top_check.applicable and top_check.satisfied:
        score += TOP_THREAT_BONUS

    damage_mix = checks.get(DAMAGE_MIX_CHECK)
    if damage_mix and damage_mix.required and damage_mix.satisfied:
        score += DAMAGE_MIX_BONUS

    score += evaluation.selected_count * FILLED_SLOT_POINTS
    score += sum(1 for tag in BOOLEAN_TAGS if evaluation.filled_tags.get(tag)) * UNIQUE_TAG_POINTS
    score += _weighted_tag_points(evaluation, weights)
    return score


def score_node_from_checks(
    evaluation: CheckEvaluation,
    weights: Optional[Mapping[str, float]] = None,
) -> int:
    """Score a composition from its check evaluation.

    Each unmet required check subtracts more than the whole detail range, so
    any team with a required gap ranks below every team without one, and
    satisfying one more required check never lowers the score.

    Args:
        evaluation: Result of evaluate_composition_checks
        weights: Optional tag weights; covered tags add their weight

    Returns:
        Integer score, >= 0 exactly when there are no required gaps
    """
    score = detail_score(evaluation, weights)
    gaps = evaluation.required_summary().required_gaps
    if gaps:
        score -= gaps * (detail_score_ceiling(evaluation, weights) + 1)
    return score
