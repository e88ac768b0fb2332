"""Local score for a single prospective pick."""
from dataclasses import dataclass, field
from typing import Mapping

from draftflow.models.champion import ChampionRecord
from draftflow.models.checks import CheckEvaluation

# Points for filling the missing half of a required damage mix
DAMAGE_MIX_POINTS = 6


@dataclass
class CandidateScore:
    score: float = 0
    rationale: list[str] = field(default_factory=list)


def _format_points(points: float) -> str:
    return f"+{points:g}"


def score_candidate(
    champion: ChampionRecord,
    evaluation: CheckEvaluation,
    weights: Mapping[str, float],
) -> CandidateScore:
    """Score how far a pick moves the team toward its unmet required checks.

    Only needs the team currently lacks count: each missing required tag the
    champion brings adds that tag's weight, and supplying a missing damage
    type adds a flat bonus.
    """
    result = CandidateScore()
    needs = evaluation.missing_needs

    for tag in needs.tags:
        if champion.has_tag(tag):
            weight = weights.get(tag, 0)
            result.score += weight
            result.rationale.append(f"adds {tag} ({_format_points(weight)})")

    if needs.needs_ad and champion.deals_ad:
        result.score += DAMAGE_MIX_POINTS
        result.rationale.append(f"improves damage mix with AD ({_format_points(DAMAGE_MIX_POINTS)})")

    if needs.needs_ap and champion.deals_ap:
        result.score += DAMAGE_MIX_POINTS
        result.rationale.append(f"improves damage mix with AP ({_format_points(DAMAGE_MIX_POINTS)})")

    return result
