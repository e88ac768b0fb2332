"""Requirement check evaluation for a single team state."""
from typing import Mapping, Optional

from draftflow.errors import ValidationError
from draftflow.models.champion import BOOLEAN_TAGS, ChampionRecord
from draftflow.models.checks import CheckEvaluation, CheckResult, MissingNeeds
from draftflow.models.requirements import (
    DAMAGE_MIX_CHECK,
    OPTIONAL_TAG_CHECKS,
    REQUIRED_TAG_CHECKS,
    TOP_THREAT_CHECK,
    merge_requirement_toggles,
)
from draftflow.models.team_state import normalize_team_state
from draftflow.utils.role_normalizer import SLOTS, Slot


def _tag_check(name: str, tag: str, required: bool, filled_tags: dict[str, int]) -> CheckResult:
    satisfied = filled_tags.get(tag, 0) >= 1
    return CheckResult(
        name=name,
        required=required,
        satisfied=satisfied,
        reason=f"{tag} covered." if satisfied else f"{tag} not satisfied yet.",
        requirement_type="tag",
        requirement_tag=tag,
    )


def evaluate_composition_checks(
    team_state: Mapping[str, Optional[str]],
    champion_lookup: Mapping[str, ChampionRecord],
    toggles: Optional[Mapping[str, bool]] = None,
) -> CheckEvaluation:
    """Evaluate every requirement check against the current picks.

    Checks that are not toggled on are still evaluated and reported, they
    just never count as required gaps.

    Args:
        team_state: Slot -> champion name or None (partial maps allowed)
        champion_lookup: Champion name -> ChampionRecord
        toggles: Check name -> required flag, layered over the defaults

    Returns:
        CheckEvaluation with per-check results and the missing needs

    Raises:
        ValidationError: If a pick is not in the champion lookup
    """
    merged = merge_requirement_toggles(toggles)
    normalized = normalize_team_state(team_state)

    filled_tags = {tag: 0 for tag in BOOLEAN_TAGS}
    has_ad = False
    has_ap = False
    selected = 0
    for slot in SLOTS:
        champion_name = normalized[slot]
        if champion_name is None:
            continue
        champion = champion_lookup.get(champion_name)
        if champion is None:
            raise ValidationError(
                f"Unknown champion '{champion_name}' in team state for slot '{slot}'.",
                {"champion": champion_name, "slot": slot},
            )
        selected += 1
        has_ad = has_ad or champion.deals_ad
        has_ap = has_ap or champion.deals_ap
        for tag in champion.tags:
            filled_tags[tag] = filled_tags.get(tag, 0) + 1

    checks: dict[str, CheckResult] = {}
    for name, tag in REQUIRED_TAG_CHECKS.items():
        checks[name] = _tag_check(name, tag, merged[name], filled_tags)
    for name, tag in OPTIONAL_TAG_CHECKS.items():
        checks[name] = _tag_check(name, tag, False, filled_tags)

    damage_mix_satisfied = has_ad and has_ap
    checks[DAMAGE_MIX_CHECK] = CheckResult(
        name=DAMAGE_MIX_CHECK,
        required=merged[DAMAGE_MIX_CHECK],
        satisfied=damage_mix_satisfied,
        reason=(
            "Team has both AD and AP damage types."
            if damage_mix_satisfied
            else "Team damage mix is missing AD or AP."
        ),
        requirement_type="damage_mix",
    )

    # An empty Top still fails the check; applicable only changes the wording.
    top_name = normalized[Slot.TOP.value]
    if top_name is None:
        top_satisfied = False
        top_reason = "Top slot is not filled yet."
    else:
        top_satisfied = champion_lookup[top_name].is_top_threat
        top_reason = (
            "Top provides SideLaneThreat or DiveThreat."
            if top_satisfied
            else "Top must provide SideLaneThreat or DiveThreat."
        )
    checks[TOP_THREAT_CHECK] = CheckResult(
        name=TOP_THREAT_CHECK,
        required=merged[TOP_THREAT_CHECK],
        satisfied=top_satisfied,
        reason=top_reason,
        applicable=top_name is not None,
        requirement_type="top_threat",
    )

    damage_mix_required = merged[DAMAGE_MIX_CHECK]
    top_check = checks[TOP_THREAT_CHECK]
    missing_needs = MissingNeeds(
        tags=[
            REQUIRED_TAG_CHECKS[name]
            for name in REQUIRED_TAG_CHECKS
            if checks[name].required and not checks[name].satisfied
        ],
        needs_ad=damage_mix_required and not has_ad,
        needs_ap=damage_mix_required and not has_ap,
        needs_top_threat=top_check.required and top_check.applicable and not top_check.satisfied,
    )

    return CheckEvaluation(
        toggles=merged,
        checks=checks,
        missing_needs=missing_needs,
        has_ad=has_ad,
        has_ap=has_ap,
        filled_tags=filled_tags,
        selected_count=selected,
    )
