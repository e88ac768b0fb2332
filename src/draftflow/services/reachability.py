"""Best-case reachability of unmet required checks."""
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional

from draftflow.models.champion import ChampionRecord
from draftflow.models.checks import CheckEvaluation
from draftflow.models.requirements import TOP_THREAT_CHECK
from draftflow.models.team_state import get_unfilled_slots
from draftflow.services.candidate_generator import CandidateGenerator
from draftflow.utils.role_normalizer import SLOTS, Slot


@dataclass
class Reachability:
    remaining_roles: list[str] = field(default_factory=list)
    unmet_required: list[str] = field(default_factory=list)
    unreachable_required: list[str] = field(default_factory=list)


def evaluate_required_reachability(
    team_state: Mapping[str, Optional[str]],
    evaluation: CheckEvaluation,
    generator: CandidateGenerator,
    excluded: frozenset[str] = frozenset(),
    role_order: Iterable[str] = SLOTS,
) -> Reachability:
    """Find required checks no assignment of the open roles could satisfy.

    The test is optimistic: each check is considered on its own against the
    champions still available for every open role, so a check reported
    reachable may still compete with others for the same slot. A check
    reported unreachable is unreachable for certain.
    """
    unmet = evaluation.unmet_required
    if not unmet:
        return Reachability(unmet_required=unmet)

    roles = get_unfilled_slots(team_state, role_order)
    top_threat_required = evaluation.toggles.get(TOP_THREAT_CHECK, False)
    available = {
        role: generator.available_for_role(team_state, role, excluded, top_threat_required)
        for role in roles
    }

    def reachable_anywhere(predicate: Callable[[ChampionRecord], bool]) -> bool:
        return any(predicate(champion) for role in roles for champion in available[role])

    unreachable: list[str] = []
    for name in unmet:
        check = evaluation.checks[name]
        if check.requirement_type == "tag" and check.requirement_tag:
            tag = check.requirement_tag
            reachable = reachable_anywhere(lambda champion: champion.has_tag(tag))
        elif check.requirement_type == "damage_mix":
            needs = evaluation.missing_needs
            ad_reachable = reachable_anywhere(lambda champion: champion.deals_ad)
            ap_reachable = reachable_anywhere(lambda champion: champion.deals_ap)
            if needs.needs_ad and needs.needs_ap:
                mixed_reachable = reachable_anywhere(lambda champion: champion.damage_type == "Mixed")
                reachable = mixed_reachable or (ad_reachable and ap_reachable and len(roles) >= 2)
            elif needs.needs_ad:
                reachable = ad_reachable
            elif needs.needs_ap:
                reachable = ap_reachable
            else:
                reachable = True
        elif check.requirement_type == "top_threat":
            top = Slot.TOP.value
            if top not in roles:
                # Top is already filled by a non-threat
                reachable = False
            else:
                reachable = any(champion.is_top_threat for champion in available[top])
        else:
            reachable = True

        if not reachable:
            unreachable.append(name)

    return Reachability(
        remaining_roles=roles,
        unmet_required=unmet,
        unreachable_required=unreachable,
    )
