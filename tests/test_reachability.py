"""Tests for required-check reachability."""
from conftest import DEFAULT_TOGGLES, NOTHING_REQUIRED
from draftflow.models.champion import build_champion_lookup
from draftflow.services.candidate_generator import CandidateGenerator
from draftflow.services.composition_checks import evaluate_composition_checks
from draftflow.services.reachability import evaluate_required_reachability


def _reachability(lookup, team_state, toggles, excluded=frozenset(), generator=None):
    evaluation = evaluate_composition_checks(team_state, lookup, toggles)
    generator = generator or CandidateGenerator(lookup)
    return evaluate_required_reachability(team_state, evaluation, generator, excluded)


def test_nothing_unmet(champion_lookup):
    result = _reachability(champion_lookup, {}, NOTHING_REQUIRED)

    assert result.unmet_required == []
    assert result.unreachable_required == []


def test_empty_team_can_reach_defaults(champion_lookup):
    result = _reachability(champion_lookup, {}, DEFAULT_TOGGLES)

    assert result.remaining_roles == ["Top", "Jungle", "Mid", "ADC", "Support"]
    assert len(result.unmet_required) == 6
    assert result.unreachable_required == []


def test_excluded_tag_source_is_unreachable(champion_lookup):
    """Kai'Sa is the only AntiTank champion."""
    toggles = {**DEFAULT_TOGGLES, "HasAntiTank": True}
    result = _reachability(champion_lookup, {}, toggles, excluded=frozenset({"Kai'Sa"}))

    assert result.unreachable_required == ["HasAntiTank"]


def test_picked_tag_source_is_unreachable(champion_lookup):
    toggles = {**NOTHING_REQUIRED, "HasDisengage": True}
    state = {"Top": "Camille", "Support": "Nautilus"}

    assert _reachability(champion_lookup, state, toggles).unreachable_required == ["HasDisengage"]
    assert _reachability(champion_lookup, {"Top": "Camille"}, toggles).unreachable_required == []


def test_filled_non_threat_top_is_unreachable(champion_lookup):
    result = _reachability(champion_lookup, {"Top": "Ornn"}, DEFAULT_TOGGLES)
    assert result.unreachable_required == ["TopMustBeThreat"]


def test_top_pool_without_threats(champion_lookup):
    generator = CandidateGenerator(champion_lookup, {"T2": {"Top": ["Ornn"]}}, team_id="T2")
    toggles = {**NOTHING_REQUIRED, "TopMustBeThreat": True}

    result = _reachability(champion_lookup, {}, toggles, generator=generator)
    assert result.unreachable_required == ["TopMustBeThreat"]


def test_missing_damage_type(champion_lookup):
    toggles = {**NOTHING_REQUIRED, "DamageMix": True}
    state = {"Top": "Ornn", "Jungle": "Sejuani", "Mid": "Orianna", "Support": "Nautilus"}

    assert _reachability(champion_lookup, state, toggles).unreachable_required == []

    excluded = frozenset({"Jinx", "Varus", "Kai'Sa"})
    assert _reachability(champion_lookup, state, toggles, excluded).unreachable_required == ["DamageMix"]


def test_empty_team_damage_mix_needs_both_sides():
    lookup = build_champion_lookup([
        {"name": "Mixer", "roles": ["ADC"], "damage_type": "Mixed"},
        {"name": "Shooter", "roles": ["ADC"], "damage_type": "AD"},
        {"name": "Caster", "roles": ["Mid"], "damage_type": "AP"},
    ])
    toggles = {**NOTHING_REQUIRED, "DamageMix": True}

    assert _reachability(lookup, {}, toggles).unreachable_required == []
    assert _reachability(lookup, {}, toggles, frozenset({"Mixer"})).unreachable_required == []
    assert _reachability(lookup, {}, toggles, frozenset({"Mixer", "Caster"})).unreachable_required == [
        "DamageMix"
    ]
