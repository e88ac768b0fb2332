"""Tests for possibility tree generation."""
import pytest

from conftest import DEFAULT_TOGGLES, NOTHING_REQUIRED
from draftflow.errors import ValidationError
from draftflow.models.champion import build_champion_lookup
from draftflow.models.requirements import RankGoal
from draftflow.services.composition_checks import evaluate_composition_checks
from draftflow.services.possibility_tree import generate_possibility_tree
from draftflow.services.viability import aggregate_branch_potential, rank_key

FOUR_FILLED = {"Top": "Camille", "Jungle": "Sejuani", "Mid": "Orianna", "ADC": "Jinx"}


@pytest.fixture
def full_tree(champion_lookup):
    """Complete drafts from an empty team over the global pools."""
    return generate_possibility_tree(
        {},
        champion_lookup,
        toggles=DEFAULT_TOGGLES,
        weights={"PrimaryCarry": 5},
        max_depth=5,
    )


def _parent_child_pairs(root):
    for node in root.iter_nodes():
        for child in node.children:
            yield node, child


class TestTreeProperties:
    def test_root_is_the_input_state(self, full_tree):
        assert full_tree.depth == 0
        assert full_tree.added_champion is None
        assert full_tree.path_rationale == []
        assert all(champion is None for champion in full_tree.team_slots.values())

    def test_reaches_valid_complete_drafts(self, full_tree):
        assert full_tree.branch_potential.valid_leaf_count > 0
        assert full_tree.branch_potential.best_leaf_score is not None
        assert any(node.viability.is_terminal_valid for node in full_tree.iter_nodes())

    def test_no_champion_is_picked_twice(self, full_tree):
        for node in full_tree.iter_nodes():
            picks = [name for name in node.team_slots.values() if name]
            assert len(picks) == len(set(picks))

    def test_each_child_fills_exactly_one_open_slot(self, full_tree):
        for parent, child in _parent_child_pairs(full_tree):
            assert child.depth == parent.depth + 1
            assert parent.team_slots[child.added_role] is None
            assert child.team_slots[child.added_role] == child.added_champion
            changed = [slot for slot in child.team_slots if child.team_slots[slot] != parent.team_slots[slot]]
            assert changed == [child.added_role]

    def test_child_path_extends_parent_path(self, full_tree):
        for parent, child in _parent_child_pairs(full_tree):
            assert child.path_rationale[: len(parent.path_rationale)] == parent.path_rationale
            assert child.path_rationale[len(parent.path_rationale)].startswith(
                f"{child.added_role} -> {child.added_champion} (candidate score "
            )

    def test_score_sign_matches_required_gaps(self, full_tree):
        for node in full_tree.iter_nodes():
            assert (node.score >= 0) == (node.required_summary.required_gaps == 0)

    def test_required_summary_matches_fresh_evaluation(self, champion_lookup, full_tree):
        """Each node's gap count is what a standalone evaluation of its slots reports."""
        for node in full_tree.iter_nodes():
            evaluation = evaluate_composition_checks(node.team_slots, champion_lookup, DEFAULT_TOGGLES)
            assert node.required_summary == evaluation.required_summary()
            assert node.checks == evaluation.checks

    def test_terminal_validity(self, full_tree):
        for node in full_tree.iter_nodes():
            viability = node.viability
            expected = viability.is_draft_complete and node.required_summary.required_gaps == 0
            assert viability.is_terminal_valid == expected
            assert viability.remaining_steps == sum(1 for name in node.team_slots.values() if name is None)

    def test_branch_potential_aggregates_children(self, full_tree):
        for node in full_tree.iter_nodes():
            if node.children:
                assert node.branch_potential == aggregate_branch_potential(node.children)
            elif node.viability.is_terminal_valid:
                assert node.branch_potential.valid_leaf_count == 1
                assert node.branch_potential.best_leaf_score == node.score
            else:
                assert node.branch_potential.valid_leaf_count == 0
                assert node.branch_potential.best_leaf_score is None

    def test_children_are_ranked(self, full_tree):
        for node in full_tree.iter_nodes():
            keys = [rank_key(child, RankGoal.VALID_END_STATES) for child in node.children]
            assert keys == sorted(keys)
            assert len(node.children) <= 8

    def test_generation_stats_describe_the_tree(self, full_tree):
        stats = full_tree.generation_stats
        nodes = list(full_tree.iter_nodes())
        leaves = [node for node in nodes if node.is_leaf]

        assert stats.nodes_kept == len(nodes)
        assert stats.candidates_selected == len(nodes) - 1
        assert stats.valid_leaves == sum(1 for leaf in leaves if leaf.viability.is_terminal_valid)
        assert stats.valid_leaves + stats.incomplete_leaves == len(leaves)
        assert stats.complete_draft_leaves + stats.incomplete_draft_leaves == len(leaves)
        assert stats.nodes_visited >= stats.nodes_kept
        assert all(node.generation_stats is None for node in nodes[1:])

    def test_generation_is_deterministic(self, champion_lookup, full_tree):
        again = generate_possibility_tree(
            {}, champion_lookup, toggles=DEFAULT_TOGGLES, weights={"PrimaryCarry": 5}, max_depth=5,
        )
        assert again.to_dict() == full_tree.to_dict()

    def test_to_dict_shape(self, full_tree):
        data = full_tree.to_dict()

        assert "generation_stats" in data
        assert data["checks"]["HasFrontline"]["status"] == "warn"
        assert data["viability"]["remaining_steps"] == 5
        child = data["children"][0]
        assert "generation_stats" not in child
        assert child["added_role"] == "Top"


class TestDeadEnds:
    def test_no_eligible_champions(self, champion_lookup):
        root = generate_possibility_tree(
            FOUR_FILLED,
            champion_lookup,
            toggles=DEFAULT_TOGGLES,
            excluded_champions=["Nautilus", "Janna", "Rakan"],
        )

        assert root.children == []
        assert root.viability.blocked_role == "Support"
        assert root.viability.blocked_reason == "no_eligible_champions_for_role"
        assert root.branch_potential.valid_leaf_count == 0
        assert root.generation_stats.incomplete_draft_leaves == 1

    def test_top_threat_filter(self, champion_lookup):
        root = generate_possibility_tree(
            {},
            champion_lookup,
            team_id="T2",
            team_pools={"T2": {"Top": ["Ornn"]}},
            toggles=DEFAULT_TOGGLES,
        )

        assert root.children == []
        assert root.viability.blocked_role == "Top"
        assert root.viability.blocked_reason == "top_threat_filter"

    def test_candidate_score_floor_without_fallback(self, champion_lookup):
        """Every support scores 0 once the team has all it needs."""
        root = generate_possibility_tree(
            FOUR_FILLED, champion_lookup, toggles=DEFAULT_TOGGLES, allow_fallback=False,
        )

        assert root.children == []
        assert root.viability.blocked_reason == "candidate_score_floor"
        assert root.generation_stats.pruned_low_candidate_score == 3

    def test_fallback_keeps_below_floor_candidates(self, champion_lookup):
        root = generate_possibility_tree(FOUR_FILLED, champion_lookup, toggles=DEFAULT_TOGGLES)

        assert {child.added_champion for child in root.children} == {"Janna", "Nautilus", "Rakan"}
        for child in root.children:
            assert child.candidate_score == 0
            assert child.passes_min_score is False
            assert child.viability.fallback_applied is True
            assert child.viability.is_terminal_valid is True
            assert child.path_rationale[-1] == f"{child.added_champion}: kept below score floor 1"
        assert root.viability.blocked_reason is None
        assert root.generation_stats.fallback_nodes == 1
        assert root.generation_stats.fallback_candidates_used == 3
        assert root.branch_potential.valid_leaf_count == 3

    def test_unreachable_requirement_at_root(self, champion_lookup):
        """Kai'Sa is the only AntiTank pick, so excluding her blocks every branch."""
        toggles = {**DEFAULT_TOGGLES, "HasAntiTank": True}
        root = generate_possibility_tree(
            {}, champion_lookup, toggles=toggles, excluded_champions=["Kai'Sa"], max_depth=5,
        )

        assert root.viability.unreachable_required == ["HasAntiTank"]
        assert root.children == []
        assert root.viability.blocked_role is None
        assert root.viability.blocked_reason is None
        assert root.branch_potential.valid_leaf_count == 0
        assert root.generation_stats.pruned_unreachable == 3

    def test_unreachable_pruning_can_be_disabled(self, champion_lookup):
        toggles = {**DEFAULT_TOGGLES, "HasAntiTank": True}
        root = generate_possibility_tree(
            {}, champion_lookup, toggles=toggles, excluded_champions=["Kai'Sa"],
            max_depth=2, prune_unreachable_required=False,
        )

        assert root.viability.unreachable_required == []
        assert root.children
        assert root.generation_stats.pruned_unreachable == 0
        assert root.branch_potential.valid_leaf_count == 0

    def test_prunes_only_the_doomed_branch(self):
        lookup = build_champion_lookup([
            {"name": "ADTop", "roles": ["Top"], "damage_type": "AD", "tags": ["DiveThreat"]},
            {"name": "APTop", "roles": ["Top"], "damage_type": "AP", "tags": ["DiveThreat"]},
            {"name": "APMid", "roles": ["Mid"], "damage_type": "AP"},
            {"name": "APJungle", "roles": ["Jungle"], "damage_type": "AP"},
            {"name": "APBot", "roles": ["ADC"], "damage_type": "AP"},
            {"name": "APSupport", "roles": ["Support"], "damage_type": "AP"},
        ])
        root = generate_possibility_tree(
            {"Jungle": "APJungle", "ADC": "APBot", "Support": "APSupport"},
            lookup,
            toggles={**NOTHING_REQUIRED, "DamageMix": True},
            min_candidate_score=0,
            relative_score_ratio=0,
        )

        assert [child.added_champion for child in root.children] == ["ADTop"]
        assert root.viability.unreachable_required == ["DamageMix"]
        assert root.viability.blocked_reason is None
        assert root.generation_stats.pruned_unreachable == 1
        assert root.branch_potential.valid_leaf_count == 1
        assert root.children[0].rationale == ["improves damage mix with AD (+6)"]


class TestSearchControls:
    def test_next_role_is_filled_first(self, champion_lookup):
        root = generate_possibility_tree({}, champion_lookup, toggles=DEFAULT_TOGGLES, next_role="sup", max_depth=1)

        assert [child.added_champion for child in root.children] == ["Nautilus", "Rakan", "Janna"]
        assert all(child.added_role == "Support" for child in root.children)

    def test_filled_next_role_falls_back_to_role_order(self, champion_lookup):
        root = generate_possibility_tree(
            {"Top": "Camille"}, champion_lookup, toggles=DEFAULT_TOGGLES, next_role="Top", max_depth=1,
        )
        assert all(child.added_role == "Jungle" for child in root.children)

    def test_role_order(self, champion_lookup):
        root = generate_possibility_tree({}, champion_lookup, toggles=DEFAULT_TOGGLES, role_order=["ADC"], max_depth=1)

        assert [child.added_champion for child in root.children] == ["Jinx", "Varus", "Kai'Sa"]
        assert [child.candidate_score for child in root.children] == [14, 14, 12]

    def test_max_branch_bounds_width(self, champion_lookup):
        root = generate_possibility_tree({}, champion_lookup, toggles=DEFAULT_TOGGLES, max_branch=1, max_depth=5)

        for node in root.iter_nodes():
            assert len(node.children) <= 1

    def test_search_stays_within_branch_depth_bound(self):
        """Deep pools never push the search past max_branch children per node."""
        lookup = build_champion_lookup([
            {
                "name": f"{slot}{index}",
                "roles": [slot],
                "damage_type": "AD" if index % 2 else "AP",
                "tags": ["DiveThreat"],
            }
            for slot in ("Top", "Jungle", "Mid", "ADC", "Support")
            for index in range(6)
        ])
        root = generate_possibility_tree(
            {},
            lookup,
            toggles=NOTHING_REQUIRED,
            max_branch=2,
            max_depth=5,
            min_candidate_score=0,
            prune_unreachable_required=False,
        )

        bound = sum(2 ** level for level in range(6))
        stats = root.generation_stats
        assert stats.nodes_visited <= bound
        assert stats.nodes_kept == bound
        assert stats.candidates_evaluated == 6 * sum(2 ** level for level in range(5))

    def test_max_depth_bounds_depth(self, champion_lookup):
        root = generate_possibility_tree({}, champion_lookup, toggles=DEFAULT_TOGGLES, max_depth=2)

        assert max(node.depth for node in root.iter_nodes()) == 2
        assert all(not node.viability.is_draft_complete for node in root.iter_nodes())

    def test_max_depth_is_capped_at_slot_count(self, champion_lookup):
        root = generate_possibility_tree(FOUR_FILLED, champion_lookup, toggles=DEFAULT_TOGGLES, max_depth=9)
        assert max(node.depth for node in root.iter_nodes()) == 1

    def test_min_candidate_score(self, champion_lookup):
        root = generate_possibility_tree(
            {}, champion_lookup, toggles=DEFAULT_TOGGLES, next_role="Support", max_depth=1,
            min_candidate_score=20,
        )

        assert [child.added_champion for child in root.children] == ["Nautilus"]
        assert root.children[0].passes_min_score is True
        assert root.generation_stats.pruned_low_candidate_score == 2

    def test_relative_score_ratio(self, champion_lookup):
        """Janna (6) falls under half of Nautilus (24)."""
        root = generate_possibility_tree(
            {}, champion_lookup, toggles=DEFAULT_TOGGLES, next_role="Support", max_depth=1,
            relative_score_ratio=0.5,
        )

        assert [child.added_champion for child in root.children] == ["Nautilus", "Rakan"]
        assert root.generation_stats.pruned_relative_candidate_score == 1

    def test_candidate_score_rank_goal(self, champion_lookup):
        root = generate_possibility_tree(
            {}, champion_lookup, toggles=DEFAULT_TOGGLES, rank_goal="candidate_score", max_depth=1,
        )
        keys = [(-child.candidate_score, child.added_champion) for child in root.children]
        assert keys == sorted(keys)
        assert root.children[0].added_champion == "Renekton"

    def test_excluded_champions_never_appear(self, champion_lookup):
        root = generate_possibility_tree(
            {}, champion_lookup, toggles=DEFAULT_TOGGLES, excluded_champions="Nautilus",
            next_role="Support", max_depth=1,
        )
        assert "Nautilus" not in {child.added_champion for child in root.children}

    def test_team_pools(self, champion_lookup, team_pools):
        team_pools["T1"]["Mid"] = ["Syndra"]
        root = generate_possibility_tree(
            {}, champion_lookup, team_id="T1", team_pools=team_pools, toggles=DEFAULT_TOGGLES,
            role_order=["Mid"], max_depth=1,
        )
        assert [child.added_champion for child in root.children] == ["Syndra"]

    def test_input_state_is_not_mutated(self, champion_lookup):
        state = dict(FOUR_FILLED)
        generate_possibility_tree(state, champion_lookup, toggles=DEFAULT_TOGGLES)
        assert state == FOUR_FILLED


class TestValidation:
    @pytest.mark.parametrize("kwargs", [
        {"max_depth": 0},
        {"max_branch": 0},
        {"max_branch": True},
        {"rank_goal": "fastest"},
        {"relative_score_ratio": 1.5},
        {"min_candidate_score": "high"},
        {"next_role": "Roam"},
        {"role_order": ["Top", "Roam"]},
        {"toggles": {"HasVision": True}},
        {"weights": {"HardEngage": -1}},
        {"weights": {"Vision": 2}},
        {"team_id": "G2", "team_pools": {}},
    ])
    def test_rejects_malformed_arguments(self, champion_lookup, kwargs):
        with pytest.raises(ValidationError):
            generate_possibility_tree({}, champion_lookup, **kwargs)

    def test_rejects_unknown_champion_in_state(self, champion_lookup):
        with pytest.raises(ValidationError):
            generate_possibility_tree({"Top": "Garen"}, champion_lookup)

    def test_rejects_duplicate_pick(self, champion_lookup):
        with pytest.raises(ValidationError):
            generate_possibility_tree({"Top": "Sylas", "Mid": "Sylas"}, champion_lookup)
