"""Possibility tree generation over the remaining role assignments."""
import logging
from dataclasses import dataclass
from numbers import Real
from typing import Iterable, Mapping, Optional

from draftflow.errors import ValidationError
from draftflow.models.champion import ChampionRecord
from draftflow.models.checks import CheckEvaluation
from draftflow.models.requirements import (
    DEFAULT_TREE_SETTINGS,
    TOP_THREAT_CHECK,
    RankGoal,
    merge_recommendation_weights,
    merge_requirement_toggles,
)
from draftflow.models.team_state import TeamState, normalize_team_state
from draftflow.models.tree import GenerationStats, TreeNode
from draftflow.services.candidate_generator import CandidateGenerator
from draftflow.services.composition_checks import evaluate_composition_checks
from draftflow.services.reachability import evaluate_required_reachability
from draftflow.services.scorers import score_candidate, score_node_from_checks
from draftflow.services.viability import (
    aggregate_branch_potential,
    build_viability,
    collect_tree_stats,
    leaf_branch_potential,
    rank_key,
)
from draftflow.utils.role_normalizer import SLOTS, normalize_role_order, normalize_slot_strict

logger = logging.getLogger(__name__)

BLOCKED_NO_ELIGIBLE = "no_eligible_champions_for_role"
BLOCKED_TOP_THREAT = "top_threat_filter"
BLOCKED_SCORE_FLOOR = "candidate_score_floor"


@dataclass
class _Candidate:
    champion: ChampionRecord
    score: float
    rationale: list[str]
    passes_min_score: bool = True


@dataclass
class _PreparedChild:
    candidate: _Candidate
    team_state: TeamState
    evaluation: CheckEvaluation
    unreachable_required: list[str]


class PossibilityTreeBuilder:
    """Depth- and width-limited search over the open slots of one team.

    Every node carries its own team state snapshot; the champions used along
    a path are read from that snapshot, so sibling branches never share
    mutable state. Only the generation counters are shared.
    """

    def __init__(
        self,
        champion_lookup: Mapping[str, ChampionRecord],
        generator: CandidateGenerator,
        role_order: tuple[str, ...] = SLOTS,
        next_role: Optional[str] = None,
        toggles: Optional[dict[str, bool]] = None,
        excluded: frozenset[str] = frozenset(),
        weights: Optional[dict[str, float]] = None,
        max_depth: int = DEFAULT_TREE_SETTINGS["max_depth"],
        max_branch: int = DEFAULT_TREE_SETTINGS["max_branch"],
        min_candidate_score: float = DEFAULT_TREE_SETTINGS["min_candidate_score"],
        prune_unreachable_required: bool = True,
        rank_goal: RankGoal = RankGoal.VALID_END_STATES,
        allow_fallback: bool = True,
        relative_score_ratio: float = DEFAULT_TREE_SETTINGS["relative_score_ratio"],
    ):
        self.champion_lookup = champion_lookup
        self.generator = generator
        self.role_order = role_order
        self.next_role = next_role
        self.toggles = toggles if toggles is not None else merge_requirement_toggles()
        self.excluded = excluded
        self.weights = weights if weights is not None else merge_recommendation_weights()
        self.max_depth = max_depth
        self.max_branch = max_branch
        self.min_candidate_score = min_candidate_score
        self.prune_unreachable_required = prune_unreachable_required
        self.rank_goal = rank_goal
        self.allow_fallback = allow_fallback
        self.relative_score_ratio = relative_score_ratio
        self.stats = GenerationStats()

    def build(self, team_state: TeamState) -> TreeNode:
        """Build the full tree rooted at ``team_state``."""
        evaluation = self._evaluate(team_state)
        unreachable = self._unreachable_for(team_state, evaluation)
        root = self._build_node(team_state, evaluation, unreachable, depth=0, path_rationale=[])
        collect_tree_stats(root, self.stats)
        root.generation_stats = self.stats
        logger.debug(
            f"Possibility tree built: visited={self.stats.nodes_visited} "
            f"kept={self.stats.nodes_kept} valid_leaves={self.stats.valid_leaves} "
            f"pruned_unreachable={self.stats.pruned_unreachable} "
            f"fallback_nodes={self.stats.fallback_nodes}"
        )
        return root

    def _evaluate(self, team_state: TeamState) -> CheckEvaluation:
        return evaluate_composition_checks(team_state, self.champion_lookup, self.toggles)

    def _unreachable_for(self, team_state: TeamState, evaluation: CheckEvaluation) -> list[str]:
        if not self.prune_unreachable_required:
            return []
        return evaluate_required_reachability(
            team_state, evaluation, self.generator, self.excluded, self.role_order
        ).unreachable_required

    def _resolve_role(self, team_state: TeamState) -> Optional[str]:
        if self.next_role and team_state.get(self.next_role) is None:
            return self.next_role
        return next((slot for slot in self.role_order if team_state.get(slot) is None), None)

    def _build_node(
        self,
        team_state: TeamState,
        evaluation: CheckEvaluation,
        unreachable_required: list[str],
        depth: int,
        path_rationale: list[str],
        candidate: Optional[_Candidate] = None,
        added_role: Optional[str] = None,
    ) -> TreeNode:
        self.stats.nodes_visited += 1
        required_summary = evaluation.required_summary()
        viability = build_viability(team_state, required_summary)
        viability.unreachable_required = list(unreachable_required)

        node = TreeNode(
            depth=depth,
            team_slots=team_state,
            score=score_node_from_checks(evaluation, self.weights),
            checks=evaluation.checks,
            missing_needs=evaluation.missing_needs,
            required_summary=required_summary,
            viability=viability,
            path_rationale=path_rationale,
        )
        if candidate is not None:
            node.added_role = added_role
            node.added_champion = candidate.champion.name
            node.candidate_score = candidate.score
            node.passes_min_score = candidate.passes_min_score
            node.rationale = list(candidate.rationale)
            node.viability.fallback_applied = not candidate.passes_min_score

        if depth >= self.max_depth or viability.is_draft_complete:
            node.branch_potential = leaf_branch_potential(node)
            return node

        self._expand(node, evaluation)
        return node

    def _block(self, node: TreeNode, role: str, reason: str) -> None:
        node.viability.blocked_role = role
        node.viability.blocked_reason = reason
        node.branch_potential = leaf_branch_potential(node)

    def _expand(self, node: TreeNode, evaluation: CheckEvaluation) -> None:
        role = self._resolve_role(node.team_slots)
        if role is None:
            node.branch_potential = leaf_branch_potential(node)
            return

        top_threat_required = self.toggles.get(TOP_THREAT_CHECK, False)
        self.stats.candidate_generation_calls += 1
        batch = self.generator.generate(node.team_slots, role, self.excluded, top_threat_required)
        if not batch.eligible:
            reason = BLOCKED_TOP_THREAT if batch.filtered_top_threat_count else BLOCKED_NO_ELIGIBLE
            self._block(node, role, reason)
            return

        scored = []
        for champion in batch.eligible:
            result = score_candidate(champion, evaluation, self.weights)
            scored.append(_Candidate(champion, result.score, result.rationale))
        self.stats.candidates_evaluated += len(scored)
        scored.sort(key=lambda c: (-c.score, c.champion.name))

        selected = self._select_candidates(scored)
        if not selected:
            self._block(node, role, BLOCKED_SCORE_FLOOR)
            return

        prepared = self._prepare_children(node, role, selected)
        if not prepared:
            # Every pick was pruned; the reasons are in viability.unreachable_required
            node.branch_potential = leaf_branch_potential(node)
            return

        children = [self._build_child(node, role, child) for child in prepared]
        children.sort(key=lambda child: rank_key(child, self.rank_goal))
        node.children = children
        node.branch_potential = aggregate_branch_potential(node.children)

    def _select_candidates(self, scored: list[_Candidate]) -> list[_Candidate]:
        """Apply the score floor, relative pruning and the fallback backfill.

        ``scored`` must already be in rank order. At most ``max_branch``
        candidates come back, so no node ever expands more children.
        """
        kept = [c for c in scored if c.score >= self.min_candidate_score]
        below = [c for c in scored if c.score < self.min_candidate_score]

        if kept:
            top_score = kept[0].score
            if top_score > 0 and self.relative_score_ratio > 0:
                threshold = top_score * self.relative_score_ratio
                close = [c for c in kept if c.score >= threshold]
                self.stats.pruned_relative_candidate_score += len(kept) - len(close)
                kept = close
            self.stats.pruned_low_candidate_score += len(below)
            return kept[: self.max_branch]

        if not self.allow_fallback:
            self.stats.pruned_low_candidate_score += len(below)
            return []

        # Nothing clears the floor: re-admit the best below-floor picks
        # rather than dead-ending the role.
        backfill = below[: self.max_branch]
        for candidate in backfill:
            candidate.passes_min_score = False
        self.stats.pruned_low_candidate_score += len(below) - len(backfill)
        self.stats.fallback_nodes += 1
        self.stats.fallback_candidates_used += len(backfill)
        return backfill

    def _prepare_children(
        self,
        node: TreeNode,
        role: str,
        selected: list[_Candidate],
    ) -> list[_PreparedChild]:
        """Evaluate each child state and drop those with unreachable requirements."""
        prepared: list[_PreparedChild] = []
        blocking: set[str] = set()

        for candidate in selected:
            child_state = {**node.team_slots, role: candidate.champion.name}
            child_evaluation = self._evaluate(child_state)
            unreachable = self._unreachable_for(child_state, child_evaluation)
            if unreachable:
                self.stats.nodes_visited += 1
                self.stats.pruned_unreachable += 1
                blocking.update(unreachable)
                continue
            prepared.append(_PreparedChild(candidate, child_state, child_evaluation, unreachable))

        if blocking:
            # Keep check order stable regardless of which branch hit first
            merged = set(node.viability.unreachable_required) | blocking
            node.viability.unreachable_required = [
                name for name in node.checks if name in merged
            ]
        return prepared

    def _build_child(self, parent: TreeNode, role: str, child: _PreparedChild) -> TreeNode:
        candidate = child.candidate
        name = candidate.champion.name
        path = [
            *parent.path_rationale,
            f"{role} -> {name} (candidate score {candidate.score:g})",
            *(f"{name}: {reason}" for reason in candidate.rationale),
        ]
        if not candidate.passes_min_score:
            path.append(f"{name}: kept below score floor {self.min_candidate_score:g}")

        return self._build_node(
            child.team_state,
            child.evaluation,
            child.unreachable_required,
            depth=parent.depth + 1,
            path_rationale=path,
            candidate=candidate,
            added_role=role,
        )


def _require_positive_int(value, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field_name} must be an integer >= 1.", {field_name: value})
    return value


def generate_possibility_tree(
    team_state: Optional[Mapping[str, Optional[str]]],
    champion_lookup: Mapping[str, ChampionRecord],
    team_id: Optional[str] = None,
    role_order: Optional[Iterable[str]] = None,
    team_pools: Optional[Mapping[str, Mapping[str, Iterable[str]]]] = None,
    toggles: Optional[Mapping[str, bool]] = None,
    excluded_champions: Iterable[str] = (),
    weights: Optional[Mapping[str, float]] = None,
    max_depth: int = DEFAULT_TREE_SETTINGS["max_depth"],
    max_branch: int = DEFAULT_TREE_SETTINGS["max_branch"],
    min_candidate_score: float = DEFAULT_TREE_SETTINGS["min_candidate_score"],
    prune_unreachable_required: bool = True,
    rank_goal: str = RankGoal.VALID_END_STATES.value,
    next_role: Optional[str] = None,
    allow_fallback: bool = True,
    relative_score_ratio: float = DEFAULT_TREE_SETTINGS["relative_score_ratio"],
) -> TreeNode:
    """Generate the possibility tree of drafts reachable from ``team_state``.

    Each level fills the next open role (``next_role`` first if it is still
    open, then ``role_order``) with the best-ranked eligible candidates.
    Dead ends come back as leaves carrying ``viability.blocked_role`` and
    ``viability.blocked_reason``; only malformed input raises.

    Args:
        team_state: Starting slots (partial maps allowed)
        champion_lookup: Champion name -> ChampionRecord
        team_id: Team whose pools to use; None uses every catalog champion
        role_order: Draft order for open slots; missing slots are appended
        team_pools: team_id -> slot -> champion names
        toggles: Check name -> required flag
        excluded_champions: Champions unavailable anywhere in the tree
        weights: Tag -> candidate weight
        max_depth: Levels to expand, capped at the slot count
        max_branch: Children kept per node
        min_candidate_score: Candidate score floor
        prune_unreachable_required: Drop branches whose required checks can
            no longer be met
        rank_goal: "valid_end_states" or "candidate_score"
        next_role: Slot to fill before following role_order
        allow_fallback: Re-admit below-floor candidates instead of
            dead-ending a role
        relative_score_ratio: Drop candidates below this fraction of the
            node's best candidate score (0 disables)

    Returns:
        Root TreeNode with ``generation_stats`` populated

    Raises:
        ValidationError: On malformed state, slots, pools, limits or keys
    """
    normalized = normalize_team_state(team_state)
    order = normalize_role_order(role_order)
    preferred = normalize_slot_strict(next_role) if next_role is not None else None

    depth_limit = min(_require_positive_int(max_depth, "max_depth"), len(SLOTS))
    branch_limit = _require_positive_int(max_branch, "max_branch")

    if isinstance(min_candidate_score, bool) or not isinstance(min_candidate_score, Real):
        raise ValidationError("min_candidate_score must be a number.", {"value": min_candidate_score})
    if isinstance(relative_score_ratio, bool) or not isinstance(relative_score_ratio, Real) \
            or not 0 <= relative_score_ratio <= 1:
        raise ValidationError(
            "relative_score_ratio must be between 0 and 1.", {"value": relative_score_ratio}
        )
    try:
        goal = RankGoal(rank_goal)
    except ValueError:
        raise ValidationError(
            f"Unknown rank goal '{rank_goal}'.", {"value": rank_goal}
        ) from None

    if isinstance(excluded_champions, str):
        excluded_champions = [excluded_champions]
    excluded = frozenset(
        name.strip() for name in excluded_champions
        if isinstance(name, str) and name.strip()
    )

    generator = CandidateGenerator(champion_lookup, team_pools, team_id)
    builder = PossibilityTreeBuilder(
        champion_lookup=champion_lookup,
        generator=generator,
        role_order=order,
        next_role=preferred,
        toggles=merge_requirement_toggles(toggles),
        excluded=excluded,
        weights=merge_recommendation_weights(weights),
        max_depth=depth_limit,
        max_branch=branch_limit,
        min_candidate_score=min_candidate_score,
        prune_unreachable_required=bool(prune_unreachable_required),
        rank_goal=goal,
        allow_fallback=bool(allow_fallback),
        relative_score_ratio=relative_score_ratio,
    )
    return builder.build(normalized)
