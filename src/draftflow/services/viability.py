"""Terminal validity and branch-potential bookkeeping for tree nodes."""
import math
from typing import Mapping, Optional

from draftflow.models.checks import RequiredSummary
from draftflow.models.requirements import RankGoal
from draftflow.models.tree import BranchPotential, GenerationStats, TreeNode, Viability
from draftflow.models.team_state import get_unfilled_slots


def build_viability(
    team_state: Mapping[str, Optional[str]],
    required_summary: RequiredSummary,
) -> Viability:
    remaining = len(get_unfilled_slots(team_state))
    complete = remaining == 0
    return Viability(
        remaining_steps=remaining,
        is_draft_complete=complete,
        is_terminal_valid=complete and required_summary.required_gaps == 0,
    )


def leaf_branch_potential(node: TreeNode) -> BranchPotential:
    """A leaf counts itself only when it is a valid finished draft."""
    if node.viability.is_terminal_valid:
        return BranchPotential(valid_leaf_count=1, best_leaf_score=node.score)
    return BranchPotential()


def aggregate_branch_potential(children: list[TreeNode]) -> BranchPotential:
    """Sum valid leaves and keep the best leaf score across the children."""
    scores = [
        child.branch_potential.best_leaf_score
        for child in children
        if child.branch_potential.best_leaf_score is not None
    ]
    return BranchPotential(
        valid_leaf_count=sum(child.branch_potential.valid_leaf_count for child in children),
        best_leaf_score=max(scores) if scores else None,
    )


def rank_key(node: TreeNode, rank_goal: RankGoal) -> tuple:
    """Sort key for sibling nodes; smaller sorts first.

    Names break every remaining tie so ordering is a total order.
    """
    candidate_score = node.candidate_score or 0
    name = node.added_champion or ""
    if rank_goal == RankGoal.VALID_END_STATES:
        best = node.branch_potential.best_leaf_score
        return (
            -node.branch_potential.valid_leaf_count,
            -(best if best is not None else -math.inf),
            -candidate_score,
            name,
        )
    return (-candidate_score, name)


def collect_tree_stats(root: TreeNode, stats: GenerationStats) -> GenerationStats:
    """Fill the counters that describe the returned tree.

    Search-time counters (visits, pruning, fallback) are left untouched.
    """
    stats.nodes_kept = 0
    stats.candidates_selected = 0
    stats.complete_draft_leaves = 0
    stats.incomplete_draft_leaves = 0
    stats.valid_leaves = 0
    stats.incomplete_leaves = 0

    for node in root.iter_nodes():
        stats.nodes_kept += 1
        stats.candidates_selected += len(node.children)
        if node.children:
            continue
        if node.viability.is_draft_complete:
            stats.complete_draft_leaves += 1
        else:
            stats.incomplete_draft_leaves += 1
        if node.branch_potential.valid_leaf_count > 0:
            stats.valid_leaves += 1
        else:
            stats.incomplete_leaves += 1
    return stats
