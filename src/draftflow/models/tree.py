"""Possibility tree node models."""

from dataclasses import asdict, dataclass, field
from typing import Optional

from draftflow.models.checks import CheckResult, MissingNeeds, RequiredSummary


@dataclass
class Viability:
    """Whether a node is, or can still become, a valid finished draft."""

    remaining_steps: int = 0  # Open slots at this node
    is_draft_complete: bool = False
    is_terminal_valid: bool = False
    unreachable_required: list[str] = field(default_factory=list)
    blocked_role: Optional[str] = None
    # "no_eligible_champions_for_role", "top_threat_filter",
    # or "candidate_score_floor". Left None when every pick was pruned as
    # unreachable; unreachable_required then lists the blocking checks.
    blocked_reason: Optional[str] = None
    fallback_applied: bool = False


@dataclass
class BranchPotential:
    """Terminal-valid completions reachable beneath a node."""

    valid_leaf_count: int = 0
    best_leaf_score: Optional[int] = None


@dataclass
class GenerationStats:
    """Search counters, reported on the root only."""

    nodes_visited: int = 0
    nodes_kept: int = 0
    candidate_generation_calls: int = 0
    candidates_evaluated: int = 0
    candidates_selected: int = 0
    pruned_unreachable: int = 0
    pruned_low_candidate_score: int = 0
    pruned_relative_candidate_score: int = 0
    fallback_candidates_used: int = 0
    fallback_nodes: int = 0
    complete_draft_leaves: int = 0
    incomplete_draft_leaves: int = 0
    valid_leaves: int = 0
    incomplete_leaves: int = 0


@dataclass
class TreeNode:
    """One team state in the possibility tree.

    The tree is built once and handed back as-is; callers that want to act
    on a node copy its ``team_slots`` instead of mutating it.
    """

    depth: int
    team_slots: dict[str, Optional[str]]
    score: int
    checks: dict[str, CheckResult]
    missing_needs: MissingNeeds
    required_summary: RequiredSummary
    viability: Viability
    added_role: Optional[str] = None
    added_champion: Optional[str] = None
    candidate_score: Optional[float] = None
    passes_min_score: Optional[bool] = None
    rationale: list[str] = field(default_factory=list)
    path_rationale: list[str] = field(default_factory=list)
    branch_potential: BranchPotential = field(default_factory=BranchPotential)
    children: list["TreeNode"] = field(default_factory=list)
    generation_stats: Optional[GenerationStats] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def iter_nodes(self):
        """Yield this node and every descendant, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> dict:
        """Serialize the subtree rooted here for JSON responses."""
        return {
            "depth": self.depth,
            "team_slots": dict(self.team_slots),
            "added_role": self.added_role,
            "added_champion": self.added_champion,
            "candidate_score": self.candidate_score,
            "passes_min_score": self.passes_min_score,
            "rationale": list(self.rationale),
            "score": self.score,
            "checks": {
                name: {**asdict(result), "status": result.status}
                for name, result in self.checks.items()
            },
            "missing_needs": asdict(self.missing_needs),
            "required_summary": asdict(self.required_summary),
            "path_rationale": list(self.path_rationale),
            "viability": asdict(self.viability),
            "branch_potential": asdict(self.branch_potential),
            "children": [child.to_dict() for child in self.children],
            **(
                {"generation_stats": asdict(self.generation_stats)}
                if self.generation_stats is not None
                else {}
            ),
        }
