"""Caller-side helpers for walking a generated possibility tree.

Nodes are addressed by dot-separated child index paths: the root is "0",
its second child "0.1", that child's first child "0.1.0". These ids are a
convention over ``TreeNode.children``; the generator never stores them.
"""
from typing import Iterator, NamedTuple, Optional

from draftflow.errors import ValidationError
from draftflow.models.team_state import TeamState
from draftflow.models.tree import TreeNode
from draftflow.utils.role_normalizer import SLOTS

ROOT_NODE_ID = "0"


class FlatNode(NamedTuple):
    id: str
    parent_id: Optional[str]
    depth: int
    node: TreeNode


def get_parent_node_id(node_id: str = ROOT_NODE_ID) -> Optional[str]:
    """Id of the parent node, or None for the root."""
    if node_id == ROOT_NODE_ID:
        return None
    parts = node_id.split(".")
    parts.pop()
    return ".".join(parts) or ROOT_NODE_ID


def flatten_tree(
    node: TreeNode,
    node_id: str = ROOT_NODE_ID,
    parent_id: Optional[str] = None,
) -> Iterator[FlatNode]:
    """Yield every node with its id, parent id and depth, pre-order."""
    yield FlatNode(node_id, parent_id, node.depth, node)
    for index, child in enumerate(node.children):
        yield from flatten_tree(child, f"{node_id}.{index}", node_id)


def find_node(root: TreeNode, node_id: str) -> TreeNode:
    """Resolve a node id against the tree.

    Raises:
        ValidationError: If the id is malformed or points past the tree
    """
    parts = node_id.split(".") if isinstance(node_id, str) else []
    if not parts or parts[0] != ROOT_NODE_ID:
        raise ValidationError(f"Node id '{node_id}' must start at the root '0'.", {"node_id": node_id})

    node = root
    for part in parts[1:]:
        if not part.isdigit() or int(part) >= len(node.children):
            raise ValidationError(f"Node id '{node_id}' does not exist.", {"node_id": node_id})
        node = node.children[int(part)]
    return node


def apply_node(node: TreeNode) -> TeamState:
    """Team state to adopt when a caller picks this node; a copy, never the node's own."""
    return dict(node.team_slots)


def node_matches_search(node: TreeNode, query: str = "", slots=SLOTS) -> bool:
    """Case-insensitive match on the added pick and every slot's champion."""
    normalized = query.strip().lower()
    if not normalized:
        return True
    parts = [
        node.added_role or "",
        node.added_champion or "",
        *(node.team_slots.get(slot) or "" for slot in slots),
    ]
    return normalized in " ".join(parts).lower()


def node_passes_filters(
    node: TreeNode,
    min_score: float = 0,
    query: str = "",
    valid_leaves_only: bool = False,
) -> bool:
    if valid_leaves_only and not (
        node.viability.is_terminal_valid or node.branch_potential.valid_leaf_count > 0
    ):
        return False
    return node.score >= min_score and node_matches_search(node, query)


def collect_visible_node_ids(
    root: TreeNode,
    min_score: float = 0,
    query: str = "",
    valid_leaves_only: bool = False,
) -> set[str]:
    """Ids of nodes to show under the given filters.

    A node stays visible when it passes or any descendant does, so matches
    are always shown with their full path. The root is always visible.
    """
    visible: set[str] = set()

    def visit(node: TreeNode, node_id: str) -> bool:
        has_visible_child = False
        for index, child in enumerate(node.children):
            if visit(child, f"{node_id}.{index}"):
                has_visible_child = True
        shown = (
            node_id == ROOT_NODE_ID
            or has_visible_child
            or node_passes_filters(node, min_score, query, valid_leaves_only)
        )
        if shown:
            visible.add(node_id)
        return shown

    visit(root, ROOT_NODE_ID)
    return visible
