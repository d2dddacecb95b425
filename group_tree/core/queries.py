"""Read-only structural queries over a forest of :class:`TreeNode`.

All helpers are side-effect-free. Lookups are depth-first, pre-order, first
match wins; with unique ids (a forest invariant) results are unambiguous.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterator, List, Optional, Sequence

from group_tree.core.models import Forest, TreeNode

__all__ = [
    "find_by_id",
    "find_parent",
    "is_descendant",
    "recalculate_levels",
    "restamp_levels",
    "iter_nodes",
    "collect_ids",
    "siblings_of",
    "path_to",
]


def iter_nodes(forest: Forest) -> Iterator[TreeNode]:
    """Yield every node in display (pre-order) order."""
    stack = list(forest)[::-1]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def collect_ids(forest: Forest) -> List[str]:
    return [n.id for n in iter_nodes(forest)]


def find_by_id(forest: Forest, node_id: str) -> Optional[TreeNode]:
    for node in iter_nodes(forest):
        if node.id == node_id:
            return node
    return None


def find_parent(forest: Forest, node_id: str) -> Optional[TreeNode]:
    """Return the direct parent of ``node_id``.

    ``None`` when the id names a root or does not exist at all; use
    :func:`find_by_id` to tell the two apart.
    """
    for node in iter_nodes(forest):
        for child in node.children:
            if child.id == node_id:
                return node
    return None


def siblings_of(forest: Forest, node_id: str) -> Optional[Sequence[TreeNode]]:
    """Return the ordered sequence that holds ``node_id`` (root list included)."""
    if any(n.id == node_id for n in forest):
        return forest
    parent = find_parent(forest, node_id)
    return parent.children if parent is not None else None


def path_to(forest: Forest, node_id: str) -> List[TreeNode]:
    """Return the nodes from the containing root down to ``node_id``.

    Empty when the id is unknown.
    """

    def walk(nodes: Sequence[TreeNode], trail: List[TreeNode]) -> Optional[List[TreeNode]]:
        for node in nodes:
            here = trail + [node]
            if node.id == node_id:
                return here
            found = walk(node.children, here)
            if found is not None:
                return found
        return None

    return walk(forest, []) or []


def is_descendant(ancestor: TreeNode, node: TreeNode) -> bool:
    """Return True if ``node`` sits anywhere below ``ancestor`` (not itself)."""
    for child in ancestor.children:
        if child.id == node.id or is_descendant(child, node):
            return True
    return False


def restamp_levels(node: TreeNode, level: int, parent_id: Optional[str]) -> TreeNode:
    """Return ``node`` with its subtree re-stamped from ``level`` downward.

    Subtrees already carrying the right level and parent id are returned as
    the same objects.
    """
    children = tuple(restamp_levels(c, level + 1, node.id) for c in node.children)
    unchanged = (
        node.level == level
        and node.parent_id == parent_id
        and all(new is old for new, old in zip(children, node.children))
    )
    if unchanged:
        return node
    return replace(node, level=level, parent_id=parent_id, children=children)


def recalculate_levels(forest: Forest) -> List[TreeNode]:
    """Re-derive ``level`` and ``parent_id`` for every node from the nesting.

    Roots become level 0 without a parent. Idempotent: a second pass returns
    the very same node objects.
    """
    return [restamp_levels(root, 0, None) for root in forest]
