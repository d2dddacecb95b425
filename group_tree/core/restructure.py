"""Move and delete-and-reparent engines.

Both entry points are pure: they take a forest and return a new list of root
nodes, replacing only the nodes on changed paths and sharing every untouched
subtree with the input. Invalid input (unknown ids, unknown positions)
degrades to "no change" instead of raising.
"""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from group_tree.core.models import DROP_POSITIONS, Forest, TreeNode
from group_tree.core.queries import (
    find_by_id,
    find_parent,
    recalculate_levels,
    restamp_levels,
)

__all__ = ["move_node", "delete_and_reparent", "remove_subtree"]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Path-copy helpers
# ---------------------------------------------------------------------------

def _without(nodes: Sequence[TreeNode], node_id: str) -> Tuple[List[TreeNode], bool]:
    out: List[TreeNode] = []
    changed = False
    for node in nodes:
        if node.id == node_id:
            changed = True
            continue
        kids, kids_changed = _without(node.children, node_id)
        if kids_changed:
            node = replace(node, children=tuple(kids))
            changed = True
        out.append(node)
    return out, changed


def _update(
    nodes: Sequence[TreeNode],
    node_id: str,
    fn: Callable[[TreeNode], TreeNode],
) -> List[TreeNode]:
    out: List[TreeNode] = []
    for node in nodes:
        if node.id == node_id:
            node = fn(node)
        elif node.children:
            kids = _update(node.children, node_id, fn)
            if any(new is not old for new, old in zip(kids, node.children)):
                node = replace(node, children=tuple(kids))
        out.append(node)
    return out


def remove_subtree(forest: Forest, node_id: str) -> List[TreeNode]:
    """Return ``forest`` with ``node_id`` and its whole subtree taken out."""
    remaining, _changed = _without(forest, node_id)
    return remaining


# ---------------------------------------------------------------------------
# Move engine
# ---------------------------------------------------------------------------

def move_node(forest: Forest, dragged_id: str, target_id: str, position: str) -> List[TreeNode]:
    """Move the subtree rooted at ``dragged_id`` relative to ``target_id``.

    ``position`` is ``"inside"`` (append as last child of the target) or
    ``"before"``/``"after"`` (sibling insertion next to the target, at root
    level when the target is a root). Legality is not checked here; callers
    run :func:`group_tree.core.drop_policy.can_drop` first.
    """
    if position not in DROP_POSITIONS:
        logger.debug("Move skipped: unknown position=%s", position)
        return list(forest)

    dragged = find_by_id(forest, dragged_id)
    if dragged is None:
        logger.debug("Move skipped: dragged node not found id=%s", dragged_id)
        return list(forest)

    remaining = remove_subtree(forest, dragged_id)

    # Target may have shifted, or vanished if it lived inside the dragged subtree
    target = find_by_id(remaining, target_id)
    if target is None:
        logger.debug("Move skipped: target node not found id=%s", target_id)
        return list(forest)

    if position == "inside":
        inserted = restamp_levels(dragged, target.level + 1, target.id)
        updated = _update(
            remaining,
            target.id,
            lambda t: replace(t, children=t.children + (inserted,)),
        )
    elif any(root.id == target_id for root in remaining):
        inserted = restamp_levels(dragged, 0, None)
        idx = [root.id for root in remaining].index(target_id)
        if position == "after":
            idx += 1
        updated = remaining[:idx] + [inserted] + remaining[idx:]
    else:
        parent = find_parent(remaining, target_id)
        if parent is None:
            return list(forest)
        inserted = restamp_levels(dragged, parent.level + 1, parent.id)

        def splice(p: TreeNode) -> TreeNode:
            idx = [c.id for c in p.children].index(target_id)
            if position == "after":
                idx += 1
            return replace(p, children=p.children[:idx] + (inserted,) + p.children[idx:])

        updated = _update(remaining, parent.id, splice)

    logger.debug("Moved node=%s %s target=%s", dragged_id, position, target_id)
    return recalculate_levels(updated)


# ---------------------------------------------------------------------------
# Delete-and-reparent engine
# ---------------------------------------------------------------------------

def _delete_one(forest: List[TreeNode], node_id: str) -> List[TreeNode]:
    node = find_by_id(forest, node_id)
    if node is None:
        logger.debug("Delete skipped: node no longer present id=%s", node_id)
        return forest

    parent = find_parent(forest, node_id)
    remaining = remove_subtree(forest, node_id)
    if not node.children:
        return remaining

    if parent is None:
        promoted_roots = [restamp_levels(c, 0, None) for c in node.children]
        return remaining + promoted_roots

    promoted = tuple(restamp_levels(c, parent.level + 1, parent.id) for c in node.children)
    return _update(remaining, parent.id, lambda p: replace(p, children=p.children + promoted))


def delete_and_reparent(forest: Forest, ids_to_delete: Optional[Iterable[str]]) -> List[TreeNode]:
    """Delete the given nodes, promoting their children to the nearest survivor.

    Children of a deleted node are appended, in order, after the existing
    children of that node's parent, or after the existing roots when the
    deleted node was a root. Nodes are processed deepest level first so that
    a deleted descendant is resolved before its deleted ancestor. Unknown or
    already-removed ids are skipped.
    """
    pending = [n for n in (find_by_id(forest, i) for i in (ids_to_delete or ())) if n is not None]
    # Stable sort keeps request order among nodes on the same level
    pending.sort(key=lambda n: n.level, reverse=True)

    current = list(forest)
    for node in pending:
        current = _delete_one(current, node.id)
    return current
