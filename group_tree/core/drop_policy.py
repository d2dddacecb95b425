"""Drop-legality policy for drag-and-drop reorganisation.

Decides whether a proposed move is structurally legal. The move engine does
not repeat these checks, so callers must consult :func:`can_drop` first.
"""

from __future__ import annotations

import logging

from group_tree.core.models import DROP_POSITIONS, Forest, TreeNode
from group_tree.core.queries import is_descendant, siblings_of

__all__ = ["can_drag", "can_drop"]

logger = logging.getLogger(__name__)


def can_drag(node: TreeNode, allow_root_drag: bool = False) -> bool:
    """Return True if ``node`` may be picked up at all.

    Root groups stay anchored unless ``allow_root_drag`` is set.
    """
    return allow_root_drag or node.level > 0


def can_drop(
    dragged: TreeNode,
    target: TreeNode,
    position: str,
    forest: Forest,
) -> bool:
    """Return True if dropping ``dragged`` at ``position`` of ``target`` is legal.

    Rejects self-drops, drops that would create a cycle and drops that leave
    the node exactly where it already sits. ``forest`` supplies the sibling
    order for the before/after neighbour check.
    """
    if position not in DROP_POSITIONS:
        logger.debug("Drop rejected: unknown position=%s", position)
        return False
    if dragged.id == target.id:
        logger.debug("Drop rejected: self drop node=%s", dragged.id)
        return False
    if is_descendant(dragged, target):
        logger.debug("Drop rejected: cycle dragged=%s target=%s", dragged.id, target.id)
        return False

    if position == "inside":
        if dragged.parent_id == target.id:
            logger.debug("Drop rejected: already child dragged=%s target=%s", dragged.id, target.id)
            return False
        return True

    if dragged.parent_id == target.parent_id:
        siblings = siblings_of(forest, target.id)
        if siblings is not None:
            ids = [s.id for s in siblings]
            if dragged.id in ids:
                # Only the immediate neighbour counts as a no-op
                offset = -1 if position == "before" else 1
                if ids.index(dragged.id) == ids.index(target.id) + offset:
                    logger.debug(
                        "Drop rejected: same position dragged=%s %s target=%s",
                        dragged.id, position, target.id,
                    )
                    return False
    return True
