"""Service layer for structural edits on a group forest.

This module provides a UI-agnostic, testable service wrapping the pure
restructuring engine (:mod:`group_tree.core.restructure`) with result
reporting and logging.

Scope and guarantees:
- Operates purely in-memory on immutable forests, no I/O nor UI imports.
- Never mutates the forest it is given; a successful result carries the new
  forest, an unsuccessful one carries the input unchanged.
- Invalid operations return OperationResult(success=False, ...) with clear
  messaging, never raise.
- Drop legality is the caller's job (see :mod:`group_tree.core.drop_policy`);
  the service only reports ids it cannot resolve.

Examples
--------
Basic usage:

    service = TreeEditingService()
    result = service.move(forest, "1-2", "1-1", "before")
    if result.success:
        forest = result.forest
    else:
        print(result.message)

"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Dict, Iterable, List, Optional

from group_tree.core.models import DROP_POSITIONS, Forest, TreeNode
from group_tree.core.queries import collect_ids, find_by_id
from group_tree.core.restructure import delete_and_reparent, move_node
from group_tree.core.validation import find_violation


__all__ = ["OperationResult", "TreeEditingService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Result of a structural editing operation.

    Attributes
    ----------
    success
        Whether the operation completed successfully.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    forest
        The forest after the operation (unchanged input on failure), or None
        for results that do not carry a tree.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None
    forest: Optional[List[TreeNode]] = None


class TreeEditingService:
    """Encapsulates structural edit operations on a group forest.

    Parameters
    ----------
    validate_results : bool, default=False
        Run the invariant validator after every edit and log violations.
        Meant for debugging; the engine keeps the invariants by construction.
    """

    def __init__(self, validate_results: bool = False) -> None:
        self._validate_results = bool(validate_results)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def move(
        self,
        forest: Forest,
        dragged_id: str,
        target_id: str,
        position: str,
    ) -> OperationResult:
        """Move a node (with its subtree) before, after or inside a target node."""
        logger.info("Edit: move node=%s position=%s target=%s", dragged_id, position, target_id)
        details = {"dragged_id": dragged_id, "target_id": target_id, "position": position}

        if position not in DROP_POSITIONS:
            logger.warning("Edit FAIL: move unsupported_position=%s", position)
            return OperationResult(
                False,
                f"Unsupported drop position '{position}'.",
                {**details, "allowed": list(DROP_POSITIONS)},
                list(forest),
            )
        if find_by_id(forest, dragged_id) is None:
            logger.warning("Edit FAIL: move node_not_found node=%s", dragged_id)
            return OperationResult(False, f"Node not found for id '{dragged_id}'.", details, list(forest))
        if find_by_id(forest, target_id) is None:
            logger.warning("Edit FAIL: move target_not_found target=%s", target_id)
            return OperationResult(False, f"Target not found for id '{target_id}'.", details, list(forest))

        updated = move_node(forest, dragged_id, target_id, position)
        if updated == list(forest):
            logger.info("Edit noop: move node=%s position=%s target=%s", dragged_id, position, target_id)
            return OperationResult(False, "Move left the tree unchanged.", details, list(forest))

        self._check(updated, "move")
        logger.info("Edit OK: move node=%s position=%s target=%s", dragged_id, position, target_id)
        return OperationResult(True, "Moved group.", details, updated)

    def delete(self, forest: Forest, node_ids: Iterable[str]) -> OperationResult:
        """Delete nodes by id, promoting their children to the nearest surviving ancestor."""
        requested = list(node_ids or [])
        logger.info("Edit: delete count=%d", len(requested))

        before = set(collect_ids(forest))
        updated = delete_and_reparent(forest, requested)
        deleted = len(before) - len(collect_ids(updated))

        details = {"requested": requested, "deleted": deleted, "skipped": max(0, len(requested) - deleted)}
        if deleted <= 0:
            logger.info("Edit noop: delete deleted=0")
            return OperationResult(False, "No groups deleted.", details, list(forest))

        self._check(updated, "delete")
        logger.info("Edit OK: delete deleted=%d skipped=%d", details["deleted"], details["skipped"])
        return OperationResult(True, "Deleted groups.", details, updated)

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _check(self, forest: Forest, operation: str) -> None:
        if not self._validate_results:
            return
        violation = find_violation(forest)
        if violation is not None:
            logger.error("Edit produced inconsistent tree: operation=%s %s", operation, violation.describe())
