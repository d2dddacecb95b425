"""Post-condition checks for forest invariants.

Used as a test oracle and, optionally, by the editing service after each
edit. Never invoked on the hot path by default.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Optional, Set

from group_tree.core.models import Forest, TreeNode

__all__ = ["Violation", "find_violation", "validate"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Violation:
    """First broken invariant found in a forest.

    Attributes
    ----------
    node_id
        Id of the offending node.
    rule
        One of ``"root_level"``, ``"root_parent"``, ``"child_level"``,
        ``"child_parent"`` or ``"duplicate_id"``.
    expected, actual
        The value the invariant requires and the value found.
    """
    node_id: str
    rule: str
    expected: Any
    actual: Any

    def describe(self) -> str:
        return f"{self.rule}: node '{self.node_id}' expected {self.expected!r}, got {self.actual!r}"


def find_violation(forest: Forest, check_roots: bool = True) -> Optional[Violation]:
    """Return the first broken invariant, or None.

    With ``check_roots`` the top-level nodes must also be level 0 without a
    parent; turn it off to check a nested sub-list such as ``node.children``.
    """
    seen: Set[str] = set()

    def check_id(node: TreeNode) -> Optional[Violation]:
        if node.id in seen:
            return Violation(node.id, "duplicate_id", "unique", node.id)
        seen.add(node.id)
        return None

    def walk(parent: TreeNode) -> Optional[Violation]:
        for child in parent.children:
            found = check_id(child)
            if found:
                return found
            if child.level != parent.level + 1:
                return Violation(child.id, "child_level", parent.level + 1, child.level)
            if child.parent_id != parent.id:
                return Violation(child.id, "child_parent", parent.id, child.parent_id)
            found = walk(child)
            if found:
                return found
        return None

    for root in forest:
        found = check_id(root)
        if found:
            return found
        if check_roots and root.level != 0:
            return Violation(root.id, "root_level", 0, root.level)
        if check_roots and root.parent_id is not None:
            return Violation(root.id, "root_parent", None, root.parent_id)
        found = walk(root)
        if found:
            return found
    return None


def validate(forest: Forest) -> bool:
    """Return True when every parent/child pair is consistent; log the first failure.

    Only parent/child pairs and id uniqueness are checked, so a nested
    sub-list validates too. Use :func:`find_violation` for the root checks.
    """
    violation = find_violation(forest, check_roots=False)
    if violation is not None:
        logger.warning("Tree invariant violated: %s", violation.describe())
        return False
    return True
