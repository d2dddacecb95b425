"""Top-level package for the group tree restructuring engine.

Front-ends (table widgets, host integrations) should only depend on the
public API exposed here rather than importing internal modules directly.
"""

from .core.models import DROP_POSITIONS, DropPosition, TreeNode  # re-export for convenience
from .core.queries import find_by_id, find_parent, is_descendant, recalculate_levels
from .core.drop_policy import can_drag, can_drop
from .core.restructure import delete_and_reparent, move_node
from .core.validation import validate

__all__: list[str] = [
    "TreeNode",
    "DropPosition",
    "DROP_POSITIONS",
    "find_by_id",
    "find_parent",
    "is_descendant",
    "recalculate_levels",
    "can_drag",
    "can_drop",
    "move_node",
    "delete_and_reparent",
    "validate",
]
