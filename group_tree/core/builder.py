"""Construction of the initial forest from flat group records, and the reverse.

Group sources deliver a flat list of records that reference their parent by
name. :func:`build_forest` turns that list into nested :class:`TreeNode`
objects with generated ids and top-down levels; :func:`flatten_forest` turns
a forest back into ``(name, parent_name, level)`` triples for a storage
collaborator.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from group_tree.core.models import Forest, TreeNode

__all__ = ["GroupRecord", "build_forest", "flatten_forest"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupRecord:
    """Flat group record as supplied by an external data source.

    Attributes
    ----------
    name
        Group name, used as the join key between records.
    parent
        Name of the parent group, or None for a top-level group.
    description, uuid, app_count, resource_count
        Payload copied onto the built node.
    """
    name: str
    parent: Optional[str] = None
    description: Optional[str] = None
    uuid: Optional[str] = None
    app_count: int = 0
    resource_count: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GroupRecord":
        """Build a record from either the host keys (``Name``, ``Parent``...) or snake_case keys."""
        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        name = pick("Name", "name")
        if not name:
            raise ValueError("Group record is missing a name")
        return cls(
            name=str(name),
            parent=pick("Parent", "parent"),
            description=pick("Description", "description"),
            uuid=pick("UUID", "uuid"),
            app_count=int(pick("AppCount", "app_count", default=0)),
            resource_count=int(pick("ResourceCount", "resource_count", default=0)),
        )


def _in_parent_cycle(idx: int, parent_idx_of: Dict[int, Optional[int]]) -> bool:
    seen = set()
    current = parent_idx_of.get(idx)
    while current is not None and current not in seen:
        if current == idx:
            return True
        seen.add(current)
        current = parent_idx_of.get(current)
    return False


def build_forest(records: Iterable[GroupRecord]) -> List[TreeNode]:
    """Build the initial forest from flat records.

    - Ids are ``group-1``, ``group-2``... in record order.
    - A record whose parent is absent from the batch (e.g. the host's
      ``"N/A"`` placeholder) becomes a root.
    - Children keep record order; levels are assigned top-down.
    - When a name repeats, children attach to the last record with that name.
    - A record whose parent chain loops back to itself is placed at the root.
    """
    items: Sequence[GroupRecord] = list(records)
    index_by_name: Dict[str, int] = {rec.name: idx for idx, rec in enumerate(items)}
    parent_idx_of: Dict[int, Optional[int]] = {
        idx: (index_by_name.get(rec.parent) if rec.parent else None)
        for idx, rec in enumerate(items)
    }

    roots: List[int] = []
    children_of: Dict[int, List[int]] = {}
    for idx, rec in enumerate(items):
        parent_idx = parent_idx_of[idx]
        if parent_idx is None:
            roots.append(idx)
            continue
        if _in_parent_cycle(idx, parent_idx_of):
            logger.warning("Group '%s' has a cyclic parent chain; placing it at root level", rec.name)
            roots.append(idx)
            continue
        children_of.setdefault(parent_idx, []).append(idx)

    def make(idx: int, level: int, parent_id: Optional[str]) -> TreeNode:
        rec = items[idx]
        node_id = f"group-{idx + 1}"
        return TreeNode(
            id=node_id,
            name=rec.name,
            level=level,
            parent_id=parent_id,
            children=tuple(make(c, level + 1, node_id) for c in children_of.get(idx, [])),
            description=rec.description or f"Group: {rec.name}",
            uuid=rec.uuid,
            app_count=rec.app_count or 0,
            resource_count=rec.resource_count or 0,
        )

    forest = [make(idx, 0, None) for idx in roots]
    logger.info("Built group forest: records=%d roots=%d", len(items), len(forest))
    return forest


def flatten_forest(forest: Forest) -> List[Tuple[str, Optional[str], int]]:
    """Return pre-order ``(name, parent_name, level)`` triples."""
    out: List[Tuple[str, Optional[str], int]] = []

    def walk(nodes: Sequence[TreeNode], parent_name: Optional[str]) -> None:
        for node in nodes:
            out.append((node.name, parent_name, node.level))
            walk(node.children, node.name)

    walk(forest, None)
    return out
