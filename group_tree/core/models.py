"""Shared data structures used across the group tree core.

This module is intentionally free of UI / I/O code so that the contained
objects can be reused in any context (unit-tests, controllers, adapters).

Nodes are frozen: structural edits never mutate a node in place, they build
replacement nodes with :func:`dataclasses.replace` along the changed path and
share every untouched subtree with the previous forest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Sequence, Tuple

__all__ = [
    "TreeNode",
    "Forest",
    "DropPosition",
    "DROP_POSITIONS",
    "forest_from_dicts",
    "forest_to_dicts",
]

DropPosition = Literal["before", "after", "inside"]
DROP_POSITIONS: Tuple[str, ...] = ("before", "after", "inside")


@dataclass(frozen=True)
class TreeNode:
    """One group in the hierarchy.

    Attributes
    ----------
    id
        Opaque identifier, unique across the whole forest.
    name
        Display label. Also the join key to the external group record.
    level
        Zero-based depth; roots are 0 and every child is ``parent.level + 1``.
    parent_id
        Id of the direct parent, ``None`` for roots.
    children
        Ordered child nodes (display order).
    description, uuid, app_count, resource_count
        Opaque payload carried through every structural operation unchanged.
    """

    id: str
    name: str
    level: int = 0
    parent_id: Optional[str] = None
    children: Tuple["TreeNode", ...] = ()
    description: Optional[str] = None
    uuid: Optional[str] = None
    app_count: Optional[int] = None
    resource_count: Optional[int] = None

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    # ------------------------------------------------------------------
    # Plain-data boundary
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TreeNode":
        """Build a node (and its subtree) from plain UI data.

        Accepts the camelCase keys used by the table layer. UI-only flags such
        as ``isExpanded`` or ``isDragging`` are ignored.
        """
        children = tuple(cls.from_dict(c) for c in (data.get("children") or ()))
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            level=int(data.get("level", 0) or 0),
            parent_id=data.get("parentId"),
            children=children,
            description=data.get("description"),
            uuid=data.get("uuid"),
            app_count=data.get("appCount"),
            resource_count=data.get("resourceCount"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return plain data in the shape accepted by :meth:`from_dict`."""
        out: Dict[str, Any] = {"id": self.id, "name": self.name, "level": self.level}
        if self.parent_id is not None:
            out["parentId"] = self.parent_id
        if self.description is not None:
            out["description"] = self.description
        if self.uuid is not None:
            out["uuid"] = self.uuid
        if self.app_count is not None:
            out["appCount"] = self.app_count
        if self.resource_count is not None:
            out["resourceCount"] = self.resource_count
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out

    def __repr__(self) -> str:
        return f"TreeNode(id={self.id!r}, name={self.name!r}, level={self.level}, children={len(self.children)})"


Forest = Sequence[TreeNode]


def forest_from_dicts(items: Iterable[Mapping[str, Any]]) -> List[TreeNode]:
    return [TreeNode.from_dict(item) for item in items]


def forest_to_dicts(forest: Forest) -> List[Dict[str, Any]]:
    return [node.to_dict() for node in forest]
