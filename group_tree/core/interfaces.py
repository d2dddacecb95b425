"""Collaborator interfaces for the group tree.

The engine and controller never talk to a host runtime directly. Group data
comes in through a :class:`GroupRepository`, and host-side actions (saving,
opening forms, running flows) go out through an :class:`ActionInvoker`. Both
are injected, so tests run against plain in-memory fakes.
"""

from __future__ import annotations

from pathlib import Path
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union, runtime_checkable

import yaml

from group_tree.core.builder import GroupRecord
from group_tree.core.exceptions import GroupSourceError

__all__ = [
    "GroupRepository",
    "ActionInvoker",
    "InMemoryGroupRepository",
    "YamlGroupRepository",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class GroupRepository(Protocol):
    """Source of flat group records."""

    def fetch_all(self) -> List[GroupRecord]:
        """Return every group record in source order.

        Raises:
            GroupSourceError: If the source cannot be read.
        """
        ...

    def fetch_by_name(self, name: str) -> Optional[GroupRecord]:
        """Return the record whose name matches, or None."""
        ...


@runtime_checkable
class ActionInvoker(Protocol):
    """Runs a named host action with keyword parameters."""

    def run_action(self, name: str, params: Dict[str, Any]) -> Any:
        """Run ``name`` on the host.

        Adapters should raise ActionInvocationError on failure; callers still
        treat any exception as a failed action.
        """
        ...


class InMemoryGroupRepository:
    """List-backed repository, used for seeding and tests."""

    def __init__(self, records: Optional[Iterable[GroupRecord]] = None) -> None:
        self._records: List[GroupRecord] = list(records or [])

    def fetch_all(self) -> List[GroupRecord]:
        return list(self._records)

    def fetch_by_name(self, name: str) -> Optional[GroupRecord]:
        for rec in self._records:
            if rec.name == name:
                return rec
        return None


class YamlGroupRepository(InMemoryGroupRepository):
    """Read-only repository backed by a YAML file holding a list of group mappings.

    Example file::

        - Name: Organization
        - Name: Platform Group
          Parent: Organization
          AppCount: 12
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self._path = Path(path)
        self._loaded = False

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        try:
            data = yaml.safe_load(self._path.read_text(encoding="utf-8")) or []
        except (OSError, yaml.YAMLError) as exc:
            raise GroupSourceError(f"Could not read group file {self._path}", cause=exc) from exc
        if not isinstance(data, list):
            raise GroupSourceError(f"Group file {self._path} must contain a list of groups")
        try:
            self._records = [GroupRecord.from_mapping(item) for item in data]
        except (AttributeError, TypeError, ValueError) as exc:
            raise GroupSourceError(f"Invalid group entry in {self._path}", cause=exc) from exc
        self._loaded = True
        logger.info("Loaded %d group records from %s", len(self._records), self._path)

    def fetch_all(self) -> List[GroupRecord]:
        self._ensure_loaded()
        return super().fetch_all()

    def fetch_by_name(self, name: str) -> Optional[GroupRecord]:
        self._ensure_loaded()
        return super().fetch_by_name(name)
