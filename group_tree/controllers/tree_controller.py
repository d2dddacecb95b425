from __future__ import annotations

from dataclasses import replace
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from group_tree.core.builder import GroupRecord, build_forest, flatten_forest
from group_tree.core.drop_policy import can_drag as _can_drag
from group_tree.core.drop_policy import can_drop as _can_drop
from group_tree.core.exceptions import GroupTreeError
from group_tree.core.interfaces import ActionInvoker, GroupRepository
from group_tree.core.models import TreeNode
from group_tree.core.queries import collect_ids, find_by_id
from group_tree.core.services.tree_editing_service import OperationResult, TreeEditingService

logger = logging.getLogger(__name__)

_DEFAULT_POLICY: Dict[str, Any] = {
    "allow_root_drag": False,
    "validate_after_edit": False,
    "sync_action": "GroupTree.SyncGroups",
}


class GroupTreeController:
    """Controller coordinating table UI actions with the editing service.

    Holds the current forest snapshot and the checkbox selection, and replaces
    the snapshot wholesale after every successful edit. Calls are expected to
    be serialized by the UI event loop.

    Parameters
    ----------
    repository : GroupRepository
        Source of the flat group records the forest is built from.
    action_invoker : ActionInvoker, optional
        Host action runner notified with the flattened forest after each
        successful edit.
    editing_service : TreeEditingService, optional
        Service performing the edits; built from the policy when omitted.
    policy : Mapping, optional
        Editing policy (``allow_root_drag``, ``validate_after_edit``,
        ``sync_action``). Read from :class:`ConfigManager` when omitted.

    Notes
    -----
    Routine validation failures never raise; methods return booleans or
    OperationResult objects.
    """

    def __init__(
        self,
        repository: GroupRepository,
        action_invoker: Optional[ActionInvoker] = None,
        editing_service: Optional[TreeEditingService] = None,
        policy: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if policy is None:
            from group_tree.config import ConfigManager
            policy = ConfigManager().get_tree_policy()
        self.policy: Dict[str, Any] = {**_DEFAULT_POLICY, **dict(policy)}

        self.repository = repository
        self.action_invoker = action_invoker
        self.editing_service = editing_service or TreeEditingService(
            validate_results=bool(self.policy.get("validate_after_edit"))
        )

        self._forest: List[TreeNode] = []
        self.selected_ids: List[str] = []

    # ---------------------------------------------------------------------------------
    # State
    # ---------------------------------------------------------------------------------

    @property
    def forest(self) -> List[TreeNode]:
        """Current forest snapshot. Replaced, never mutated, on each edit."""
        return self._forest

    def get_node(self, node_id: str) -> Optional[TreeNode]:
        return find_by_id(self._forest, node_id)

    def load(self) -> OperationResult:
        """Fetch all group records and rebuild the forest from them."""
        try:
            records = self.repository.fetch_all()
        except GroupTreeError as exc:
            logger.error("Failed to fetch groups: %s", exc)
            return OperationResult(False, "Failed to load groups.", {"error": str(exc)}, self._forest)

        self._forest = build_forest(records)
        self.selected_ids = []
        logger.info("Loaded %d groups", len(records))
        return OperationResult(True, f"Loaded {len(records)} groups.", {"count": len(records)}, self._forest)

    def get_group_record(self, node_id: str) -> Optional[GroupRecord]:
        """Resolve the external record behind a node, joined by name."""
        node = self.get_node(node_id)
        if node is None:
            return None
        try:
            return self.repository.fetch_by_name(node.name)
        except GroupTreeError as exc:
            logger.error("Failed to fetch group '%s': %s", node.name, exc)
            return None

    # ---------------------------------------------------------------------------------
    # Selection
    # ---------------------------------------------------------------------------------

    def select(self, node_id: str, selected: bool = True) -> List[str]:
        if selected:
            if node_id not in self.selected_ids and self.get_node(node_id) is not None:
                self.selected_ids.append(node_id)
        elif node_id in self.selected_ids:
            self.selected_ids.remove(node_id)
        return self.get_selection()

    def get_selection(self) -> List[str]:
        return list(self.selected_ids)

    def clear_selection(self) -> None:
        self.selected_ids = []

    # ---------------------------------------------------------------------------------
    # Drag and drop
    # ---------------------------------------------------------------------------------

    def can_drag(self, node_id: str) -> bool:
        node = self.get_node(node_id)
        if node is None:
            return False
        return _can_drag(node, allow_root_drag=bool(self.policy.get("allow_root_drag")))

    def can_drop(self, dragged_id: str, target_id: str, position: str) -> bool:
        dragged = self.get_node(dragged_id)
        target = self.get_node(target_id)
        if dragged is None or target is None:
            return False
        if not self.can_drag(dragged_id):
            return False
        return _can_drop(dragged, target, position, self._forest)

    def handle_drop(self, dragged_id: str, target_id: str, position: str) -> OperationResult:
        """Apply a drag release: validate the drop, then move the subtree."""
        if not self.can_drop(dragged_id, target_id, position):
            logger.info("Drop rejected: node=%s position=%s target=%s", dragged_id, position, target_id)
            return OperationResult(
                False,
                "Drop not allowed here.",
                {"dragged_id": dragged_id, "target_id": target_id, "position": position},
                self._forest,
            )
        return self._apply_edit(
            lambda: self.editing_service.move(self._forest, dragged_id, target_id, position)
        )

    # ---------------------------------------------------------------------------------
    # Delete
    # ---------------------------------------------------------------------------------

    def handle_delete(self, node_ids: List[str]) -> OperationResult:
        """Delete groups, promoting their children, and prune the selection."""
        ids = [i for i in (node_ids or []) if isinstance(i, str) and i]
        if not ids:
            return OperationResult(False, "No groups selected to delete", None, self._forest)
        result = self._apply_edit(lambda: self.editing_service.delete(self._forest, ids))
        if result.success:
            remaining = set(collect_ids(self._forest))
            self.selected_ids = [i for i in self.selected_ids if i in remaining]
        return result

    def handle_delete_selected(self) -> OperationResult:
        return self.handle_delete(self.get_selection())

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    def _apply_edit(self, mutate: Callable[[], OperationResult]) -> OperationResult:
        """Run an editing call, swap in its forest on success and notify the host.

        A failing host notification does not roll the edit back; the result
        message carries a warning instead.
        """
        result = mutate()
        if not result.success or result.forest is None:
            return result

        self._forest = result.forest
        warning = self._sync_to_host()
        if warning:
            return replace(result, message=f"{result.message} {warning}".strip())
        return result

    def _sync_to_host(self) -> Optional[str]:
        action = self.policy.get("sync_action")
        if self.action_invoker is None or not action:
            return None
        params = {"groups": flatten_forest(self._forest)}
        try:
            self.action_invoker.run_action(action, params)
        except Exception as exc:
            # Host adapters may raise anything; the edit stays applied either way
            logger.error("Host action '%s' failed: %s", action, exc, exc_info=not isinstance(exc, GroupTreeError))
            return "Warning: changes were not synchronised with the host."
        logger.debug("Host action '%s' ran with %d groups", action, len(params["groups"]))
        return None
