"""Controllers mediating between the table UI and the editing services."""

from .tree_controller import GroupTreeController

__all__: list[str] = ["GroupTreeController"]
