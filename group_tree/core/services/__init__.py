"""High-level orchestration services.

Services are instantiated directly and injected into controllers.
"""

from __future__ import annotations

from .tree_editing_service import OperationResult, TreeEditingService  # noqa: F401

__all__: list[str] = [
    "OperationResult",
    "TreeEditingService",
]
