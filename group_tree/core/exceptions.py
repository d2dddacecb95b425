"""Exception classes for the collaborator boundary.

The restructuring engine itself never raises for invalid input. These
exceptions are raised by adapters talking to external systems (group
sources, host actions) and are caught by the controller, which turns them
into unsuccessful OperationResults.
"""

from __future__ import annotations

from typing import Optional


class GroupTreeError(Exception):
    """Base exception for all group tree errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{super().__str__()} (caused by {type(self.cause).__name__}: {self.cause})"
        return super().__str__()


class GroupSourceError(GroupTreeError):
    """Raised when group records cannot be fetched or parsed."""
    pass


class ActionInvocationError(GroupTreeError):
    """Raised by ActionInvoker adapters when a host action fails."""

    def __init__(self, message: str, action: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, cause)
        self.action = action
