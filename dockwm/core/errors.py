"""
dockwm.core.errors - Exceptions raised by the docking engine.

Every failure in the core is an expected, catchable condition. Operations
raise before touching any state, so a caught error always leaves the
Workspace / WorkspaceManager exactly as it was.
"""

from __future__ import annotations


class DockWMError(Exception):
    """Base class for all dockwm errors."""


class UnknownWindowError(DockWMError, LookupError):
    """A window id is not registered in the workspace."""

    def __init__(self, window_id: str, message: str | None = None) -> None:
        self.window_id = window_id
        super().__init__(message or f"Unknown window '{window_id}'.")


class DuplicateWindowError(DockWMError):
    """A window id is already registered in the workspace."""

    def __init__(self, window_id: str) -> None:
        self.window_id = window_id
        super().__init__(f"Window '{window_id}' already exists in workspace.")


class UnknownWorkspaceError(DockWMError, LookupError):
    """A workspace id is not registered in the manager."""

    def __init__(self, workspace_id: str) -> None:
        self.workspace_id = workspace_id
        super().__init__(f"Unknown workspace '{workspace_id}'.")


class DuplicateWorkspaceError(DockWMError):
    """A workspace id is already registered in the manager."""

    def __init__(self, workspace_id: str) -> None:
        self.workspace_id = workspace_id
        super().__init__(f"Workspace '{workspace_id}' is already registered.")


class DockFailureError(DockWMError):
    """The docking engine could not place the window."""


class InvalidSnapshotError(DockWMError, ValueError):
    """A persisted snapshot does not have the expected structure."""
