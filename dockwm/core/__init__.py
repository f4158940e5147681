"""
dockwm.core - Shared types and the collaborators around the engine.

This package contains:
    - errors      : Exception hierarchy rooted at DockWMError
    - events      : Event enums and the EventEmitter observer lists
    - window      : The WindowState record kept by workspaces
    - controller  : WindowController interface and the virtual controller
    - persistence : JSON storage for the workspace collection
    - commands    : CommandDispatcher and the built-in shell commands
    - shell       : WorkspaceShell - interactive read-eval-print loop

Only the dependency-free modules are re-exported here; controller,
persistence, commands and shell build on dockwm.tiling and are imported
from their own modules.
"""

from dockwm.core.errors import (
    DockFailureError,
    DockWMError,
    DuplicateWindowError,
    DuplicateWorkspaceError,
    InvalidSnapshotError,
    UnknownWindowError,
    UnknownWorkspaceError,
)
from dockwm.core.events import EventEmitter, ManagerEvent, WorkspaceEvent
from dockwm.core.window import WindowState

__all__ = [
    "DockWMError", "UnknownWindowError", "DuplicateWindowError",
    "UnknownWorkspaceError", "DuplicateWorkspaceError",
    "DockFailureError", "InvalidSnapshotError",
    "EventEmitter", "ManagerEvent", "WorkspaceEvent",
    "WindowState",
]
