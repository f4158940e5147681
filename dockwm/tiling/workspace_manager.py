"""
dockwm.tiling.workspace_manager - Registry of workspaces.

The WorkspaceManager owns every Workspace, keyed by id, and tracks which
one is active. It never touches window state directly: that is delegated
to each Workspace.

Responsibilities:
    - Register / remove workspaces (ids are unique).
    - Track the active workspace and fall back to the next one when the
      active workspace is removed.
    - Emit events when the set of workspaces or the active one changes.
    - Serialize / deserialize the whole collection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Optional

from dockwm.core.errors import DuplicateWorkspaceError, UnknownWorkspaceError
from dockwm.core.events import EventEmitter, ManagerEvent
from dockwm.core.window import WindowState
from dockwm.tiling.tree import DockTree
from dockwm.tiling.workspace import Workspace

log = logging.getLogger(__name__)


# JSON form of the collection (see WorkspaceManager.serialize)
WorkspaceCollectionSnapshot = dict[str, Any]


DEFAULT_WORKSPACE_ID = "default"


def create_default_workspace() -> Workspace:
    """A single-window workspace used when nothing has been persisted yet."""
    welcome = WindowState(id="welcome", title="Welcome")
    return Workspace(
        ws_id=DEFAULT_WORKSPACE_ID,
        name="Default Workspace",
        tree=DockTree.from_leaf(welcome.id),
        windows=[welcome],
    )


class WorkspaceManager(EventEmitter):
    """
    Manages all the workspaces of the system.

    Workspaces are kept in registration order; that order decides which
    workspace becomes active when the active one is removed.
    """

    def __init__(
        self,
        workspaces: Iterable[Workspace] = (),
        active_workspace_id: str | None = None,
    ) -> None:
        super().__init__(ManagerEvent)

        self._workspaces: dict[str, Workspace] = {}
        for ws in workspaces:
            self._assert_not_registered(ws.id)
            self._workspaces[ws.id] = ws

        self._active_id: str | None = None
        if active_workspace_id:
            if active_workspace_id not in self._workspaces:
                raise UnknownWorkspaceError(active_workspace_id)
            self._active_id = active_workspace_id
        else:
            self._active_id = next(iter(self._workspaces), None)

        log.info(
            "WorkspaceManager: %d workspaces, active=%s",
            len(self._workspaces),
            self._active_id,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def workspace_count(self) -> int:
        return len(self._workspaces)

    @property
    def workspace_ids(self) -> list[str]:
        return list(self._workspaces)

    @property
    def workspaces(self) -> list[Workspace]:
        return list(self._workspaces.values())

    def get_workspace(self, ws_id: str) -> Optional[Workspace]:
        """Get a workspace by id, or None."""
        return self._workspaces.get(ws_id)

    def require_workspace(self, ws_id: str) -> Workspace:
        """
        Get a workspace by id.

        Raises:
            UnknownWorkspaceError: no workspace has that id.
        """
        ws = self._workspaces.get(ws_id)
        if ws is None:
            raise UnknownWorkspaceError(ws_id)
        return ws

    @property
    def active_workspace_id(self) -> Optional[str]:
        return self._active_id

    @property
    def active_workspace(self) -> Optional[Workspace]:
        if self._active_id is None:
            return None
        return self._workspaces.get(self._active_id)

    def find_window_workspace(self, window_id: str) -> Optional[Workspace]:
        """Return the first workspace that has *window_id* registered, or None."""
        for ws in self._workspaces.values():
            if ws.contains(window_id):
                return ws
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def set_active_workspace(self, ws_id: str | None) -> None:
        """
        Activate a workspace (None or "" clears the active workspace).

        Raises:
            UnknownWorkspaceError: *ws_id* is not registered.
        """
        if ws_id and ws_id not in self._workspaces:
            log.warning("set_active_workspace: ws %s does not exist", ws_id)
            raise UnknownWorkspaceError(ws_id)
        self._update_active(ws_id or None)

    def add_workspace(self, workspace: Workspace, activate: bool = False) -> None:
        """
        Register a workspace.

        It becomes active when *activate* is True or when no workspace was
        active before.

        Raises:
            DuplicateWorkspaceError: the id is already registered.
        """
        self._assert_not_registered(workspace.id)
        self._workspaces[workspace.id] = workspace
        log.info("+WS %s (%s)", workspace.id, workspace.name)
        self._emit(ManagerEvent.WORKSPACE_ADDED, workspace)

        if activate or self._active_id is None:
            self._update_active(workspace.id)

    def remove_workspace(self, ws_id: str) -> bool:
        """
        Remove a workspace.

        If it was active, the first remaining workspace becomes active
        (or none).

        Returns:
            True if removed, False if it was not registered.
        """
        if self._workspaces.pop(ws_id, None) is None:
            return False

        log.info("-WS %s", ws_id)
        self._emit(ManagerEvent.WORKSPACE_REMOVED, ws_id)

        if self._active_id == ws_id:
            self._update_active(next(iter(self._workspaces), None))
        return True

    def _update_active(self, ws_id: str | None) -> None:
        if self._active_id == ws_id:
            return
        old = self._active_id
        self._active_id = ws_id
        log.info("ACTIVE ws %s -> ws %s", old, ws_id)
        self._emit(ManagerEvent.ACTIVE_WORKSPACE_CHANGED, ws_id)

    def _assert_not_registered(self, ws_id: str) -> None:
        if ws_id in self._workspaces:
            log.warning("workspace %s is already registered", ws_id)
            raise DuplicateWorkspaceError(ws_id)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def serialize(self) -> WorkspaceCollectionSnapshot:
        snapshot: WorkspaceCollectionSnapshot = {}
        if self._active_id is not None:
            snapshot["activeWorkspaceId"] = self._active_id
        snapshot["workspaces"] = [ws.serialize() for ws in self._workspaces.values()]
        return snapshot

    @classmethod
    def deserialize(cls, snapshot: WorkspaceCollectionSnapshot) -> WorkspaceManager:
        active_id = snapshot.get("activeWorkspaceId")
        workspaces = [Workspace.deserialize(ws) for ws in snapshot["workspaces"]]
        manager = cls(workspaces, active_id)
        if not active_id:
            manager._active_id = None
        return manager

    # ------------------------------------------------------------------
    # Debug
    # ------------------------------------------------------------------
    def dump_state(self) -> str:
        lines = [
            "=" * 60,
            f"  WorkspaceManager: {len(self._workspaces)} workspaces",
            f"  Active: {self._active_id}",
            "=" * 60,
        ]
        for ws in self._workspaces.values():
            lines.append(ws.dump_state())
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"WorkspaceManager(workspaces={len(self._workspaces)}, "
            f"active={self._active_id!r})"
        )
