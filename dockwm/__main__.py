"""
dockwm - Entry point.

Run with:  python -m dockwm
"""

from __future__ import annotations

import enum
import logging
import sys
from typing import Any

from dockwm.config import settings
from dockwm.core.controller import VirtualWindowController, WindowDescriptor
from dockwm.core.errors import InvalidSnapshotError
from dockwm.core.events import EventCallback, ManagerEvent, WorkspaceEvent
from dockwm.core.persistence import WorkspacePersistence
from dockwm.core.shell import WorkspaceShell
from dockwm.core.window import WindowState
from dockwm.tiling.docking import DockingRelationship
from dockwm.tiling.workspace import Workspace
from dockwm.tiling.workspace_manager import WorkspaceManager, create_default_workspace

log = logging.getLogger("dockwm")


def setup_logging(level: str = settings.LOG_LEVEL) -> None:
    """
    Configure logging for dockwm. Logs go to stderr, the shell owns stdout.

    An unknown *level* name falls back to WARNING.
    """
    fmt = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.addHandler(handler)

    if isinstance(logging.getLevelName(level), int):
        root.setLevel(level)
    else:
        root.setLevel(logging.WARNING)
        log.warning("Unknown log level %r, using WARNING", level)


def create_autosave_handler(
    manager: WorkspaceManager,
    persistence: WorkspacePersistence,
) -> EventCallback:
    """
    Create a callback that writes the whole collection to disk after
    every change.

    Subscribe it to the manager and to every workspace (see
    attach_handlers); events of both kinds trigger a save.
    """

    def autosave_handler(event: enum.Enum, payload: Any, source: Any) -> None:
        log.debug("autosave after %s", event.value)
        persistence.save(manager.serialize())

    return autosave_handler


def create_controller_handler(controller: VirtualWindowController) -> EventCallback:
    """
    Create a callback that mirrors workspace windows into the controller.

    The handler reacts to:
        - WINDOW_ADDED:   registers the window with the controller.
        - WINDOW_DOCKED:  registers the docked window if it was new.
        - WINDOW_REMOVED: unregisters the window.
        - WORKSPACE_ADDED: registers the windows the new workspace holds.
    """

    def controller_handler(event: enum.Enum, payload: Any, source: Any) -> None:
        if event == WorkspaceEvent.WINDOW_ADDED:
            window: WindowState = payload
            controller.register_window(WindowDescriptor(window.id, window.title))

        elif event == WorkspaceEvent.WINDOW_DOCKED:
            relationship: DockingRelationship = payload
            window_id = relationship.source_window_id
            if controller.get_window_bounds(window_id) is None:
                window = source.get_window(window_id)
                controller.register_window(WindowDescriptor(window.id, window.title))
            controller.dock_window(
                window_id, relationship.target_window_id, relationship.direction
            )

        elif event == WorkspaceEvent.WINDOW_REMOVED:
            controller.unregister_window(payload)

        elif event == ManagerEvent.WORKSPACE_ADDED:
            for window in payload.windows:
                controller.register_window(WindowDescriptor(window.id, window.title))

    return controller_handler


def attach_handlers(manager: WorkspaceManager, *handlers: EventCallback) -> None:
    """
    Subscribe *handlers* to every event of the manager and of each of its
    workspaces, including workspaces added later.
    """

    def subscribe(workspace: Workspace) -> None:
        for handler in handlers:
            workspace.on_all(handler)

    def on_workspace_added(event: enum.Enum, workspace: Workspace, source: Any) -> None:
        subscribe(workspace)

    for workspace in manager.workspaces:
        subscribe(workspace)

    # Registered first so a new workspace is subscribed before other
    # handlers see the event.
    manager.on(ManagerEvent.WORKSPACE_ADDED, on_workspace_added)
    for handler in handlers:
        manager.on_all(handler)


def load_manager(persistence: WorkspacePersistence) -> WorkspaceManager:
    """Restore the persisted collection, or start from the default workspace."""
    manager = persistence.load_manager()
    if manager is None:
        log.info("No saved workspaces at %s, using the default workspace", persistence.path)
        manager = WorkspaceManager([create_default_workspace()])
    return manager


def main() -> None:
    setup_logging()

    persistence = WorkspacePersistence()
    try:
        manager = load_manager(persistence)
    except InvalidSnapshotError as e:
        log.error("Cannot start: %s", e)
        sys.exit(1)

    controller = VirtualWindowController()
    controller.initialize()
    for workspace in manager.workspaces:
        for window in workspace.windows:
            controller.register_window(WindowDescriptor(window.id, window.title))

    attach_handlers(
        manager,
        create_controller_handler(controller),
        create_autosave_handler(manager, persistence),
    )

    log.info(
        "dockwm ready: %d workspaces, active=%s, store=%s",
        manager.workspace_count,
        manager.active_workspace_id,
        persistence.path,
    )

    shell = WorkspaceShell(manager, controller, persistence)
    try:
        shell.run()
    except KeyboardInterrupt:
        log.info("Interrupted by user")


if __name__ == "__main__":
    main()
