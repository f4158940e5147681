"""
dockwm.core.events - Synchronous observer lists for workspaces and managers.

Both Workspace and WorkspaceManager expose the same subscription API:

    ws.on(WorkspaceEvent.WINDOW_DOCKED, callback)
    ws.off(WorkspaceEvent.WINDOW_DOCKED, callback)
    ws.on_all(callback)

Callbacks receive ``(event, payload, source)`` and run to completion inside
the call that triggered them, after the mutation has been committed.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from typing import Any

log = logging.getLogger(__name__)


class WorkspaceEvent(enum.Enum):
    """Events emitted by a Workspace."""

    # payload: WindowState
    WINDOW_ADDED = "window-added"

    # payload: window id (str)
    WINDOW_REMOVED = "window-removed"

    # payload: DockingRelationship
    WINDOW_DOCKED = "window-docked"

    # payload: window id (str) or None
    ACTIVE_WINDOW_CHANGED = "active-window-changed"


class ManagerEvent(enum.Enum):
    """Events emitted by a WorkspaceManager."""

    # payload: Workspace
    WORKSPACE_ADDED = "workspace-added"

    # payload: workspace id (str)
    WORKSPACE_REMOVED = "workspace-removed"

    # payload: workspace id (str) or None
    ACTIVE_WORKSPACE_CHANGED = "active-workspace-changed"


# callback(event, payload, source)
EventCallback = Callable[[enum.Enum, Any, Any], None]


class EventEmitter:
    """
    Per-instance subscriber registry for one event enum.

    Subclasses call ``super().__init__(EventEnum)`` and ``self._emit(...)``.
    A callback that raises is logged and skipped; it never aborts the
    operation that emitted the event.
    """

    def __init__(self, events: type[enum.Enum]) -> None:
        self._events = events
        self._subscribers: dict[enum.Enum, list[EventCallback]] = {
            ev: [] for ev in events
        }

    def on(self, event: enum.Enum, callback: EventCallback) -> None:
        """Register a callback for a specific event."""
        self._subscribers[event].append(callback)

    def off(self, event: enum.Enum, callback: EventCallback) -> None:
        """Unregister a callback."""
        try:
            self._subscribers[event].remove(callback)
        except ValueError:
            pass

    def on_all(self, callback: EventCallback) -> None:
        """Register a callback for ALL events."""
        for ev in self._events:
            self._subscribers[ev].append(callback)

    def off_all(self, callback: EventCallback) -> None:
        """Unregister a callback from every event it was registered for."""
        for ev in self._events:
            self.off(ev, callback)

    def listener_count(self, event: enum.Enum) -> int:
        return len(self._subscribers[event])

    def _emit(self, event: enum.Enum, payload: Any = None) -> None:
        # Copy so a callback may unsubscribe itself while being called.
        for cb in list(self._subscribers[event]):
            try:
                cb(event, payload, self)
            except Exception:
                log.exception("Error in event callback for %s", event.value)
