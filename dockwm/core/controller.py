"""
dockwm.core.controller - Window controller interface.

A controller is the bridge between the docking engine and whatever
actually shows windows. The engine never calls it; front ends (the shell)
do, after a core mutation has been committed.

Only an in-memory VirtualWindowController ships here: it tracks window
bounds and focus without touching any real OS window.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from dockwm.config import settings
from dockwm.core.errors import UnknownWindowError
from dockwm.tiling.docking import DockDirection
from dockwm.tiling.rect import Rect

log = logging.getLogger(__name__)


DEFAULT_BOUNDS = Rect(*settings.DEFAULT_WINDOW_BOUNDS)


@dataclass(frozen=True, slots=True)
class WindowDescriptor:
    """What a controller reports about a window."""

    id: str
    title: str


@dataclass(slots=True)
class ManagedWindow:
    id: str
    title: str
    bounds: Rect

    @property
    def descriptor(self) -> WindowDescriptor:
        return WindowDescriptor(self.id, self.title)


@dataclass(slots=True)
class VirtualControllerState:
    """Copy of a VirtualWindowController's state, for inspection."""

    windows: list[ManagedWindow] = field(default_factory=list)
    focused_window_id: Optional[str] = None
    persisted_workspaces: list[dict[str, Any]] = field(default_factory=list)


# ============================================================================
# WindowController (abstract base)
# ============================================================================
class WindowController(abc.ABC):
    """
    Abstract interface for a window controller.

    Every operation has a no-op default so a controller only overrides
    what its platform supports.
    """

    @property
    @abc.abstractmethod
    def platform(self) -> str:
        """Name of the platform this controller drives."""
        ...

    def initialize(self) -> None:
        """Prepare the controller. No-op by default."""

    def list_windows(self) -> list[WindowDescriptor]:
        return []

    def focus_window(self, window_id: str) -> None:
        pass

    def move_window(self, window_id: str, bounds: Rect) -> None:
        pass

    def dock_window(self, window_id: str, target_id: str, direction: DockDirection) -> None:
        pass

    def persist_workspace(self, snapshot: dict[str, Any]) -> None:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(platform={self.platform!r})"


# ============================================================================
# VirtualWindowController
# ============================================================================
class VirtualWindowController(WindowController):
    """
    Controller that keeps windows in memory.

    Used by the shell and by tests. Operations on windows that were not
    registered with register_window() raise UnknownWindowError.
    """

    def __init__(self) -> None:
        self._windows: dict[str, ManagedWindow] = {}
        self._focused_id: Optional[str] = None
        self._persisted: list[dict[str, Any]] = []

    @property
    def platform(self) -> str:
        return "virtual"

    @property
    def focused_window_id(self) -> Optional[str]:
        return self._focused_id

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register_window(
        self,
        descriptor: WindowDescriptor,
        bounds: Rect = DEFAULT_BOUNDS,
    ) -> None:
        self._windows[descriptor.id] = ManagedWindow(descriptor.id, descriptor.title, bounds)
        log.debug("virtual +WIN %s %s", descriptor.id, bounds)

    def unregister_window(self, window_id: str) -> None:
        self._windows.pop(window_id, None)
        if self._focused_id == window_id:
            self._focused_id = None

    def clear(self) -> None:
        self._windows.clear()
        self._focused_id = None
        self._persisted.clear()

    # ------------------------------------------------------------------
    # WindowController
    # ------------------------------------------------------------------
    def list_windows(self) -> list[WindowDescriptor]:
        return [w.descriptor for w in self._windows.values()]

    def focus_window(self, window_id: str) -> None:
        self._ensure_window(window_id)
        self._focused_id = window_id
        log.info("virtual focus -> %s", window_id)

    def move_window(self, window_id: str, bounds: Rect) -> None:
        window = self._ensure_window(window_id)
        window.bounds = bounds
        log.info("virtual move %s -> %s", window_id, bounds)

    def dock_window(self, window_id: str, target_id: str, direction: DockDirection) -> None:
        # Nothing to show for a virtual dock; both windows must exist though.
        self._ensure_window(window_id)
        self._ensure_window(target_id)

    def persist_workspace(self, snapshot: dict[str, Any]) -> None:
        self._persisted.append(snapshot)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def get_window_bounds(self, window_id: str) -> Optional[Rect]:
        window = self._windows.get(window_id)
        return window.bounds if window is not None else None

    def get_state(self) -> VirtualControllerState:
        return VirtualControllerState(
            windows=[ManagedWindow(w.id, w.title, w.bounds) for w in self._windows.values()],
            focused_window_id=self._focused_id,
            persisted_workspaces=list(self._persisted),
        )

    def _ensure_window(self, window_id: str) -> ManagedWindow:
        window = self._windows.get(window_id)
        if window is None:
            raise UnknownWindowError(window_id)
        return window
