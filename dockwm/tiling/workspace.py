"""
dockwm.tiling.workspace - Workspace with a docking tree.

Each workspace has an ID, a name, one docking tree, a registry of its
windows, an optional active window and the set of docking relationships
recorded between its windows.

The tree is never mutated: every dock/remove builds a new tree with the
pure functions from dockwm.tiling.docking and swaps the reference only
once the whole operation has succeeded. A failed operation raises and
leaves the workspace untouched.

The workspace knows nothing about monitors: callers pass the surface
(viewport) whenever placements are needed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional

from dockwm.config import settings
from dockwm.core.errors import DockFailureError, DuplicateWindowError, UnknownWindowError
from dockwm.core.events import EventEmitter, WorkspaceEvent
from dockwm.core.window import WindowState
from dockwm.tiling.docking import (
    DockDirection,
    DockingRelationship,
    dock_leaf,
    prune_leaf,
)
from dockwm.tiling.magnetic import (
    MagneticIntent,
    calculate_split_ratio,
    infer_magnetic_intent,
)
from dockwm.tiling.rect import Rect
from dockwm.tiling.tree import DockPlacement, DockTree, Leaf, Split, SplitDirection

log = logging.getLogger(__name__)


# JSON form of a workspace (see Workspace.serialize)
WorkspaceSnapshot = dict[str, Any]


@dataclass(frozen=True, slots=True)
class DockRequest:
    """Dock *window* on the *direction* side of *target_window_id*."""

    window: WindowState
    target_window_id: str
    direction: DockDirection
    ratio: Optional[float] = None


@dataclass(frozen=True, slots=True)
class MagneticDockRequest:
    """
    Dock *window*, currently dragged at *bounds*, against whichever placed
    window it snaps to when the layout is rendered over *surface*.
    """

    window: WindowState
    bounds: Rect
    surface: Rect
    threshold: Optional[float] = None


class Workspace(EventEmitter):
    """
    A workspace: one docking tree plus the windows placed in it.

    Invariants:
        - Window ids are unique in the registry.
        - The active window id is None or a registered window.
        - Relationships are unique on (source, direction, target) and keep
          their insertion order.
    """

    def __init__(
        self,
        ws_id: str,
        name: str | None = None,
        tree: DockTree | None = None,
        windows: Iterable[WindowState] = (),
        active_window_id: str | None = None,
        relationships: Iterable[DockingRelationship] = (),
    ) -> None:
        super().__init__(WorkspaceEvent)

        self._id = ws_id
        self._name = name or f"Workspace {ws_id}"
        self._tree = tree if tree is not None else DockTree()

        self._windows: dict[str, WindowState] = {}
        for window in windows:
            self._windows[window.id] = window

        # Defaults to the first window when not given explicitly
        if active_window_id:
            if active_window_id not in self._windows:
                raise UnknownWindowError(
                    active_window_id,
                    f"Cannot activate unknown window '{active_window_id}'.",
                )
            self._active_window_id: str | None = active_window_id
        else:
            self._active_window_id = next(iter(self._windows), None)

        # dict used as an insertion-ordered set
        self._relationships: dict[DockingRelationship, None] = dict.fromkeys(
            relationships
        )

    # ------------------------------------------------------------------
    # Basic properties
    # ------------------------------------------------------------------
    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def tree(self) -> DockTree:
        """Current version of the docking tree."""
        return self._tree

    # ------------------------------------------------------------------
    # Window registry
    # ------------------------------------------------------------------
    @property
    def windows(self) -> list[WindowState]:
        """Registered windows, in registration order (copy)."""
        return list(self._windows.values())

    @property
    def window_ids(self) -> list[str]:
        return list(self._windows)

    @property
    def window_count(self) -> int:
        return len(self._windows)

    def get_window(self, window_id: str) -> Optional[WindowState]:
        return self._windows.get(window_id)

    def contains(self, window_id: str) -> bool:
        return window_id in self._windows

    @property
    def active_window_id(self) -> Optional[str]:
        return self._active_window_id

    @property
    def active_window(self) -> Optional[WindowState]:
        if self._active_window_id is None:
            return None
        return self._windows.get(self._active_window_id)

    @property
    def relationships(self) -> list[DockingRelationship]:
        """Docking relationships in insertion order (copy)."""
        return list(self._relationships)

    def set_active_window(self, window_id: str | None) -> None:
        """
        Make *window_id* the active window (None or "" clears it).

        Raises:
            UnknownWindowError: *window_id* is not registered.
        """
        if window_id and window_id not in self._windows:
            log.warning("WS %s: cannot activate unknown window %s", self._id, window_id)
            raise UnknownWindowError(
                window_id, f"Cannot activate unknown window '{window_id}'."
            )

        self._active_window_id = window_id or None
        log.info("WS %s active -> %s", self._id, self._active_window_id)
        self._emit(WorkspaceEvent.ACTIVE_WINDOW_CHANGED, self._active_window_id)

    def add_window(self, window: WindowState, target_window_id: str | None = None) -> None:
        """
        Register a window.

        Without a target the window is placed right away as a new root: a
        horizontal 50/50 split wrapping the current root (or the bare leaf
        when the tree is empty). With a target the tree is left alone; the
        caller places the window with dock().

        Raises:
            DuplicateWindowError: the id is already registered.
        """
        if window.id in self._windows:
            log.warning("WS %s: duplicate window %s", self._id, window.id)
            raise DuplicateWindowError(window.id)

        new_tree = self._tree
        if not target_window_id:
            leaf = Leaf(window.id)
            if self._tree.root is None:
                new_tree = DockTree(leaf)
            else:
                new_tree = DockTree(
                    Split(SplitDirection.HORIZONTAL, settings.DEFAULT_RATIO, self._tree.root, leaf)
                )

        self._windows[window.id] = window
        self._tree = new_tree
        if self._active_window_id is None:
            self._active_window_id = window.id

        log.info("WS %s +WIN %s", self._id, window)
        self._emit(WorkspaceEvent.WINDOW_ADDED, window)

    def remove_window(self, window_id: str) -> bool:
        """
        Remove a window from the registry, the tree and the relationships.

        If it was the active window, the first remaining window becomes
        active (or none when the workspace is now empty).

        Returns:
            True if it was removed, False if it was not registered.
        """
        if window_id not in self._windows:
            return False

        del self._windows[window_id]

        if self._active_window_id == window_id:
            self._active_window_id = next(iter(self._windows), None)

        if self._tree.root is not None:
            new_root, pruned = prune_leaf(self._tree.root, window_id)
            if pruned:
                self._tree = DockTree(new_root)

        for relationship in [r for r in self._relationships if r.involves(window_id)]:
            del self._relationships[relationship]

        log.info("WS %s -WIN %s", self._id, window_id)
        self._emit(WorkspaceEvent.WINDOW_REMOVED, window_id)
        return True

    # ------------------------------------------------------------------
    # Docking
    # ------------------------------------------------------------------
    def dock(self, request: DockRequest) -> DockingRelationship:
        """
        Dock a window against a target window that is already placed.

        The window is registered if new. If it already has a leaf and the
        direction is not TAB, the old leaf is removed first so the window
        moves instead of appearing twice.

        Raises:
            UnknownWindowError: the target is not registered.
            DockFailureError:   the target has no leaf in the tree, or the
                                window was docked onto itself.

        Returns:
            The recorded DockingRelationship.
        """
        window = request.window
        target_id = request.target_window_id
        direction = request.direction
        ratio = request.ratio if request.ratio is not None else settings.DEFAULT_RATIO

        if target_id not in self._windows:
            log.warning("WS %s: dock target %s unknown", self._id, target_id)
            raise UnknownWindowError(
                target_id, f"Cannot dock relative to unknown window '{target_id}'."
            )

        if window.id == target_id:
            raise DockFailureError(f"Cannot dock window '{window.id}' onto itself.")

        root = self._tree.root
        if root is not None and direction is not DockDirection.TAB:
            root, _ = prune_leaf(root, window.id)

        new_root = None
        if root is not None:
            new_root = dock_leaf(root, target_id, window.id, direction, ratio)
        if new_root is None:
            log.warning(
                "WS %s: dock %s -> %s failed, target not in tree",
                self._id, window.id, target_id,
            )
            raise DockFailureError(
                f"Unable to dock window '{window.id}' relative to '{target_id}'."
            )

        if window.id not in self._windows:
            self._windows[window.id] = window

        relationship = DockingRelationship(window.id, target_id, direction)
        self._relationships[relationship] = None
        self._tree = DockTree(new_root)

        log.info("WS %s DOCK %s", self._id, relationship)
        self._emit(WorkspaceEvent.WINDOW_DOCKED, relationship)
        return relationship

    def find_magnetic_target(
        self,
        bounds: Rect,
        surface: Rect,
        threshold: float | None = None,
        exclude_id: str | None = None,
    ) -> Optional[tuple[DockPlacement, MagneticIntent]]:
        """
        Find the placed window that *bounds* snaps to.

        Renders the layout over *surface* and runs infer_magnetic_intent
        against every placement. The closest candidate wins, widest overlap
        breaks ties, earlier placements win the rest.

        *exclude_id* is the window being dragged. Its leaf is lifted out of
        the layout before rendering, so the candidates have the sizes they
        will have once the window is moved.

        Returns:
            Tuple (placement, intent), or None if nothing snaps.
        """
        if threshold is None:
            threshold = settings.DEFAULT_MAGNETIC_THRESHOLD

        tree = self._tree
        if exclude_id is not None and tree.root is not None:
            root, _ = prune_leaf(tree.root, exclude_id)
            tree = DockTree(root)

        best: Optional[tuple[DockPlacement, MagneticIntent]] = None
        for placement in tree.compute_placements(surface):
            intent = infer_magnetic_intent(bounds, placement.bounds, threshold)
            if intent is None:
                continue
            if best is None or intent.sort_key < best[1].sort_key:
                best = (placement, intent)

        return best

    def dock_magnetically(self, request: MagneticDockRequest) -> DockingRelationship:
        """
        Dock a dragged window against the window it snaps to.

        The split ratio keeps the relative sizes of the dragged bounds and
        the target's placement (see calculate_split_ratio). A window that is
        already placed is lifted out of the layout first, so its target is
        measured at the size it has once the window leaves its old slot.

        Raises:
            DockFailureError: no placed window is close enough.

        Returns:
            The recorded DockingRelationship.
        """
        found = self.find_magnetic_target(
            request.bounds,
            request.surface,
            request.threshold,
            exclude_id=request.window.id,
        )
        if found is None:
            log.debug("WS %s: no magnetic target for %s", self._id, request.window.id)
            raise DockFailureError(
                f"No magnetic docking target found for window '{request.window.id}'."
            )

        placement, intent = found
        ratio = calculate_split_ratio(intent.direction, request.bounds, placement.bounds)
        log.debug(
            "WS %s: magnetic %s -> %s %s (distance=%s, overlap=%s, ratio=%.3f)",
            self._id,
            request.window.id,
            placement.id,
            intent.direction.value,
            intent.distance,
            intent.overlap,
            ratio,
        )
        return self.dock(
            DockRequest(
                window=request.window,
                target_window_id=placement.id,
                direction=intent.direction,
                ratio=ratio,
            )
        )

    # ------------------------------------------------------------------
    # Placements
    # ------------------------------------------------------------------
    def compute_placements(self, bounds: Rect) -> list[DockPlacement]:
        return self._tree.compute_placements(bounds)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def serialize(self) -> WorkspaceSnapshot:
        snapshot: WorkspaceSnapshot = {
            "id": self._id,
            "name": self._name,
            "layout": self._tree.serialize(),
            "windows": [w.to_dict() for w in self._windows.values()],
        }
        if self._active_window_id is not None:
            snapshot["activeWindowId"] = self._active_window_id
        snapshot["relationships"] = [r.to_dict() for r in self._relationships]
        return snapshot

    @classmethod
    def deserialize(cls, snapshot: WorkspaceSnapshot) -> Workspace:
        active_window_id = snapshot.get("activeWindowId")
        workspace = cls(
            snapshot["id"],
            snapshot["name"],
            DockTree.deserialize(snapshot.get("layout")),
            [WindowState.from_dict(w) for w in snapshot["windows"]],
            active_window_id,
            [DockingRelationship.from_dict(r) for r in snapshot["relationships"]],
        )
        # An absent active id stays absent instead of defaulting to the
        # first window.
        if not active_window_id:
            workspace._active_window_id = None
        return workspace

    # ------------------------------------------------------------------
    # Debug
    # ------------------------------------------------------------------
    def dump_state(self) -> str:
        lines = [
            f"--- Workspace {self._id}: {self._name} ---",
            f"    Active window: {self._active_window_id}",
            f"    Windows: {len(self._windows)}",
            f"    Leaves: {self._tree.leaf_count} (depth {self._tree.depth})",
            f"    Listeners: {sum(self.listener_count(ev) for ev in WorkspaceEvent)}",
            f"    Relationships: {len(self._relationships)}",
        ]
        for w in self._windows.values():
            marker = "*" if w.id == self._active_window_id else " "
            lines.append(f"    {marker} {w}")
        for r in self._relationships:
            lines.append(f"    [dock] {r}")
        lines.extend(f"    {line}" for line in self._tree.dump().splitlines())
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"Workspace(id={self._id!r}, name={self._name!r}, "
            f"windows={len(self._windows)}, "
            f"leaves={self._tree.leaf_count}, "
            f"active={self._active_window_id!r})"
        )
