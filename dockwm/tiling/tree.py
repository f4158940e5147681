"""
dockwm.tiling.tree - Binary docking tree.

The tree is a closed sum of two node kinds, told apart by their ``kind``
field:

    Leaf(id)                                  kind == "leaf"
    Split(direction, ratio, first, second)    kind == "split"

Nodes are frozen. Every mutation (see dockwm.tiling.docking) builds a new
root that shares the untouched subtrees with the previous one.

Layout example (horizontal 0.5 split whose second child is split vertically):

    +----------+----------+
    |          | topRight |
    |   left   +----------+
    |          | bottomRt |
    +----------+----------+
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any, Union

from dockwm.config import settings
from dockwm.tiling.rect import Rect


# ============================================================================
# Node types
# ============================================================================
class SplitDirection(enum.Enum):
    """Axis along which a Split divides its bounds."""
    HORIZONTAL = "horizontal"   # first | second  (divides the width)
    VERTICAL = "vertical"       # first / second  (divides the height)


@dataclass(frozen=True, slots=True)
class Leaf:
    """Tree node holding exactly one window."""

    id: str
    kind: str = field(default="leaf", init=False, repr=False)


@dataclass(frozen=True, slots=True)
class Split:
    """
    Binary partition of space between two children.

    ``ratio`` is the share of ``first`` along the split axis. It is stored
    as given and clamped whenever it is read (placements, serialization).
    """

    direction: SplitDirection
    ratio: float
    first: DockNode
    second: DockNode
    kind: str = field(default="split", init=False, repr=False)


DockNode = Union[Leaf, Split]

# JSON form of a node: {"kind": "leaf", "id"} | {"kind": "split", ...}
SerializedDockNode = dict[str, Any]


@dataclass(frozen=True, slots=True)
class DockPlacement:
    """Computed bounds of one window for a given viewport."""

    id: str
    bounds: Rect


def clamp_ratio(value: float) -> float:
    """Clamp a split ratio to [MIN_RATIO, MAX_RATIO]; non-finite values become 0.5."""
    if not math.isfinite(value):
        return settings.DEFAULT_RATIO
    return min(settings.MAX_RATIO, max(settings.MIN_RATIO, value))


# ============================================================================
# Serialization
# ============================================================================
def serialize_node(node: DockNode) -> SerializedDockNode:
    """Map a node (recursively) to its plain JSON-compatible form."""
    if node.kind == "leaf":
        return {"kind": "leaf", "id": node.id}

    return {
        "kind": "split",
        "direction": node.direction.value,
        "ratio": clamp_ratio(node.ratio),
        "first": serialize_node(node.first),
        "second": serialize_node(node.second),
    }


def deserialize_node(data: SerializedDockNode) -> DockNode:
    """
    Build a node (recursively) from its plain form.

    The ratio is re-clamped so a corrupted persisted value heals to the
    nearest bound (or 0.5 when not finite) instead of failing.

    Raises:
        ValueError: unknown node kind or split direction.
    """
    kind = data.get("kind")
    if kind == "leaf":
        return Leaf(data["id"])
    if kind == "split":
        return Split(
            direction=SplitDirection(data["direction"]),
            ratio=clamp_ratio(data["ratio"]),
            first=deserialize_node(data["first"]),
            second=deserialize_node(data["second"]),
        )
    raise ValueError(f"Unknown dock node kind {kind!r}")


# ============================================================================
# DockTree
# ============================================================================
@dataclass(frozen=True, slots=True)
class DockTree:
    """
    One version of a workspace's docking tree.

    ``root`` is None for an empty tree (a workspace without placed windows).
    """

    root: DockNode | None = None

    @classmethod
    def from_leaf(cls, window_id: str) -> DockTree:
        return cls(Leaf(window_id))

    @property
    def is_empty(self) -> bool:
        return self.root is None

    # ------------------------------------------------------------------
    # Placements
    # ------------------------------------------------------------------
    def compute_placements(self, bounds: Rect) -> list[DockPlacement]:
        """
        Compute the bounds of every leaf inside *bounds*.

        Depth-first, first child before second. For each split the first
        child receives ``round(total * ratio)`` units and the second child
        the exact remainder, so sibling extents always sum to the parent's.

        Returns:
            One DockPlacement per leaf, in depth-first order.
        """
        placements: list[DockPlacement] = []
        if self.root is not None:
            self._walk(self.root, bounds, placements)
        return placements

    def _walk(self, node: DockNode, bounds: Rect, out: list[DockPlacement]) -> None:
        if node.kind == "leaf":
            out.append(DockPlacement(node.id, bounds))
            return

        ratio = clamp_ratio(node.ratio)
        if node.direction is SplitDirection.HORIZONTAL:
            first_bounds, second_bounds = bounds.split_horizontal(ratio)
        else:
            first_bounds, second_bounds = bounds.split_vertical(ratio)

        self._walk(node.first, first_bounds, out)
        self._walk(node.second, second_bounds, out)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def leaf_ids(self) -> list[str]:
        """Leaf ids in depth-first order."""
        ids: list[str] = []
        stack: list[DockNode] = [self.root] if self.root is not None else []
        while stack:
            node = stack.pop()
            if node.kind == "leaf":
                ids.append(node.id)
            else:
                stack.append(node.second)
                stack.append(node.first)
        return ids

    def contains(self, window_id: str) -> bool:
        return window_id in self.leaf_ids()

    @property
    def leaf_count(self) -> int:
        return len(self.leaf_ids())

    @property
    def depth(self) -> int:
        """Number of levels (0 for an empty tree, 1 for a single leaf)."""

        def _depth(node: DockNode) -> int:
            if node.kind == "leaf":
                return 1
            return 1 + max(_depth(node.first), _depth(node.second))

        return _depth(self.root) if self.root is not None else 0

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def serialize(self) -> SerializedDockNode | None:
        if self.root is None:
            return None
        return serialize_node(self.root)

    @classmethod
    def deserialize(cls, data: SerializedDockNode | None) -> DockTree:
        if data is None:
            return cls()
        return cls(deserialize_node(data))

    # ------------------------------------------------------------------
    # Debug
    # ------------------------------------------------------------------
    def dump(self) -> str:
        """Indented text rendering of the tree."""
        if self.root is None:
            return "(empty)"

        lines: list[str] = []

        def _dump(node: DockNode, indent: int) -> None:
            pad = "  " * indent
            if node.kind == "leaf":
                lines.append(f"{pad}- {node.id}")
                return
            lines.append(
                f"{pad}+ {node.direction.value} {clamp_ratio(node.ratio):.2f}"
            )
            _dump(node.first, indent + 1)
            _dump(node.second, indent + 1)

        _dump(self.root, 0)
        return "\n".join(lines)
