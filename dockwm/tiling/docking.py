"""
dockwm.tiling.docking - Insert and prune operations on the docking tree.

Both operations are pure: they take a root and return a new root, never
mutating a node. Only the nodes on the path from the changed leaf to the
root are rebuilt; every other subtree is shared with the input tree.

    dock_leaf(root, "a", "b", DockDirection.RIGHT)

        a            ->      +-----+-----+
                             |  a  |  b  |
                             +-----+-----+

    prune_leaf(root, "a")   collapses the split and returns just "b".
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional

from dockwm.config import settings
from dockwm.tiling.tree import (
    DockNode,
    Leaf,
    Split,
    SplitDirection,
    clamp_ratio,
)


class DockDirection(enum.Enum):
    """Where a window docks relative to its target."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    TAB = "tab"         # grouped with the target, tree untouched


def is_horizontal_dock(direction: DockDirection) -> bool:
    return direction in (DockDirection.LEFT, DockDirection.RIGHT)


def is_vertical_dock(direction: DockDirection) -> bool:
    return direction in (DockDirection.TOP, DockDirection.BOTTOM)


def split_direction_for(direction: DockDirection) -> SplitDirection:
    """Axis of the split created when docking in *direction* (not valid for TAB)."""
    if is_horizontal_dock(direction):
        return SplitDirection.HORIZONTAL
    if is_vertical_dock(direction):
        return SplitDirection.VERTICAL
    raise ValueError(f"{direction.value!r} docking does not create a split")


def parse_direction(value: str) -> DockDirection:
    """
    Parse a direction name, case-insensitive.

    Raises:
        ValueError: if *value* is not one of left/right/top/bottom/tab.
    """
    try:
        return DockDirection(value.strip().lower())
    except ValueError:
        raise ValueError(f'Invalid docking direction "{value}".') from None


@dataclass(frozen=True, slots=True)
class DockingRelationship:
    """
    Record that *source* was docked against *target* in *direction*.

    Equality and hashing cover all three fields, so a set of relationships
    is de-duplicated on (source, direction, target).
    """

    source_window_id: str
    target_window_id: str
    direction: DockDirection

    def involves(self, window_id: str) -> bool:
        return window_id in (self.source_window_id, self.target_window_id)

    def to_dict(self) -> dict[str, str]:
        return {
            "sourceWindowId": self.source_window_id,
            "targetWindowId": self.target_window_id,
            "direction": self.direction.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DockingRelationship:
        return cls(
            source_window_id=data["sourceWindowId"],
            target_window_id=data["targetWindowId"],
            direction=DockDirection(data["direction"]),
        )

    def __str__(self) -> str:
        return (
            f"{self.source_window_id} -{self.direction.value}-> "
            f"{self.target_window_id}"
        )


# ============================================================================
# Insert
# ============================================================================
def dock_leaf(
    root: DockNode,
    target_id: str,
    new_id: str,
    direction: DockDirection,
    ratio: float = settings.DEFAULT_RATIO,
) -> Optional[DockNode]:
    """
    Insert a leaf for *new_id* next to the leaf *target_id*.

    The algorithm:
        1. Search depth-first (first child, then second) for the leaf
           whose id is *target_id*.
        2. TAB: return the matched leaf unchanged; tabbing only exists as
           a relationship, the tree keeps its shape.
        3. Otherwise replace the leaf by a Split on the direction's axis.
           The new leaf is ``first`` for LEFT/TOP and ``second`` for
           RIGHT/BOTTOM; the existing leaf keeps the other slot.
        4. Rebuild only the splits on the path back to the root, reusing
           the sibling subtree untouched.

    Args:
        root:      Current root of the tree.
        target_id: Id of the leaf to dock against.
        new_id:    Id of the window being docked.
        direction: Side of the target where the window goes.
        ratio:     Share of the split's ``first`` child.

    Returns:
        The new root, or None if no leaf *target_id* exists.
    """
    if root.kind == "leaf":
        if root.id != target_id:
            return None

        if direction is DockDirection.TAB:
            return root

        new_leaf = Leaf(new_id)
        axis = split_direction_for(direction)
        if direction in (DockDirection.LEFT, DockDirection.TOP):
            return Split(axis, ratio, new_leaf, root)
        return Split(axis, ratio, root, new_leaf)

    updated_first = dock_leaf(root.first, target_id, new_id, direction, ratio)
    if updated_first is not None:
        if updated_first is root.first:
            return root
        return Split(root.direction, root.ratio, updated_first, root.second)

    updated_second = dock_leaf(root.second, target_id, new_id, direction, ratio)
    if updated_second is not None:
        if updated_second is root.second:
            return root
        return Split(root.direction, root.ratio, root.first, updated_second)

    return None


# ============================================================================
# Prune
# ============================================================================
def prune_leaf(root: DockNode, leaf_id: str) -> tuple[Optional[DockNode], bool]:
    """
    Remove every leaf *leaf_id* and collapse the splits left half-empty.

    Promotion rules for a split, after recursing into both children:
        - both children gone      -> the split is gone too
        - one child gone          -> the survivor takes the split's place
        - nothing pruned below    -> the same split object is returned
        - pruned deeper down      -> a new split, same direction,
                                     re-clamped ratio

    Returns:
        Tuple (new_root_or_None, pruned).
    """
    if root.kind == "leaf":
        if root.id == leaf_id:
            return None, True
        return root, False

    first, first_pruned = prune_leaf(root.first, leaf_id)
    second, second_pruned = prune_leaf(root.second, leaf_id)

    if first is None and second is None:
        return None, first_pruned or second_pruned

    if first is None:
        return second, True

    if second is None:
        return first, True

    if first_pruned or second_pruned:
        return Split(root.direction, clamp_ratio(root.ratio), first, second), True

    return root, False
