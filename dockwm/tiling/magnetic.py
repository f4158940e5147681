"""
dockwm.tiling.magnetic - Magnetic docking heuristics.

Implements the geometric logic to:
    - Infer a docking intent (left/right/top/bottom/tab) from the position
      of a dragged rectangle relative to a target rectangle.
    - Compute the split ratio that preserves the two rectangles' relative
      sizes once docked.

An edge is "magnetic" when the dragged rect's facing edge is within
*threshold* units of the target's edge and the two rects overlap on the
perpendicular axis. Dropping the dragged rect's centre inside the target
means "tab".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dockwm.config import settings
from dockwm.tiling.docking import DockDirection, is_horizontal_dock, is_vertical_dock
from dockwm.tiling.rect import Rect
from dockwm.tiling.tree import clamp_ratio


@dataclass(frozen=True, slots=True)
class MagneticIntent:
    """A docking candidate: which side, how far, how much facing overlap."""

    direction: DockDirection
    distance: float
    overlap: float

    @property
    def sort_key(self) -> tuple[float, float]:
        # Closest first, then the widest facing overlap.
        return (self.distance, -self.overlap)


def infer_magnetic_intent(
    dragged: Rect,
    target: Rect,
    threshold: float = settings.DEFAULT_MAGNETIC_THRESHOLD,
) -> Optional[MagneticIntent]:
    """
    Infer how *dragged* wants to dock against *target*.

    The algorithm:
        1. Compute the overlap of the y-intervals (needed for side-by-side
           docking) and of the x-intervals (needed for stacked docking).
        2. Measure the four edge gaps. Each becomes a candidate when its
           perpendicular overlap is positive and the gap is within
           *threshold*:
               |dragged.right  - target.left|   -> LEFT
               |dragged.left   - target.right|  -> RIGHT
               |dragged.bottom - target.top|    -> TOP
               |dragged.top    - target.bottom| -> BOTTOM
        3. If the centre of *dragged* is inside *target*, add TAB with the
           smallest of the four gaps and the smaller of the two overlaps.
        4. Pick the closest candidate, widest overlap as tiebreaker. The
           sort is stable, so remaining ties keep the order above.

    Args:
        dragged:   Rect of the window being dragged.
        target:    Rect of the candidate target window.
        threshold: Maximum edge gap that still snaps.

    Returns:
        The best MagneticIntent, or None if nothing qualifies.
    """
    horizontal_overlap = dragged.horizontal_overlap(target)
    vertical_overlap = dragged.vertical_overlap(target)

    right_gap = abs(dragged.right - target.left)
    left_gap = abs(dragged.left - target.right)
    bottom_gap = abs(dragged.bottom - target.top)
    top_gap = abs(dragged.top - target.bottom)

    candidates: list[MagneticIntent] = []

    if horizontal_overlap > 0 and right_gap <= threshold:
        candidates.append(MagneticIntent(DockDirection.LEFT, right_gap, horizontal_overlap))

    if horizontal_overlap > 0 and left_gap <= threshold:
        candidates.append(MagneticIntent(DockDirection.RIGHT, left_gap, horizontal_overlap))

    if vertical_overlap > 0 and bottom_gap <= threshold:
        candidates.append(MagneticIntent(DockDirection.TOP, bottom_gap, vertical_overlap))

    if vertical_overlap > 0 and top_gap <= threshold:
        candidates.append(MagneticIntent(DockDirection.BOTTOM, top_gap, vertical_overlap))

    if target.contains_point(dragged.center_x, dragged.center_y):
        candidates.append(
            MagneticIntent(
                DockDirection.TAB,
                min(right_gap, left_gap, bottom_gap, top_gap),
                min(horizontal_overlap, vertical_overlap),
            )
        )

    if not candidates:
        return None

    return min(candidates, key=lambda c: c.sort_key)


def calculate_split_ratio(
    direction: DockDirection,
    dragged: Rect,
    target: Rect,
) -> float:
    """
    Ratio for the split created by docking *dragged* against *target*.

    The ratio is the share of the split's ``first`` child, so it is the
    dragged rect's share for LEFT/TOP (the dragged window becomes first)
    and the target's share for RIGHT/BOTTOM. TAB and zero-sized pairs
    yield 0.5. The result is always clamped to [0.1, 0.9].
    """
    if is_horizontal_dock(direction):
        total = dragged.width + target.width
        if total == 0:
            return settings.DEFAULT_RATIO
        if direction is DockDirection.LEFT:
            return clamp_ratio(dragged.width / total)
        return clamp_ratio(target.width / total)

    if is_vertical_dock(direction):
        total = dragged.height + target.height
        if total == 0:
            return settings.DEFAULT_RATIO
        if direction is DockDirection.TOP:
            return clamp_ratio(dragged.height / total)
        return clamp_ratio(target.height / total)

    return settings.DEFAULT_RATIO
