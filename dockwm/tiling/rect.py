"""
dockwm.tiling.rect - Immutable Rect geometry.

Defines the rectangle used both for the viewport handed to the docking
tree and for the bounds of every placement it computes. Coordinates are
abstract units local to one viewport (no monitor or DPI semantics).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


def round_half_up(value: float) -> int | float:
    """
    Round to the nearest integer, halves upward (2.5 -> 3, -2.5 -> -2).

    Non-finite values (inf, nan) are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    return math.floor(value + 0.5)


def overlap_1d(start_a: float, end_a: float, start_b: float, end_b: float) -> float:
    """Length of the intersection of [start_a, end_a] and [start_b, end_b]."""
    return max(0, min(end_a, end_b) - max(start_a, start_b))


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Rectangle defined by position (x, y) and size (width, height).

    Attributes:
        x:      Horizontal coordinate of the top-left corner.
        y:      Vertical coordinate of the top-left corner.
        width:  Extent along x. Expected non-negative (not enforced).
        height: Extent along y. Expected non-negative (not enforced).
    """

    x: float
    y: float
    width: float
    height: float

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------
    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def split_horizontal(self, ratio: float = 0.5) -> tuple[Rect, Rect]:
        """
        Split into a left and a right column.

        The left column gets ``round(width * ratio)`` units and the right
        column gets the exact remainder, so both widths always add up to
        the parent's width.

        Returns:
            Tuple (left, right).
        """
        left_w = round_half_up(self.width * ratio)
        right_w = self.width - left_w
        left = Rect(self.x, self.y, left_w, self.height)
        right = Rect(self.x + left_w, self.y, right_w, self.height)
        return left, right

    def split_vertical(self, ratio: float = 0.5) -> tuple[Rect, Rect]:
        """
        Split into a top and a bottom row.

        Same rounding rule as split_horizontal, applied to the height.

        Returns:
            Tuple (top, bottom).
        """
        top_h = round_half_up(self.height * ratio)
        bottom_h = self.height - top_h
        top = Rect(self.x, self.y, self.width, top_h)
        bottom = Rect(self.x, self.y + top_h, self.width, bottom_h)
        return top, bottom

    def horizontal_overlap(self, other: Rect) -> float:
        """Overlap of the y-intervals (how much the rects face each other side by side)."""
        return overlap_1d(self.top, self.bottom, other.top, other.bottom)

    def vertical_overlap(self, other: Rect) -> float:
        """Overlap of the x-intervals (how much the rects face each other stacked)."""
        return overlap_1d(self.left, self.right, other.left, other.right)

    def contains_point(self, x: float, y: float) -> bool:
        """True if (x, y) lies inside the rect, edges included."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Rect:
        return cls(data["x"], data["y"], data["width"], data["height"])

    # ------------------------------------------------------------------
    # Representation
    # ------------------------------------------------------------------
    def __str__(self) -> str:
        return f"Rect({self.width}x{self.height}+{self.x}+{self.y})"
