from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from shapely.geometry import box


@dataclass(frozen=True)
class Rect:
    """Axis-aligned integer rectangle in canvas pixels, origin top-left."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def corners(self) -> Tuple[Tuple[int, int], ...]:
        """Top-left, top-right, bottom-left and bottom-right corners."""
        return (
            (self.x, self.y),
            (self.right, self.y),
            (self.x, self.bottom),
            (self.right, self.bottom),
        )

    def contains_point(self, px: int, py: int) -> bool:
        """Closed bounding box test: points on the edges count as inside."""
        return (
            self.x <= px <= self.right and
            self.y <= py <= self.bottom
        )

    def intersects_corner_of(self, other: Rect) -> bool:
        """
        Return True if any corner of ``other`` lies inside this rectangle.

        This is the packer's collision test and it is only an approximation of
        overlap: when ``other`` crosses or fully contains this rectangle
        without one of its own corners landing inside, the test reports no
        collision. Placement results depend on this exact behaviour, so use
        ``overlaps`` only through the packer's ``collision="aabb"`` option.
        """
        return any(self.contains_point(px, py) for px, py in other.corners())

    def overlaps(self, other: Rect) -> bool:
        """
        Full AABB overlap: True when the interiors share a positive area.

        Rectangles that only touch along an edge do not overlap, and
        zero-area rectangles never overlap anything.
        """
        if self.area == 0 or other.area == 0:
            return False
        mine = box(self.x, self.y, self.right, self.bottom)
        theirs = box(other.x, other.y, other.right, other.bottom)
        return mine.intersection(theirs).area > 0
