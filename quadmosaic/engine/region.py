"""Region — an axis-aligned rectangle in pixel-buffer coordinates.

Boundaries are real-valued: repeated halving produces fractional edges. Pixel
membership uses ``ceil`` on both the lower and the upper bound, so a region
covers columns ``[ceil(left), ceil(right))`` and rows
``[ceil(top), ceil(bottom))``. Siblings sharing an edge apply the same rule to
it, which keeps every pixel in exactly one leaf.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Region:
    left: float
    top: float
    right: float
    bottom: float

    def __post_init__(self) -> None:
        if self.left < 0 or self.top < 0:
            raise ValueError(f"Region origin must be non-negative: {self}")
        if not (self.left < self.right and self.top < self.bottom):
            raise ValueError(f"Region must have positive extent: {self}")

    @classmethod
    def full(cls, width: int, height: int) -> Region:
        return cls(0.0, 0.0, float(width), float(height))

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.width / 2, self.top + self.height / 2)

    def pixel_bounds(self) -> tuple[int, int, int, int]:
        """(col_start, row_start, col_end, row_end), end-exclusive."""
        return (
            math.ceil(self.left),
            math.ceil(self.top),
            math.ceil(self.right),
            math.ceil(self.bottom),
        )

    @property
    def pixel_count(self) -> int:
        c0, r0, c1, r1 = self.pixel_bounds()
        return max(c1 - c0, 0) * max(r1 - r0, 0)

    @property
    def is_empty(self) -> bool:
        return self.pixel_count == 0

    def area_fraction(self, width: int, height: int) -> float:
        return self.area / (width * height)

    def within(self, width: int, height: int) -> bool:
        return self.right <= width and self.bottom <= height

    def overlaps(self, other: Region) -> bool:
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "left": self.left,
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
        }
