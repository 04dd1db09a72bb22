"""
Rectangle math shared by the geometry and occlusion checks.
"""

from dataclasses import dataclass


@dataclass
class Rect:
    """
    Axis-aligned rectangle in some window's coordinate space.

    `width` and `height` always mirror the edges; call `recompute()` after
    moving an edge by hand. Degenerate rects (negative extent) are allowed
    while clipping, but their `area` is always zero.
    """
    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_edges(cls, left: float, top: float, right: float, bottom: float) -> "Rect":
        return cls(left, top, right, bottom, right - left, bottom - top)

    def recompute(self) -> "Rect":
        self.width = self.right - self.left
        self.height = self.bottom - self.top
        return self

    @property
    def area(self) -> float:
        if self.is_degenerate:
            return 0.0
        return self.width * self.height

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def translated(self, dx: float, dy: float) -> "Rect":
        return Rect.from_edges(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)

    def contains_point(self, x: float, y: float) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom

    def to_dict(self) -> dict[str, float]:
        return {
            "left": self.left,
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
            "width": self.width,
            "height": self.height,
        }


def overlap_fraction(target: Rect, other: Rect) -> float:
    """
    Fraction of `target` covered by `other`, in [0, 1].

    Divides by the target's area only, so swapping the arguments gives a
    different answer unless both rects have the same area.
    """
    target_area = target.area
    if target_area == 0:
        return 0.0

    x_overlap = max(0.0, min(target.right, other.right) - max(target.left, other.left))
    y_overlap = max(0.0, min(target.bottom, other.bottom) - max(target.top, other.top))
    return (x_overlap * y_overlap) / target_area
