"""
Geometric primitives used as parameters for line and curve drawing.
"""

import math
from typing import Iterable, List, NamedTuple, Sequence


class Point(NamedTuple):
    """2D point with floating-point coordinates"""

    x: float
    y: float

    def rounded(self) -> "tuple[int, int]":
        """Nearest integer pixel coordinates."""
        return int(round(self.x)), int(round(self.y))

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


def to_points(values: Iterable[Sequence[float]]) -> List[Point]:
    """Convert (x, y) pairs or Point-like objects into Points."""
    points = []
    for value in values:
        if isinstance(value, Point):
            points.append(value)
        elif hasattr(value, "x") and hasattr(value, "y"):
            points.append(Point(float(value.x), float(value.y)))
        else:
            x, y = value
            points.append(Point(float(x), float(y)))
    return points
