"""
2D curve primitives stored by a sketch.

Both variants expose exactly two endpoints, addressed by end index 0 (``p1``)
and 1 (``p2``). Consumers dispatch on the concrete type with ``isinstance``.
"""

import math
from dataclasses import dataclass, replace
from typing import Union

from .cad_types import Point2, as_point


@dataclass
class Line:
    """A 2D line segment from ``p1`` to ``p2``."""

    p1: Point2
    p2: Point2

    def __post_init__(self) -> None:
        self.p1 = as_point(self.p1)
        self.p2 = as_point(self.p2)

    def endpoint(self, end: int) -> Point2:
        return self.p1 if end == 0 else self.p2

    def set_endpoint(self, end: int, point: Point2) -> None:
        if end == 0:
            self.p1 = as_point(point)
        else:
            self.p2 = as_point(point)

    def length(self) -> float:
        return self.p1.distance(self.p2)

    def point_at(self, t: float) -> Point2:
        return Point2(
            self.p1.x + t * (self.p2.x - self.p1.x),
            self.p1.y + t * (self.p2.y - self.p1.y),
        )

    def copy(self) -> "Line":
        return replace(self)


@dataclass
class Arc:
    """A circular arc around ``center`` sweeping from ``p1`` to ``p2``.

    ``p1`` and ``p2`` lie on the circle of radius ``|center - p1|``. The sweep
    runs counter-clockwise unless ``clockwise`` is set.
    """

    center: Point2
    p1: Point2
    p2: Point2
    clockwise: bool = False

    def __post_init__(self) -> None:
        self.center = as_point(self.center)
        self.p1 = as_point(self.p1)
        self.p2 = as_point(self.p2)
        self.clockwise = bool(self.clockwise)

    def endpoint(self, end: int) -> Point2:
        return self.p1 if end == 0 else self.p2

    def set_endpoint(self, end: int, point: Point2) -> None:
        if end == 0:
            self.p1 = as_point(point)
        else:
            self.p2 = as_point(point)

    @property
    def radius(self) -> float:
        return self.center.distance(self.p1)

    def sweep(self) -> float:
        """Swept angle in radians, in ``[0, 2*pi)``."""
        a1 = math.atan2(self.p1.y - self.center.y, self.p1.x - self.center.x)
        a2 = math.atan2(self.p2.y - self.center.y, self.p2.x - self.center.x)
        delta = a1 - a2 if self.clockwise else a2 - a1
        return delta % (2.0 * math.pi)

    def copy(self) -> "Arc":
        return replace(self)


Curve = Union[Line, Arc]
