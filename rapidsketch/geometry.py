"""Planar helpers shared by the insertion engine and the projector."""

import math
from typing import NamedTuple, Optional

from .cad_types import Point2
from .constants import PARALLEL_EPSILON
from .primitives import Line

TWO_PI = 2.0 * math.pi


class Projection(NamedTuple):
    t: float  # parameter along the segment, 0 at p1 and 1 at p2
    point: Point2
    distance: float


class Crossing(NamedTuple):
    t: float  # parameter along the first segment
    u: float  # parameter along the second segment
    point: Point2


def project_onto_segment(point: Point2, line: Line) -> Optional[Projection]:
    """Closest point of the infinite carrier line, or None for a zero-length segment."""
    dx = line.p2.x - line.p1.x
    dy = line.p2.y - line.p1.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return None
    t = ((point.x - line.p1.x) * dx + (point.y - line.p1.y) * dy) / length_sq
    closest = Point2(line.p1.x + t * dx, line.p1.y + t * dy)
    return Projection(t, closest, point.distance(closest))


def is_interior_projection(projection: Projection, line: Line, tol: float) -> bool:
    """True when the projection lies more than ``tol`` (in length) from both ends."""
    length = line.length()
    if length == 0.0:
        return False
    margin = tol / length
    return margin < projection.t < 1.0 - margin


def segment_crossing(
    a1: Point2, a2: Point2, b1: Point2, b2: Point2
) -> Optional[Crossing]:
    """Intersect the carrier lines of segments ``a`` and ``b``.

    Returns None when the segments are parallel within ``PARALLEL_EPSILON``.
    The parameters are not clamped; callers decide what counts as a crossing.
    """
    rx, ry = a2.x - a1.x, a2.y - a1.y
    sx, sy = b2.x - b1.x, b2.y - b1.y
    det = rx * sy - ry * sx
    if abs(det) <= PARALLEL_EPSILON:
        return None
    qx, qy = b1.x - a1.x, b1.y - a1.y
    t = (qx * sy - qy * sx) / det
    u = (qx * ry - qy * rx) / det
    return Crossing(t, u, Point2(a1.x + t * rx, a1.y + t * ry))


def proper_crossing(first: Line, second: Line, tol: float) -> Optional[Crossing]:
    """Crossing strictly inside both segments, away from their endpoints."""
    crossing = segment_crossing(first.p1, first.p2, second.p1, second.p2)
    if crossing is None:
        return None
    if tol < crossing.t < 1.0 - tol and tol < crossing.u < 1.0 - tol:
        return crossing
    return None


def angle_of(center: Point2, point: Point2) -> float:
    return math.atan2(point.y - center.y, point.x - center.x)


def forward_angles(start: float, end: float):
    """Unwrap ``end`` so that ``end >= start`` (a non-negative sweep)."""
    while end < start:
        end += TWO_PI
    return start, end
