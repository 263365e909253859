"""
3D projection of ordered sketch paths.

Each ordered path becomes an ``EdgeChain``: straight segments and trimmed
circular arcs expressed in world coordinates through the sketch's plane
binding. The chains are kernel neutral; ``rapidsketch.integrations`` turns them
into native wire objects.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple, Union

import numpy as np

from .cad_types import Vector
from .constants import DEFAULT_TOLERANCE, MIN_ARC_RADIUS, MIN_ARC_SWEEP
from .constraints import OrderedCurve, OrderedPath
from .geometry import angle_of, forward_angles
from .primitives import Arc, Line
from .workplane import PlaneBinding

if TYPE_CHECKING:
    from .sketch import Sketch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineEdge3D:
    """Straight edge from ``start`` to ``end``."""

    start: Vector
    end: Vector
    curve_id: int = -1

    def length(self) -> float:
        return float(np.linalg.norm(np.asarray(self.end) - np.asarray(self.start)))


@dataclass(frozen=True)
class ArcEdge3D:
    """Trimmed circle ``center + r*(cos(a)*x_dir + sin(a)*(normal x x_dir))``.

    The parameter range ``[start_angle, end_angle]`` always increases
    (counter-clockwise about ``normal``). ``reversed`` is set when the edge is
    walked from ``end_angle`` back to ``start_angle``; ``start`` and ``end``
    are the walked endpoints.
    """

    center: Vector
    normal: Vector
    x_dir: Vector
    radius: float
    start_angle: float
    end_angle: float
    start: Vector
    end: Vector
    reversed: bool = False
    curve_id: int = -1

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    def length(self) -> float:
        return self.radius * self.sweep

    def point_at(self, angle: float) -> Vector:
        y_dir = np.cross(np.asarray(self.normal), np.asarray(self.x_dir))
        return Vector(
            *(
                np.asarray(self.center)
                + self.radius * math.cos(angle) * np.asarray(self.x_dir)
                + self.radius * math.sin(angle) * y_dir
            )
        )


Edge3D = Union[LineEdge3D, ArcEdge3D]


@dataclass
class EdgeChain:
    """Contiguous, oriented 3D edges built from one ordered path."""

    edges: Tuple[Edge3D, ...] = ()
    path: OrderedPath = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.edges)

    def __iter__(self):
        return iter(self.edges)

    @property
    def start(self) -> Optional[Vector]:
        return self.edges[0].start if self.edges else None

    @property
    def end(self) -> Optional[Vector]:
        return self.edges[-1].end if self.edges else None

    def length(self) -> float:
        return sum(edge.length() for edge in self.edges)

    def is_closed(self, tol: float = DEFAULT_TOLERANCE) -> bool:
        if not self.edges:
            return False
        gap = np.asarray(self.end) - np.asarray(self.start)
        return float(np.dot(gap, gap)) <= tol * tol

    def is_contiguous(self, tol: float = DEFAULT_TOLERANCE) -> bool:
        for prev, nxt in zip(self.edges, self.edges[1:]):
            gap = np.asarray(nxt.start) - np.asarray(prev.end)
            if float(np.dot(gap, gap)) > tol * tol:
                return False
        return True


def _line_edge(
    line: Line, oc: OrderedCurve, plane: PlaneBinding, tol: float
) -> Optional[LineEdge3D]:
    a = line.p2 if oc.reversed else line.p1
    b = line.p1 if oc.reversed else line.p2
    dx, dy = b.x - a.x, b.y - a.y
    if dx * dx + dy * dy <= tol * tol:
        logger.debug("Skipping degenerate line %d", oc.id)
        return None
    return LineEdge3D(plane.to_3d(a.x, a.y), plane.to_3d(b.x, b.y), oc.id)


def _arc_edge(
    arc: Arc, oc: OrderedCurve, plane: PlaneBinding, tol: float
) -> Optional[ArcEdge3D]:
    radius = arc.radius
    if radius <= max(MIN_ARC_RADIUS, tol):
        logger.debug("Skipping arc %d with near-zero radius", oc.id)
        return None
    if abs(arc.center.distance(arc.p2) - radius) > max(tol, 1e-9 * radius):
        logger.warning(
            "Arc %d end point is off its circle by %g; using radius %g",
            oc.id,
            abs(arc.center.distance(arc.p2) - radius),
            radius,
        )

    # counter-clockwise parameter range of the geometric arc
    first, last = (arc.p2, arc.p1) if arc.clockwise else (arc.p1, arc.p2)
    u1, u2 = forward_angles(angle_of(arc.center, first), angle_of(arc.center, last))
    if u2 - u1 < MIN_ARC_SWEEP:
        logger.debug("Skipping arc %d with near-zero sweep", oc.id)
        return None

    a = arc.p2 if oc.reversed else arc.p1
    b = arc.p1 if oc.reversed else arc.p2
    return ArcEdge3D(
        center=plane.to_3d(arc.center.x, arc.center.y),
        normal=plane.normal,
        x_dir=plane.x_dir,
        radius=radius,
        start_angle=u1,
        end_angle=u2,
        start=plane.to_3d(a.x, a.y),
        end=plane.to_3d(b.x, b.y),
        reversed=(oc.reversed != arc.clockwise),
        curve_id=oc.id,
    )


def project_path(
    sketch: "Sketch", path: OrderedPath, tol: float = DEFAULT_TOLERANCE
) -> EdgeChain:
    """Map one ordered path onto the sketch plane as a chain of 3D edges."""
    plane = sketch.plane
    edges: List[Edge3D] = []
    for oc in path:
        curve = sketch.curve(oc.id)
        if isinstance(curve, Line):
            edge = _line_edge(curve, oc, plane, tol)
        elif isinstance(curve, Arc):
            edge = _arc_edge(curve, oc, plane, tol)
        else:
            raise TypeError(f"Unsupported curve type: {type(curve).__name__}")
        if edge is not None:
            edges.append(edge)
    return EdgeChain(tuple(edges), list(path))


def project_paths(
    sketch: "Sketch", paths: Sequence[OrderedPath], tol: float = DEFAULT_TOLERANCE
) -> List[EdgeChain]:
    return [project_path(sketch, path, tol) for path in paths]
