"""
Sketch - planar curve store with endpoint coincidence handling.

A sketch owns an append-only list of curves (lines and arcs), explicit
coincidence constraints between curve endpoints, free auxiliary points and the
plane the sketch lies on. Curves are addressed by their integer index; ids are
stable and never reused.
"""

import logging
import operator
from typing import Dict, List, Optional, Sequence, Tuple

from . import insertion, projector, serializer, wires
from .cad_types import Point2, Point2Like, as_point
from .constants import DEFAULT_TOLERANCE
from .constraints import Coincident, EndpointRef, OrderedPath, Wire
from .exceptions import InvalidReference
from .primitives import Arc, Curve, Line
from .spatial_index import KdTree2D
from .union_find import UnionFind
from .workplane import PlaneBinding

logger = logging.getLogger(__name__)


class Sketch:
    """
    2D sketch with curves, coincidence constraints and a plane binding.

    Example:
        >>> sketch = Sketch()
        >>> a = sketch.add_line((0, 0), (10, 0))
        >>> b = sketch.add_line((10, 0), (10, 5))
        >>> sketch.add_coincident((a, 1), (b, 0))
        >>> sketch.solve_constraints()
        >>> len(sketch.compute_wires())
        1
    """

    def __init__(self, name: str = "Sketch", plane: Optional[PlaneBinding] = None):
        self.name = name
        self._curves: List[Curve] = []
        self._constraints: List[Coincident] = []
        self._points: List[Point2] = []
        self._plane = plane if plane is not None else PlaneBinding.xy_plane()

        # Bumped on every curve store mutation; cluster caches built for an
        # older generation are rebuilt before use.
        self._generation = 0
        self._clusters: Optional[UnionFind] = None

    def __repr__(self) -> str:
        return (
            f"Sketch(name={self.name!r}, curves={len(self._curves)}, "
            f"constraints={len(self._constraints)}, points={len(self._points)})"
        )

    def __len__(self) -> int:
        return len(self._curves)

    # ========== Read accessors ==========

    @property
    def curves(self) -> Tuple[Curve, ...]:
        """Copies of the stored curves; edit geometry through :meth:`set_endpoint`."""
        return tuple(curve.copy() for curve in self._curves)

    @property
    def constraints(self) -> Tuple[Coincident, ...]:
        return tuple(self._constraints)

    @property
    def points(self) -> Tuple[Point2, ...]:
        """Auxiliary points, recorded for visualization only."""
        return tuple(self._points)

    @property
    def curve_count(self) -> int:
        return len(self._curves)

    @property
    def plane(self) -> PlaneBinding:
        return self._plane

    @plane.setter
    def plane(self, plane: PlaneBinding) -> None:
        self._plane = plane

    @property
    def generation(self) -> int:
        return self._generation

    def curve(self, curve_id: int) -> Curve:
        return self._curves[self._check_curve(curve_id)].copy()

    def endpoint(self, ref) -> Point2:
        ref = self._check_ref(ref)
        return self._curves[ref.curve].endpoint(ref.end)

    def endpoint_refs(self) -> List[EndpointRef]:
        """Every endpoint of the sketch, ordered by endpoint key."""
        return [EndpointRef(cid, end) for cid in range(len(self._curves)) for end in (0, 1)]

    # ========== Mutation ==========

    def add_line(self, a: Point2Like, b: Point2Like) -> int:
        """Append a line from ``a`` to ``b`` and return its curve id."""
        return self._append_curve(Line(as_point(a), as_point(b)))

    def add_arc(
        self,
        center: Point2Like,
        a: Point2Like,
        b: Point2Like,
        clockwise: bool = False,
    ) -> int:
        """Append an arc around ``center`` from ``a`` to ``b`` and return its id."""
        return self._append_curve(
            Arc(as_point(center), as_point(a), as_point(b), clockwise)
        )

    def add_point(self, point: Point2Like) -> Point2:
        point = as_point(point)
        self._points.append(point)
        return point

    def add_coincident(self, a, b) -> Coincident:
        """Constrain two endpoints to the same location.

        Args:
            a: ``EndpointRef`` or ``(curve, end)`` pair
            b: ``EndpointRef`` or ``(curve, end)`` pair

        Raises:
            InvalidReference: If either reference names a missing endpoint
        """
        constraint = Coincident(self._check_ref(a), self._check_ref(b))
        self._constraints.append(constraint)
        return constraint

    def set_endpoint(self, ref, point: Point2Like) -> None:
        ref = self._check_ref(ref)
        self._curves[ref.curve].set_endpoint(ref.end, as_point(point))
        self._touch()

    def replace_curve(self, curve_id: int, curve: Curve) -> None:
        """Overwrite a curve in place, keeping its id."""
        self._curves[self._check_curve(curve_id)] = curve
        self._touch()

    def repoint_constraints(self, old, new) -> int:
        """Redirect every constraint that references ``old`` to ``new``."""
        old = self._check_ref(old)
        new = self._check_ref(new)
        count = 0
        for constraint in self._constraints:
            if constraint.references(old):
                constraint.repoint(old, new)
                count += 1
        return count

    def split_line(self, curve_id: int, point: Point2Like) -> int:
        """Split a line at ``point`` into ``[p1, point]`` and ``[point, p2]``.

        The head keeps ``curve_id``; the tail is appended and its id returned.
        Constraints on the old end 1 move to the tail's end 1, and the two
        halves are tied together with a coincident constraint.
        """
        line = self.curve(curve_id)
        if not isinstance(line, Line):
            raise TypeError(f"Curve {curve_id} is not a line")

        point = as_point(point)
        tail_start, tail_end = point, line.p2
        self.replace_curve(curve_id, Line(line.p1, point))
        tail_id = self._append_curve(Line(tail_start, tail_end))

        self.repoint_constraints(EndpointRef(curve_id, 1), EndpointRef(tail_id, 1))
        self.add_coincident(EndpointRef(curve_id, 1), EndpointRef(tail_id, 0))
        logger.debug("Split curve %d at %s, tail is curve %d", curve_id, point, tail_id)
        return tail_id

    def clear(self) -> None:
        """Drop all curves, constraints and points and reset the plane to XY."""
        self._load([], [], [], PlaneBinding.xy_plane())

    def _append_curve(self, curve: Curve) -> int:
        self._curves.append(curve)
        self._touch()
        return len(self._curves) - 1

    def _touch(self) -> None:
        self._generation += 1

    def _load(
        self,
        curves: List[Curve],
        points: List[Point2],
        constraints: List[Coincident],
        plane: PlaneBinding,
    ) -> None:
        self._curves = curves
        self._points = points
        self._constraints = constraints
        self._plane = plane
        self._clusters = None
        self._touch()

    def _check_curve(self, curve_id) -> int:
        if isinstance(curve_id, bool):
            raise InvalidReference(f"Curve id must be an integer, got {curve_id!r}")
        try:
            curve_id = operator.index(curve_id)
        except TypeError:
            raise InvalidReference(
                f"Curve id must be an integer, got {curve_id!r}"
            ) from None
        if not 0 <= curve_id < len(self._curves):
            raise InvalidReference(
                f"Curve {curve_id} does not exist (sketch has {len(self._curves)} curves)"
            )
        return curve_id

    def _check_ref(self, ref) -> EndpointRef:
        try:
            curve_id, end = ref
        except (TypeError, ValueError):
            raise InvalidReference(f"Not an endpoint reference: {ref!r}") from None
        curve_id = self._check_curve(curve_id)
        if isinstance(end, bool) or end not in (0, 1):
            raise InvalidReference(f"Endpoint index must be 0 or 1, got {end!r}")
        return EndpointRef(curve_id, int(end))

    # ========== Coincidence resolution ==========

    def endpoint_index(self, exclude: Sequence[int] = ()) -> KdTree2D:
        """Spatial index over all current endpoints, ids are endpoint keys."""
        skip = set(exclude)
        snapshot = []
        for cid, curve in enumerate(self._curves):
            if cid in skip:
                continue
            for end in (0, 1):
                p = curve.endpoint(end)
                snapshot.append((p.x, p.y, cid * 2 + end))
        return KdTree2D(snapshot)

    def _proximity_clusters(self, tol: float) -> UnionFind:
        uf = UnionFind(2 * len(self._curves), self._generation, tol)
        index = self.endpoint_index()
        tol = max(tol, 0.0)
        for cid, curve in enumerate(self._curves):
            for end in (0, 1):
                key = cid * 2 + end
                p = curve.endpoint(end)

                def weld(x, y, other, key=key):
                    # each unordered pair is handled from its lower key only
                    if other > key:
                        uf.union(key, other)

                index.range_query(p.x - tol, p.y - tol, p.x + tol, p.y + tol, weld)
        return uf

    def solve_constraints(self, tol: float = DEFAULT_TOLERANCE) -> None:
        """Weld coincident endpoints and snap every cluster to its centroid.

        Endpoints within ``tol`` of each other (per axis) and endpoints joined
        by a coincident constraint end up in one cluster. Every member of a
        cluster receives the arithmetic mean of the cluster's coordinates.
        """
        uf = self._proximity_clusters(tol)
        for constraint in self._constraints:
            uf.union(constraint.a.key, constraint.b.key)

        members: Dict[int, List[int]] = {}
        for key in range(2 * len(self._curves)):
            members.setdefault(uf.find(key), []).append(key)

        moved = 0
        for keys in members.values():
            pts = [self._curves[k // 2].endpoint(k % 2) for k in keys]
            if all(p == pts[0] for p in pts):
                continue
            target = Point2(
                sum(p.x for p in pts) / len(pts), sum(p.y for p in pts) / len(pts)
            )
            for k in keys:
                self._curves[k // 2].set_endpoint(k % 2, target)
            moved += 1

        # geometry moved but cluster membership is exactly what we just built
        self._touch()
        uf.generation = self._generation
        self._clusters = uf
        logger.debug(
            "Solved %d constraints: %d endpoints in %d clusters, %d moved",
            len(self._constraints),
            uf.size,
            len(members),
            moved,
        )

    def clusters(self, tol: float = DEFAULT_TOLERANCE) -> UnionFind:
        """Endpoint clustering valid for the current curve store.

        Reuses the clustering left by :meth:`solve_constraints` when nothing
        changed since; otherwise clusters by geometric proximity only.
        """
        uf = self._clusters
        if (
            uf is None
            or uf.generation != self._generation
            or uf.size != 2 * len(self._curves)
            or uf.tolerance != tol
        ):
            uf = self._proximity_clusters(tol)
            self._clusters = uf
        return uf

    # ========== Topology ==========

    def add_line_auto(
        self, a: Point2Like, b: Point2Like, tol: float = DEFAULT_TOLERANCE
    ) -> int:
        """Add a line that snaps, splits and stitches itself into the sketch."""
        return insertion.add_line_auto(self, as_point(a), as_point(b), tol)

    def compute_wires(self, tol: float = DEFAULT_TOLERANCE) -> List[Wire]:
        return wires.compute_wires(self, tol)

    def compute_ordered_paths(self, tol: float = DEFAULT_TOLERANCE) -> List[OrderedPath]:
        return wires.compute_ordered_paths(self, tol)

    def to_occt_wires(self, tol: float = DEFAULT_TOLERANCE) -> List[projector.EdgeChain]:
        """3D edge chains, one per ordered path, ready for a solid kernel."""
        return projector.project_paths(self, self.compute_ordered_paths(tol), tol)

    def closed_paths(self, tol: float = DEFAULT_TOLERANCE) -> List[projector.EdgeChain]:
        """Edge chains that end where they start."""
        return [chain for chain in self.to_occt_wires(tol) if chain.is_closed(tol)]

    # ========== Persistence / display ==========

    def serialize(self) -> str:
        return serializer.dumps(self)

    def deserialize(self, data: str) -> None:
        """Replace the whole sketch with the content of ``data``.

        Raises:
            MalformedDocument: If ``data`` cannot be parsed; the sketch is left
                unchanged in that case.
        """
        curves, points, constraints, plane = serializer.loads(data)
        self._load(curves, points, constraints, plane)

    @classmethod
    def from_text(cls, data: str, name: str = "Sketch") -> "Sketch":
        sketch = cls(name=name)
        sketch.deserialize(data)
        return sketch

    def to_png(
        self,
        file_name: Optional[str] = None,
        width: int = 800,
        height: int = 600,
        margin: float = 0.1,
    ) -> None:
        """
        Render the sketch to a PNG image.

        Args:
            file_name: Path to save the PNG file. If None, displays in a UI window instead.
            width: Image width in pixels (default: 800)
            height: Image height in pixels (default: 600)
            margin: Margin around the sketch as a fraction of size (default: 0.1)
        """
        from .render import render_sketch

        render_sketch(self, file_name, width=width, height=height, margin=margin)
