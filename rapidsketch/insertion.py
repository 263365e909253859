"""
Interactive line insertion.

``add_line_auto`` adds a line the way a CAD sketcher does while drawing: new
endpoints snap onto nearby endpoints, endpoints landing on an existing line
split it (T-junction), and lines crossed by the new one are split together
with the new line itself. Every junction is recorded as a coincident
constraint so that later wire building sees one connected graph.
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

from .cad_types import Point2
from .constraints import EndpointRef
from .geometry import (
    Crossing,
    is_interior_projection,
    project_onto_segment,
    proper_crossing,
)
from .primitives import Line

if TYPE_CHECKING:
    from .sketch import Sketch

logger = logging.getLogger(__name__)


def nearest_endpoint(
    sketch: "Sketch", point: Point2, tol: float, exclude=()
) -> Optional[EndpointRef]:
    """Closest endpoint inside the ``tol`` box around ``point``, ties by lowest key."""
    best = None
    for x, y, key in sketch.endpoint_index(exclude).query_near(point.x, point.y, tol):
        rank = ((x - point.x) ** 2 + (y - point.y) ** 2, key)
        if best is None or rank < best:
            best = rank
    if best is None:
        return None
    return EndpointRef.from_key(best[1])


def _snap(sketch: "Sketch", a: Point2, b: Point2, tol: float):
    targets: List[Optional[EndpointRef]] = []
    snapped: List[Point2] = []
    for point in (a, b):
        target = nearest_endpoint(sketch, point, tol)
        targets.append(target)
        snapped.append(sketch.endpoint(target) if target is not None else point)
    return snapped, targets


def _split_at_t_junctions(sketch: "Sketch", new_id: int, tol: float) -> None:
    for end in (0, 1):
        point = sketch.curve(new_id).endpoint(end)
        # first match by ascending id wins, at most one split per endpoint
        for cid in range(sketch.curve_count):
            curve = sketch.curve(cid)
            if cid == new_id or not isinstance(curve, Line):
                continue
            projection = project_onto_segment(point, curve)
            if projection is None or projection.distance > tol:
                continue
            if not is_interior_projection(projection, curve, tol):
                continue
            tail_id = sketch.split_line(cid, projection.point)
            sketch.add_coincident(EndpointRef(new_id, end), EndpointRef(cid, 1))
            logger.debug(
                "T-junction: end %d of curve %d splits curve %d (tail %d)",
                end,
                new_id,
                cid,
                tail_id,
            )
            break


def _crossings(sketch: "Sketch", new_id: int, tol: float) -> List[Tuple[int, Crossing]]:
    new_line = sketch.curve(new_id)
    found = []
    for cid, curve in enumerate(sketch.curves):
        if cid == new_id or not isinstance(curve, Line):
            continue
        crossing = proper_crossing(new_line, curve, tol)
        if crossing is not None:
            found.append((cid, crossing))
    return found


def _mark_auxiliary_points(sketch: "Sketch", new_id: int, tol: float) -> None:
    for _, crossing in _crossings(sketch, new_id, tol):
        if any(crossing.point.is_near(p, tol) for p in sketch.points):
            continue
        sketch.add_point(crossing.point)


def _split_crossings(sketch: "Sketch", new_id: int, tol: float) -> None:
    crossings = sorted(_crossings(sketch, new_id, tol), key=lambda item: item[1].t)
    if not crossings:
        return

    # several curves may pass through one cut point on the new line
    cuts: List[Point2] = []
    crossed: List[List[int]] = []
    for cid, crossing in crossings:
        for index, cut in enumerate(cuts):
            if crossing.point.is_near(cut, tol):
                break
        else:
            index = len(cuts)
            cuts.append(crossing.point)
            crossed.append([])
        crossed[index].append(cid)

    for cid, crossing in crossings:
        sketch.split_line(cid, crossing.point)

    new_line = sketch.curve(new_id)
    stops = [new_line.p1] + cuts + [new_line.p2]

    sketch.replace_curve(new_id, Line(stops[0], stops[1]))
    pieces = [new_id]
    for start, stop in zip(stops[1:-1], stops[2:]):
        pieces.append(sketch.add_line(start, stop))

    # end 1 of the drawn line now belongs to the last piece
    sketch.repoint_constraints(EndpointRef(new_id, 1), EndpointRef(pieces[-1], 1))
    for prev, nxt in zip(pieces, pieces[1:]):
        sketch.add_coincident(EndpointRef(prev, 1), EndpointRef(nxt, 0))

    for piece, cut, split_ids in zip(pieces, cuts, crossed):
        target = nearest_endpoint(sketch, cut, tol, exclude=pieces)
        if target is not None:
            sketch.add_coincident(EndpointRef(piece, 1), target)
        for cid in split_ids:
            if EndpointRef(cid, 1) != target:
                sketch.add_coincident(EndpointRef(piece, 1), EndpointRef(cid, 1))

    logger.debug(
        "Curve %d crossed %d curves and was cut into %d pieces",
        new_id,
        len(crossings),
        len(pieces),
    )


def add_line_auto(sketch: "Sketch", a: Point2, b: Point2, tol: float) -> int:
    """
    Add a line from ``a`` to ``b`` and stitch it into the existing geometry.

    Args:
        sketch: Sketch to modify
        a: Requested start point
        b: Requested end point
        tol: Snap / split tolerance (per axis for snapping)

    Returns:
        int: Id of the new line. When the line was cut at crossings this is
        the id of its first piece; the other pieces are appended after it.
    """
    (a, b), targets = _snap(sketch, a, b, tol)

    new_id = sketch.add_line(a, b)
    for end, target in enumerate(targets):
        if target is not None:
            sketch.add_coincident(EndpointRef(new_id, end), target)

    _split_at_t_junctions(sketch, new_id, tol)
    _mark_auxiliary_points(sketch, new_id, tol)
    _split_crossings(sketch, new_id, tol)
    return new_id
