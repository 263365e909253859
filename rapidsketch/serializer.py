"""
Line-oriented text encoding of a sketch.

Format::

    curves <N>
    L <x1> <y1> <x2> <y2>
    A <cx> <cy> <x1> <y1> <x2> <y2> <cw:0|1>
    points <M>
    P <x> <y>
    constraints <K>
    C <curveA> <endA> <curveB> <endB>
    plane <ox> <oy> <oz> <nx> <ny> <nz> <xx> <xy> <xz>
    planeId <id>

Extra tokens at the end of a line are ignored, as are unknown lines after the
constraints section. Floats are written with ``repr`` so they round-trip
exactly.
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from .cad_types import Point2
from .constants import (
    RECORD_LENGTHS,
    SECTION_CONSTRAINTS,
    SECTION_CURVES,
    SECTION_PLANE,
    SECTION_PLANE_ID,
    SECTION_POINTS,
    TAG_ARC,
    TAG_COINCIDENT,
    TAG_LINE,
    TAG_POINT,
)
from .constraints import Coincident, EndpointRef
from .exceptions import MalformedDocument
from .primitives import Arc, Curve, Line
from .workplane import PlaneBinding

if TYPE_CHECKING:
    from .sketch import Sketch

logger = logging.getLogger(__name__)

ParsedSketch = Tuple[List[Curve], List[Point2], List[Coincident], PlaneBinding]


def _num(value: float) -> str:
    return repr(float(value))


def dumps(sketch: "Sketch") -> str:
    out = [f"{SECTION_CURVES} {sketch.curve_count}"]
    for curve in sketch.curves:
        if isinstance(curve, Line):
            coords = (curve.p1.x, curve.p1.y, curve.p2.x, curve.p2.y)
            out.append(" ".join([TAG_LINE] + [_num(v) for v in coords]))
        elif isinstance(curve, Arc):
            coords = (
                curve.center.x,
                curve.center.y,
                curve.p1.x,
                curve.p1.y,
                curve.p2.x,
                curve.p2.y,
            )
            out.append(
                " ".join([TAG_ARC] + [_num(v) for v in coords])
                + f" {1 if curve.clockwise else 0}"
            )
        else:
            raise TypeError(f"Unsupported curve type: {type(curve).__name__}")

    out.append(f"{SECTION_POINTS} {len(sketch.points)}")
    for point in sketch.points:
        out.append(f"{TAG_POINT} {_num(point.x)} {_num(point.y)}")

    out.append(f"{SECTION_CONSTRAINTS} {len(sketch.constraints)}")
    for c in sketch.constraints:
        out.append(f"{TAG_COINCIDENT} {c.a.curve} {c.a.end} {c.b.curve} {c.b.end}")

    plane = sketch.plane
    out.append(" ".join([SECTION_PLANE] + [_num(v) for v in plane.as_tuple()]))
    if plane.plane_id is not None:
        out.append(f"{SECTION_PLANE_ID} {plane.plane_id}")
    return "\n".join(out) + "\n"


class _Reader:
    """Cursor over the non-blank lines of a document."""

    def __init__(self, data: str):
        self._lines = [
            (number, line.split())
            for number, line in enumerate(data.splitlines(), start=1)
            if line.strip()
        ]
        self._pos = 0

    def peek(self) -> Optional[Tuple[int, List[str]]]:
        if self._pos < len(self._lines):
            return self._lines[self._pos]
        return None

    def next(self, expected: str) -> Tuple[int, List[str]]:
        line = self.peek()
        if line is None:
            raise MalformedDocument(f"unexpected end of document, expected {expected}")
        self._pos += 1
        return line

    def header(self, name: str) -> int:
        number, tokens = self.next(f"'{name}' section")
        if tokens[0] != name:
            raise MalformedDocument(f"expected '{name}' section, got '{tokens[0]}'", number)
        if len(tokens) < 2:
            raise MalformedDocument(f"'{name}' section is missing its count", number)
        try:
            count = int(tokens[1])
        except ValueError:
            raise MalformedDocument(f"invalid {name} count '{tokens[1]}'", number) from None
        if count < 0:
            raise MalformedDocument(f"negative {name} count {count}", number)
        return count

    def record(self, tags: Sequence[str]) -> Tuple[int, List[str]]:
        number, tokens = self.next(f"a {'/'.join(tags)} record")
        tag = tokens[0]
        if tag not in tags:
            raise MalformedDocument(f"unexpected record '{tag}'", number)
        if len(tokens) < RECORD_LENGTHS[tag]:
            raise MalformedDocument(
                f"'{tag}' record needs {RECORD_LENGTHS[tag] - 1} values, got {len(tokens) - 1}",
                number,
            )
        return number, tokens[: RECORD_LENGTHS[tag]]

    def remaining(self):
        while self._pos < len(self._lines):
            yield self._lines[self._pos]
            self._pos += 1


def _floats(tokens: Sequence[str], number: int) -> List[float]:
    try:
        return [float(t) for t in tokens]
    except ValueError:
        raise MalformedDocument(f"non-numeric value in {' '.join(tokens)}", number) from None


def _ints(tokens: Sequence[str], number: int) -> List[int]:
    try:
        return [int(t) for t in tokens]
    except ValueError:
        raise MalformedDocument(f"non-integer value in {' '.join(tokens)}", number) from None


def loads(data: str) -> ParsedSketch:
    """Parse a serialized sketch into fresh containers.

    Raises:
        MalformedDocument: On any structural or value error.
    """
    reader = _Reader(data)

    curves: List[Curve] = []
    for _ in range(reader.header(SECTION_CURVES)):
        number, tokens = reader.record((TAG_LINE, TAG_ARC))
        if tokens[0] == TAG_LINE:
            x1, y1, x2, y2 = _floats(tokens[1:], number)
            curves.append(Line(Point2(x1, y1), Point2(x2, y2)))
        else:
            cx, cy, x1, y1, x2, y2 = _floats(tokens[1:7], number)
            (cw,) = _ints(tokens[7:], number)
            curves.append(Arc(Point2(cx, cy), Point2(x1, y1), Point2(x2, y2), cw != 0))

    points: List[Point2] = []
    upcoming = reader.peek()
    if upcoming is not None and upcoming[1][0] == SECTION_POINTS:
        for _ in range(reader.header(SECTION_POINTS)):
            number, tokens = reader.record((TAG_POINT,))
            x, y = _floats(tokens[1:], number)
            points.append(Point2(x, y))

    constraints: List[Coincident] = []
    for _ in range(reader.header(SECTION_CONSTRAINTS)):
        number, tokens = reader.record((TAG_COINCIDENT,))
        ac, ae, bc, be = _ints(tokens[1:], number)
        for curve_id, end in ((ac, ae), (bc, be)):
            if not 0 <= curve_id < len(curves) or end not in (0, 1):
                raise MalformedDocument(
                    f"constraint references missing endpoint ({curve_id}, {end})", number
                )
        constraints.append(Coincident(EndpointRef(ac, ae), EndpointRef(bc, be)))

    plane = PlaneBinding.xy_plane()
    plane_id = None
    for number, tokens in reader.remaining():
        if tokens[0] == SECTION_PLANE:
            if len(tokens) < 10:
                raise MalformedDocument(
                    f"'{SECTION_PLANE}' needs 9 values, got {len(tokens) - 1}", number
                )
            values = _floats(tokens[1:10], number)
            try:
                plane = PlaneBinding(values[0:3], values[3:6], values[6:9])
            except ValueError as e:
                raise MalformedDocument(str(e), number) from None
        elif tokens[0] == SECTION_PLANE_ID:
            if len(tokens) < 2:
                raise MalformedDocument(f"'{SECTION_PLANE_ID}' is missing its value", number)
            (plane_id,) = _ints(tokens[1:2], number)
        else:
            logger.debug("Skipping unknown line %d: %s", number, " ".join(tokens))
    plane.plane_id = plane_id

    return curves, points, constraints, plane
