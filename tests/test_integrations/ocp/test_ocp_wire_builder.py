"""
Tests for exporting sketches as OCP wires.
"""

import math

import pytest

try:
    from OCP.BRepGProp import BRepGProp
    from OCP.GProp import GProp_GProps

    from rapidsketch.integrations.ocp.wire_builder import (
        build_wires,
        chain_to_wire,
        edge_count,
    )

    OCP_AVAILABLE = True
except ImportError:
    OCP_AVAILABLE = False

from rapidsketch import Sketch
from rapidsketch.projector import EdgeChain

pytestmark = pytest.mark.skipif(not OCP_AVAILABLE, reason="OCP not available")


def _wire_length(wire):
    props = GProp_GProps()
    BRepGProp.LinearProperties_s(wire, props)
    return props.Mass()


def test_rectangle_wire():
    s = Sketch()
    ids = [
        s.add_line((0, 0), (10, 0)),
        s.add_line((10, 0), (10, 5)),
        s.add_line((10, 5), (0, 5)),
        s.add_line((0, 5), (0, 0)),
    ]
    for a, b in zip(ids, ids[1:] + ids[:1]):
        s.add_coincident((a, 1), (b, 0))
    s.solve_constraints()

    wires = build_wires(s)
    assert len(wires) == 1
    assert edge_count(wires[0]) == 4
    assert _wire_length(wires[0]) == pytest.approx(30.0)


def test_arc_and_line_wire():
    s = Sketch()
    arc = s.add_arc((0, 0), (1, 0), (0, 1))
    line = s.add_line((0, 1), (0, 2))
    s.add_coincident((arc, 1), (line, 0))
    s.solve_constraints()

    (wire,) = build_wires(s)
    assert edge_count(wire) == 2
    assert _wire_length(wire) == pytest.approx(math.pi / 2 + 1.0)


def test_clockwise_arc_connects():
    s = Sketch()
    s.add_line((0, 2), (0, 1))
    s.add_arc((0, 0), (0, 1), (1, 0), clockwise=True)
    s.solve_constraints()

    (wire,) = build_wires(s)
    assert edge_count(wire) == 2
    assert _wire_length(wire) == pytest.approx(1.0 + math.pi / 2)


def test_degenerate_paths_are_skipped():
    s = Sketch()
    s.add_line((0, 0), (0, 0))
    assert build_wires(s) == []


def test_empty_chain_raises():
    with pytest.raises(ValueError):
        chain_to_wire(EdgeChain())
