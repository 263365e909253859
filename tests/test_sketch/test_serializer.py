"""
Tests for the text encoding of sketches.
"""

import pytest

from rapidsketch import Arc, Line, MalformedDocument, PlaneBinding, Sketch, SketchError
from rapidsketch.cad_types import Point2


@pytest.fixture
def sketch():
    s = Sketch()
    l1 = s.add_line((0, 0), (10, 0))
    l2 = s.add_line((10, 0), (10, 5))
    a1 = s.add_arc((5, 5), (10, 5), (0, 5))
    s.add_line((0.1, 1 / 3), (2.0 / 7, 1e-17))
    s.add_coincident((l1, 1), (l2, 0))
    s.add_coincident((l2, 1), (a1, 0))
    s.add_point((1.5, -2.25))
    return s


def test_document_layout(sketch):
    text = sketch.serialize()
    lines = text.splitlines()
    assert lines[0] == "curves 4"
    assert lines[1] == "L 0.0 0.0 10.0 0.0"
    assert lines[3] == "A 5.0 5.0 10.0 5.0 0.0 5.0 0"
    assert "points 1" in lines
    assert "constraints 2" in lines
    assert "C 0 1 1 0" in lines
    assert lines[-1].startswith("plane ")
    assert text.endswith("\n")


def test_round_trip_is_exact(sketch):
    restored = Sketch.from_text(sketch.serialize())

    assert restored.curves == sketch.curves
    assert restored.points == sketch.points
    assert [(c.a, c.b) for c in restored.constraints] == [
        (c.a, c.b) for c in sketch.constraints
    ]
    assert restored.serialize() == sketch.serialize()


def test_round_trip_preserves_topology(sketch):
    restored = Sketch.from_text(sketch.serialize())
    sketch.solve_constraints()
    restored.solve_constraints()

    def partition(s):
        return sorted(sorted(w.curves) for w in s.compute_wires())

    assert partition(restored) == partition(sketch)
    assert restored.compute_ordered_paths() == sketch.compute_ordered_paths()


def test_plane_round_trip():
    s = Sketch(plane=PlaneBinding((1, 2, 3), (0, 1, 0), (1, 0, 0), plane_id=42))
    s.add_line((0, 0), (1, 0))

    text = s.serialize()
    assert "planeId 42" in text.splitlines()

    restored = Sketch.from_text(text)
    assert restored.plane.is_same(s.plane)
    assert restored.plane.plane_id == 42


def test_deserialize_replaces_content(sketch):
    other = Sketch()
    other.add_line((100, 100), (200, 200))
    other.deserialize(sketch.serialize())
    assert other.curve_count == 4


def test_document_without_points_section():
    s = Sketch.from_text("curves 1\nL 0 0 1 0\nconstraints 0\n")
    assert s.curves == (Line((0, 0), (1, 0)),)
    assert s.points == ()
    assert s.plane.is_same(PlaneBinding.xy_plane())
    assert s.plane.plane_id is None


def test_blank_lines_and_extra_tokens_are_ignored():
    text = "\ncurves 1\n\nA 0 0 1 0 0 1 1 trailing\npoints 0\nconstraints 0\nlayer 7\n"
    s = Sketch.from_text(text)
    assert s.curves == (Arc((0, 0), (1, 0), (0, 1), True),)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "curve 1\nL 0 0 1 0\nconstraints 0\n",
        "curves x\nconstraints 0\n",
        "curves -1\nconstraints 0\n",
        "curves 2\nL 0 0 1 0\n",
        "curves 1\nL 0 0 1\nconstraints 0\n",
        "curves 1\nQ 0 0 1 0\nconstraints 0\n",
        "curves 1\nL 0 0 one 0\nconstraints 0\n",
        "curves 1\nL 0 0 1 0\npoints 0\n",
        "curves 1\nL 0 0 1 0\nconstraints 1\nC 0 1 5 0\n",
        "curves 1\nL 0 0 1 0\nconstraints 1\nC 0 2 0 0\n",
        "curves 0\nconstraints 0\nplane 0 0 0 0 0 0 1 0 0\n",
        "curves 0\nconstraints 0\nplaneId abc\n",
        "curves 0\nconstraints 0\nplane 0 0 0 0 0 1\n",
        "curves 0\nconstraints 0\nplaneId\n",
    ],
)
def test_malformed_documents_are_rejected(text):
    with pytest.raises(MalformedDocument):
        Sketch.from_text(text)


def test_failed_deserialize_leaves_sketch_untouched(sketch):
    before = sketch.serialize()
    generation = sketch.generation

    with pytest.raises(SketchError):
        sketch.deserialize("curves 2\nL 0 0 1 0\nL 0 0\nconstraints 0\n")

    assert sketch.serialize() == before
    assert sketch.generation == generation


def test_error_reports_line_number():
    with pytest.raises(MalformedDocument) as excinfo:
        Sketch.from_text("curves 1\nL 0 0 x 0\nconstraints 0\n")
    assert excinfo.value.line_number == 2
    assert "line 2" in str(excinfo.value)


def test_malformed_document_is_a_value_error():
    with pytest.raises(ValueError):
        Sketch.from_text("nonsense")


def test_floats_are_not_rounded():
    s = Sketch()
    s.add_line((0.1 + 0.2, 1e-300), (123456789.123456789, -0.0))
    restored = Sketch.from_text(s.serialize())
    assert restored.curve(0).p1 == Point2(0.1 + 0.2, 1e-300)
    assert restored.curve(0).p2.x == 123456789.123456789
