import pytest

from rapidsketch import Arc, EndpointRef, InvalidReference, Line, Sketch
from rapidsketch.cad_types import Point2


def test_add_lines_and_arcs():
    s = Sketch()

    l0 = s.add_line((0, 0), (10, 0))
    l1 = s.add_line((10, 0), (10, 10))
    a0 = s.add_arc((5, 5), (6, 5), (5, 6), True)

    assert (l0, l1, a0) == (0, 1, 2)
    assert s.curve_count == 3

    curves = s.curves
    assert isinstance(curves[0], Line)
    assert curves[0].p1 == Point2(0.0, 0.0)
    assert curves[0].p2 == Point2(10.0, 0.0)

    assert isinstance(curves[2], Arc)
    assert curves[2].center == Point2(5.0, 5.0)
    assert curves[2].clockwise is True


def test_endpoint_keys_are_dense():
    s = Sketch()
    s.add_line((0, 0), (1, 0))
    s.add_arc((0, 0), (1, 0), (0, 1))

    keys = [ref.key for ref in s.endpoint_refs()]
    assert keys == [0, 1, 2, 3]
    assert EndpointRef.from_key(3) == EndpointRef(1, 1)
    assert s.endpoint((1, 1)) == Point2(0.0, 1.0)


def test_accessors_are_read_only_views():
    s = Sketch()
    s.add_line((0, 0), (1, 0))
    curves = s.curves
    assert isinstance(curves, tuple)
    with pytest.raises(AttributeError):
        curves.append(Line((0, 0), (2, 0)))
    assert s.curve_count == 1


class TestInvalidReference:
    """Malformed references fail loudly instead of indexing out of range."""

    def test_coincident_to_missing_curve(self):
        s = Sketch()
        s.add_line((0, 0), (1, 0))
        with pytest.raises(InvalidReference):
            s.add_coincident((0, 1), (5, 0))
        assert s.constraints == ()

    def test_endpoint_index_out_of_range(self):
        s = Sketch()
        s.add_line((0, 0), (1, 0))
        with pytest.raises(InvalidReference):
            s.add_coincident((0, 2), (0, 0))
        with pytest.raises(InvalidReference):
            s.endpoint((0, -1))

    def test_negative_curve_id(self):
        s = Sketch()
        s.add_line((0, 0), (1, 0))
        with pytest.raises(InvalidReference):
            s.curve(-1)

    def test_is_an_index_error(self):
        s = Sketch()
        with pytest.raises(IndexError):
            s.curve(0)

    def test_garbage_reference(self):
        s = Sketch()
        s.add_line((0, 0), (1, 0))
        with pytest.raises(InvalidReference):
            s.add_coincident("a", (0, 0))


def test_split_line_repoints_end_constraints():
    s = Sketch()
    l0 = s.add_line((0, 0), (10, 0))
    l1 = s.add_line((10, 0), (10, 10))
    s.add_coincident((l0, 1), (l1, 0))

    tail = s.split_line(l0, (4, 0))

    assert tail == 2
    assert s.curve(l0).p2 == Point2(4.0, 0.0)
    assert s.curve(tail).p1 == Point2(4.0, 0.0)
    assert s.curve(tail).p2 == Point2(10.0, 0.0)
    assert s.constraints[0].a == EndpointRef(tail, 1)
    assert s.constraints[0].b == EndpointRef(l1, 0)
    # head and tail are stitched together
    assert s.constraints[1].a == EndpointRef(l0, 1)
    assert s.constraints[1].b == EndpointRef(tail, 0)


def test_split_line_rejects_arcs():
    s = Sketch()
    arc = s.add_arc((0, 0), (1, 0), (0, 1))
    with pytest.raises(TypeError):
        s.split_line(arc, (0.5, 0.5))


def test_returned_curves_do_not_alias_the_store():
    s = Sketch()
    s.add_line((0, 0), (1, 0))
    s.add_line((5, 0), (6, 0))
    s.solve_constraints()
    generation = s.generation

    s.curve(0).set_endpoint(1, (5, 0))
    s.curves[1].set_endpoint(0, (1, 0))

    assert s.curve(0).p2 == Point2(1.0, 0.0)
    assert s.curve(1).p1 == Point2(5.0, 0.0)
    assert s.generation == generation
    assert len(s.compute_wires()) == 2


def test_set_endpoint_invalidates_clusters():
    s = Sketch()
    s.add_line((0, 0), (1, 0))
    s.add_line((5, 0), (6, 0))
    s.solve_constraints()
    assert len(s.compute_wires()) == 2

    s.set_endpoint((1, 0), (1, 0))
    assert len(s.compute_wires()) == 1
