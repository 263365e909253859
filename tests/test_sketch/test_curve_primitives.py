import math

import pytest

from rapidsketch import Arc, Line, Vector
from rapidsketch.cad_types import Point2


class TestLine:
    def test_points_are_coerced(self):
        line = Line((0, 0), (3, 4))
        assert isinstance(line.p1, Point2)
        assert line.length() == pytest.approx(5.0)

    def test_point_at(self):
        line = Line((0, 0), (10, 0))
        assert line.point_at(0.25) == Point2(2.5, 0.0)

    def test_set_endpoint(self):
        line = Line((0, 0), (1, 0))
        line.set_endpoint(1, (2, 2))
        assert line.endpoint(1) == Point2(2.0, 2.0)

    def test_copy_is_independent(self):
        line = Line((0, 0), (1, 0))
        clone = line.copy()
        clone.set_endpoint(0, (5, 5))
        assert line.p1 == Point2(0.0, 0.0)


class TestArc:
    def test_radius_from_start_point(self):
        arc = Arc((1, 1), (4, 5), (1, 6))
        assert arc.radius == pytest.approx(5.0)

    def test_sweep_direction(self):
        ccw = Arc((0, 0), (1, 0), (0, 1))
        cw = Arc((0, 0), (1, 0), (0, 1), clockwise=True)
        assert ccw.sweep() == pytest.approx(math.pi / 2)
        assert cw.sweep() == pytest.approx(3 * math.pi / 2)


def test_point_proximity_is_per_axis():
    p = Point2(0.0, 0.0)
    assert p.is_near(Point2(0.9, 0.9), 1.0)
    assert not p.is_near(Point2(1.1, 0.0), 1.0)


def test_vector_helpers():
    v = Vector(3, 4, 0)
    assert v.length() == pytest.approx(5.0)
    assert v.normalize() == Vector(0.6, 0.8, 0)
    assert Vector(1, 0, 0).cross((0, 1, 0)) == Vector(0, 0, 1)
    with pytest.raises(ValueError):
        Vector(0, 0, 0).normalize()
