import numpy as np

from rapidsketch import KdTree2D


def _brute_force(points, box):
    xmin, ymin, xmax, ymax = box
    return sorted(
        pid for x, y, pid in points if xmin <= x <= xmax and ymin <= y <= ymax
    )


def test_empty_tree():
    tree = KdTree2D([])
    assert len(tree) == 0
    assert tree.query_box(-1, -1, 1, 1) == []


def test_bounds_are_inclusive():
    tree = KdTree2D([(0.0, 0.0, "a"), (1.0, 1.0, "b"), (2.0, 2.0, "c")])
    found = sorted(pid for _, _, pid in tree.query_box(1.0, 1.0, 2.0, 2.0))
    assert found == ["b", "c"]


def test_inverted_box_matches_nothing():
    tree = KdTree2D([(0.0, 0.0, 0)])
    assert tree.query_box(1.0, 0.0, -1.0, 0.0) == []


def test_visits_each_match_once():
    points = [(1.0, 1.0, i) for i in range(20)]
    tree = KdTree2D(points, leaf_size=2)
    visited = []
    tree.range_query(0, 0, 2, 2, lambda x, y, pid: visited.append(pid))
    assert sorted(visited) == list(range(20))


def test_matches_brute_force():
    rng = np.random.default_rng(12345)
    coords = rng.uniform(0.0, 100.0, size=(500, 2))
    # some exact duplicates
    coords[::25] = coords[1::25]
    points = [(float(x), float(y), i) for i, (x, y) in enumerate(coords)]
    tree = KdTree2D(points)

    for _ in range(200):
        x0, y0 = rng.uniform(-10.0, 100.0, size=2)
        w, h = rng.uniform(0.0, 30.0, size=2)
        box = (x0, y0, x0 + w, y0 + h)
        found = sorted(pid for _, _, pid in tree.query_box(*box))
        assert found == _brute_force(points, box)


def test_query_near_uses_per_axis_tolerance():
    tree = KdTree2D([(0.9, 0.9, "corner"), (1.5, 0.0, "far")])
    found = [pid for _, _, pid in tree.query_near(0.0, 0.0, 1.0)]
    # (0.9, 0.9) is ~1.27 away but inside the box
    assert found == ["corner"]
