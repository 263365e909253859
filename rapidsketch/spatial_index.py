"""
2D k-d tree over a fixed snapshot of points, used for endpoint proximity
queries. The tree is immutable; rebuild it whenever the sketch changes.
"""

from typing import Any, Callable, Hashable, List, Optional, Sequence, Tuple

import numpy as np

from .constants import KDTREE_LEAF_SIZE

IndexedPoint = Tuple[float, float, Hashable]


class _Node:
    __slots__ = ("bbox", "left", "right", "indices")

    def __init__(self, bbox, left=None, right=None, indices=None):
        self.bbox = bbox  # (xmin, ymin, xmax, ymax) of the whole subtree
        self.left = left
        self.right = right
        self.indices = indices  # only set on leaves


class KdTree2D:
    """Balanced 2D tree alternating x/y splits, with per-node bounding boxes.

    Args:
        points: ``(x, y, opaque_id)`` triples. Ids are handed back untouched.
        leaf_size: Maximum number of points stored in a leaf bucket.
    """

    def __init__(
        self, points: Sequence[IndexedPoint], leaf_size: int = KDTREE_LEAF_SIZE
    ):
        self._ids: List[Any] = [p[2] for p in points]
        self._coords = np.array(
            [(float(p[0]), float(p[1])) for p in points], dtype=float
        ).reshape(-1, 2)
        self._leaf_size = max(1, int(leaf_size))
        self._root: Optional[_Node] = None
        if len(self._ids):
            self._root = self._build(np.arange(len(self._ids)), 0)

    def __len__(self) -> int:
        return len(self._ids)

    def _build(self, indices: np.ndarray, depth: int) -> _Node:
        pts = self._coords[indices]
        mins = pts.min(axis=0)
        maxs = pts.max(axis=0)
        bbox = (float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))

        if len(indices) <= self._leaf_size:
            return _Node(bbox, indices=indices)

        axis = depth % 2
        mid = len(indices) // 2
        order = np.argpartition(pts[:, axis], mid)
        left = self._build(indices[order[:mid]], depth + 1)
        right = self._build(indices[order[mid:]], depth + 1)
        return _Node(bbox, left=left, right=right)

    def range_query(
        self,
        xmin: float,
        ymin: float,
        xmax: float,
        ymax: float,
        visit: Callable[[float, float, Any], None],
    ) -> None:
        """Call ``visit(x, y, id)`` once for every point inside the closed box."""
        if self._root is None or xmin > xmax or ymin > ymax:
            return

        stack = [self._root]
        while stack:
            node = stack.pop()
            bx0, by0, bx1, by1 = node.bbox
            if bx0 > xmax or bx1 < xmin or by0 > ymax or by1 < ymin:
                continue

            if xmin <= bx0 and bx1 <= xmax and ymin <= by0 and by1 <= ymax:
                self._visit_subtree(node, visit)
                continue

            if node.indices is not None:
                for i in node.indices:
                    x, y = self._coords[i]
                    if xmin <= x <= xmax and ymin <= y <= ymax:
                        visit(float(x), float(y), self._ids[i])
            else:
                stack.append(node.right)
                stack.append(node.left)

    def _visit_subtree(self, node: _Node, visit) -> None:
        stack = [node]
        while stack:
            current = stack.pop()
            if current.indices is not None:
                for i in current.indices:
                    x, y = self._coords[i]
                    visit(float(x), float(y), self._ids[i])
            else:
                stack.append(current.right)
                stack.append(current.left)

    def query_box(
        self, xmin: float, ymin: float, xmax: float, ymax: float
    ) -> List[IndexedPoint]:
        """Collect every point inside the closed box."""
        found: List[IndexedPoint] = []
        self.range_query(
            xmin, ymin, xmax, ymax, lambda x, y, pid: found.append((x, y, pid))
        )
        return found

    def query_near(self, x: float, y: float, tol: float) -> List[IndexedPoint]:
        """Points with ``|dx| <= tol`` and ``|dy| <= tol`` around ``(x, y)``."""
        tol = max(tol, 0.0)
        return self.query_box(x - tol, y - tol, x + tol, y + tol)
