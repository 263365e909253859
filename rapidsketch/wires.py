"""
Wire building: connected components of curves and deterministic ordered walks
through each component.
"""

import logging
from collections import deque
from typing import TYPE_CHECKING, Dict, List, Tuple

from .constants import DEFAULT_TOLERANCE
from .constraints import OrderedCurve, OrderedPath, Wire

if TYPE_CHECKING:
    from .sketch import Sketch

logger = logging.getLogger(__name__)


def _cluster_refs(sketch: "Sketch", tol: float) -> Tuple[List[Tuple[int, int]], Dict[int, List[Tuple[int, int]]]]:
    """Cluster of each curve's two ends, and the ``(curve, end)`` refs per cluster."""
    uf = sketch.clusters(tol)
    ends: List[Tuple[int, int]] = []
    refs: Dict[int, List[Tuple[int, int]]] = {}
    for cid in range(sketch.curve_count):
        c0 = uf.find(cid * 2)
        c1 = uf.find(cid * 2 + 1)
        ends.append((c0, c1))
        refs.setdefault(c0, []).append((cid, 0))
        refs.setdefault(c1, []).append((cid, 1))
    return ends, refs


def compute_wires(sketch: "Sketch", tol: float = DEFAULT_TOLERANCE) -> List[Wire]:
    """Partition the sketch's curves into connected wires.

    Two curves are adjacent when they share an endpoint cluster. Components
    are discovered breadth-first from the lowest unvisited curve id, visiting
    neighbours in ascending id order. Isolated curves form their own wire.
    """
    n = sketch.curve_count
    _, refs = _cluster_refs(sketch, tol)

    adjacency: List[set] = [set() for _ in range(n)]
    for members in refs.values():
        curve_ids = sorted({cid for cid, _ in members})
        for i, a in enumerate(curve_ids):
            for b in curve_ids[i + 1:]:
                adjacency[a].add(b)
                adjacency[b].add(a)

    visited = [False] * n
    result: List[Wire] = []
    for start in range(n):
        if visited[start]:
            continue
        wire = Wire()
        queue = deque([start])
        visited[start] = True
        while queue:
            u = queue.popleft()
            wire.curves.append(u)
            for v in sorted(adjacency[u]):
                if not visited[v]:
                    visited[v] = True
                    queue.append(v)
        result.append(wire)

    logger.debug("Found %d wires over %d curves", len(result), n)
    return result


def compute_ordered_paths(
    sketch: "Sketch", tol: float = DEFAULT_TOLERANCE
) -> List[OrderedPath]:
    """Linearize every wire into one or more oriented curve sequences.

    Each walk starts at a cluster of odd remaining degree when one exists and
    greedily follows the lowest unused curve id at each cluster. Walks repeat
    until every curve of the wire has been used exactly once.
    """
    ends, refs = _cluster_refs(sketch, tol)
    paths: List[OrderedPath] = []

    for wire in compute_wires(sketch, tol):
        members = sorted(wire.curves)
        member_set = set(members)
        used = set()

        degree: Dict[int, int] = {}
        for cid in members:
            for cluster in ends[cid]:
                degree[cluster] = degree.get(cluster, 0) + 1

        def pick_start() -> int:
            for cid in members:
                for cluster in ends[cid]:
                    if degree[cluster] % 2 == 1:
                        return cluster
            first_unused = next(cid for cid in members if cid not in used)
            return ends[first_unused][0]

        while len(used) < len(members):
            current = pick_start()
            path: OrderedPath = []
            while True:
                candidate = None
                # refs are stored in ascending (curve, end) order
                for cid, end in refs[current]:
                    if cid not in used and cid in member_set:
                        candidate = (cid, end)
                        break
                if candidate is None:
                    break

                cid, end = candidate
                used.add(cid)
                for cluster in ends[cid]:
                    degree[cluster] -= 1
                path.append(OrderedCurve(cid, reversed=(end == 1)))
                current = ends[cid][1 - end]

            # an odd remaining degree implies an unused incident curve, so the
            # walk always consumes at least one curve
            paths.append(path)

    logger.debug("Extracted %d ordered paths", len(paths))
    return paths
