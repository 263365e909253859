from typing import Dict, List


class UnionFind:
    """Disjoint sets over the dense integers ``0..size-1``.

    Instances are tagged with the sketch generation they were built for so the
    owner can tell a stale clustering from a current one.
    """

    def __init__(self, size: int, generation: int = 0, tolerance: float = 0.0):
        self._parent: List[int] = list(range(size))
        self._rank: List[int] = [0] * size
        self.generation = generation
        self.tolerance = tolerance

    def __len__(self) -> int:
        return len(self._parent)

    @property
    def size(self) -> int:
        return len(self._parent)

    def find(self, i: int) -> int:
        root = i
        while self._parent[root] != root:
            root = self._parent[root]
        # path compression
        while self._parent[i] != root:
            self._parent[i], i = root, self._parent[i]
        return root

    def union(self, a: int, b: int) -> bool:
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return False
        if self._rank[ra] < self._rank[rb]:
            ra, rb = rb, ra
        self._parent[rb] = ra
        if self._rank[ra] == self._rank[rb]:
            self._rank[ra] += 1
        return True

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def groups(self) -> Dict[int, List[int]]:
        """Members of every set keyed by root, members in ascending order."""
        result: Dict[int, List[int]] = {}
        for i in range(len(self._parent)):
            result.setdefault(self.find(i), []).append(i)
        return result
