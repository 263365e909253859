"""Endpoint references, constraints and traversal records."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple


class EndpointRef(NamedTuple):
    """One endpoint of a curve: ``end`` 0 selects ``p1``, 1 selects ``p2``."""

    curve: int
    end: int

    @property
    def key(self) -> int:
        """Dense integer identity of this endpoint across the whole sketch."""
        return self.curve * 2 + self.end

    @staticmethod
    def from_key(key: int) -> "EndpointRef":
        return EndpointRef(key // 2, key % 2)


class ConstraintType(Enum):
    COINCIDENT = "coincident"


@dataclass
class Coincident:
    """Asserts that endpoints ``a`` and ``b`` occupy the same location."""

    a: EndpointRef
    b: EndpointRef
    type: ConstraintType = field(default=ConstraintType.COINCIDENT, init=False)

    def references(self, ref: EndpointRef) -> bool:
        return self.a == ref or self.b == ref

    def repoint(self, old: EndpointRef, new: EndpointRef) -> None:
        if self.a == old:
            self.a = new
        if self.b == old:
            self.b = new


class OrderedCurve(NamedTuple):
    """A curve walked forward, or backward when ``reversed`` is set."""

    id: int
    reversed: bool = False

    @property
    def start(self) -> EndpointRef:
        return EndpointRef(self.id, 1 if self.reversed else 0)

    @property
    def end(self) -> EndpointRef:
        return EndpointRef(self.id, 0 if self.reversed else 1)


OrderedPath = List[OrderedCurve]


@dataclass
class Wire:
    """Curves forming one connected component under endpoint coincidence."""

    curves: List[int] = field(default_factory=list)

    def __contains__(self, curve_id: int) -> bool:
        return curve_id in self.curves

    def __len__(self) -> int:
        return len(self.curves)
