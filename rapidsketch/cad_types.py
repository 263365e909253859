import math
from typing import NamedTuple, Tuple, Union

import numpy as np


class Vector(np.ndarray):
    def __new__(cls, x: float, y: float, z: float = 0) -> "Vector":
        return np.asarray([float(x), float(y), float(z)]).view(cls)

    def __eq__(self, other: object) -> bool:
        return np.allclose(self, other)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = None

    def length(self) -> float:
        return float(np.linalg.norm(self))

    def normalize(self) -> "Vector":
        norm = np.linalg.norm(self)
        if norm == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        return Vector(*(np.asarray(self) / norm))

    def cross(self, other: "VectorLike") -> "Vector":
        return Vector(*np.cross(np.asarray(self), np.asarray(as_vector(other))))

    def dot(self, other: "VectorLike") -> float:
        return float(np.dot(np.asarray(self), np.asarray(as_vector(other))))

    @property
    def x(self) -> float:
        return float(self[0])

    @property
    def y(self) -> float:
        return float(self[1])

    @property
    def z(self) -> float:
        return float(self[2])

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_json(self):
        return {
            "x": float(self.x),
            "y": float(self.y),
            "z": float(self.z),
        }

    @staticmethod
    def from_json(json_data):
        return Vector(json_data["x"], json_data["y"], json_data["z"])


VectorLike = Union[Tuple[float, float, float], Vector]


def as_vector(value: VectorLike) -> Vector:
    if isinstance(value, Vector):
        return value
    return Vector(*value)


class Point2(NamedTuple):
    """A 2D point in sketch coordinates. Coordinates are never rounded."""

    x: float
    y: float

    def distance(self, other: "Point2") -> float:
        return math.hypot(self.x - other[0], self.y - other[1])

    def is_near(self, other: "Point2", tol: float) -> bool:
        """Per-axis proximity test used for every weld and snap decision."""
        return abs(self.x - other[0]) <= tol and abs(self.y - other[1]) <= tol

    def __str__(self):
        return f"Point2(x={self.x}, y={self.y})"


Point2Like = Union[Tuple[float, float], Point2]


def as_point(value: Point2Like) -> Point2:
    if isinstance(value, Point2):
        return value
    x, y = value
    return Point2(float(x), float(y))
