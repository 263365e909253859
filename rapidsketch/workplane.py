"""
Plane binding - maps 2D sketch coordinates onto a plane in 3D space.
"""

from typing import Any, Dict, Optional, Tuple

import numpy as np

from .cad_types import Vector, VectorLike, as_vector


class PlaneBinding:
    """
    Coordinate system of a sketch plane.

    The plane is defined by an origin, a normal (local Z) and an X direction.
    The X direction is orthogonalized against the normal, and the Y direction
    completes a right-handed basis, so a 2D point ``(u, v)`` lands at
    ``origin + u * x_dir + v * y_dir``.
    """

    def __init__(
        self,
        origin: VectorLike = (0.0, 0.0, 0.0),
        normal: VectorLike = (0.0, 0.0, 1.0),
        x_dir: VectorLike = (1.0, 0.0, 0.0),
        plane_id: Optional[int] = None,
    ):
        """
        Initialize a plane binding.

        Args:
            origin: Origin point of the coordinate system
            normal: Normal vector (local Z direction)
            x_dir: Local X direction, need not be exactly perpendicular to the normal
            plane_id: Optional identifier of an external reference plane

        Raises:
            ValueError: If the normal or X direction is degenerate or they are parallel
        """
        self.origin = as_vector(origin)
        try:
            self.normal = as_vector(normal).normalize()
            x_vec = as_vector(x_dir)
            # Gram-Schmidt: remove the normal component from x_dir
            x_vec = Vector(*(np.asarray(x_vec) - x_vec.dot(self.normal) * np.asarray(self.normal)))
            self.x_dir = x_vec.normalize()
        except ValueError:
            raise ValueError(
                f"Invalid plane basis: normal={tuple(normal)}, x_dir={tuple(x_dir)}"
            ) from None
        self.y_dir = self.normal.cross(self.x_dir).normalize()
        self.plane_id = plane_id

    # ========== Factory methods for standard planes ==========

    @classmethod
    def xy_plane(cls, offset: float = 0.0) -> "PlaneBinding":
        """XY plane, shifted by ``offset`` along +Z."""
        return cls((0.0, 0.0, offset), (0.0, 0.0, 1.0), (1.0, 0.0, 0.0))

    @classmethod
    def xz_plane(cls, offset: float = 0.0) -> "PlaneBinding":
        """XZ plane (normal -Y, so that local Y maps to world +Z)."""
        return cls((0.0, -offset, 0.0), (0.0, -1.0, 0.0), (1.0, 0.0, 0.0))

    @classmethod
    def yz_plane(cls, offset: float = 0.0) -> "PlaneBinding":
        """YZ plane, shifted by ``offset`` along +X."""
        return cls((offset, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))

    @classmethod
    def from_origin_normal(
        cls, origin: VectorLike, normal: VectorLike
    ) -> "PlaneBinding":
        """Create a plane from origin and normal vector.

        The X direction is taken from the world axis least aligned with the normal.

        Args:
            origin: Origin point of the plane
            normal: Normal vector (z-axis direction)

        Returns:
            New plane with specified origin and normal
        """
        normal_vec = as_vector(normal).normalize()
        axis = int(np.argmin(np.abs(np.asarray(normal_vec))))
        ref = [0.0, 0.0, 0.0]
        ref[axis] = 1.0
        return cls(origin, normal_vec, ref)

    # ========== Coordinate system methods ==========

    def to_3d(self, u: float, v: float) -> Vector:
        """Map a 2D sketch point onto the plane."""
        return Vector(
            *(
                np.asarray(self.origin)
                + u * np.asarray(self.x_dir)
                + v * np.asarray(self.y_dir)
            )
        )

    def translate_plane(self, offset: VectorLike) -> "PlaneBinding":
        """
        Create a new plane with the origin translated by the given offset.

        Args:
            offset: Translation vector

        Returns:
            New plane with translated coordinate system
        """
        offset_vec = as_vector(offset)
        return PlaneBinding(
            self.origin + offset_vec, self.normal, self.x_dir, self.plane_id
        )

    def as_tuple(self) -> Tuple[float, ...]:
        """Origin, normal and X direction flattened to nine floats."""
        return self.origin.to_tuple() + self.normal.to_tuple() + self.x_dir.to_tuple()

    def is_same(self, other: "PlaneBinding", tol: float = 1e-9) -> bool:
        return bool(np.allclose(self.as_tuple(), other.as_tuple(), atol=tol))

    def to_json(self) -> Dict[str, Any]:
        """Convert coordinate system to JSON representation."""
        return {
            "origin": self.origin.to_json(),
            "normal": self.normal.to_json(),
            "x_dir": self.x_dir.to_json(),
            "plane_id": self.plane_id,
        }

    @staticmethod
    def from_json(json_data: Dict[str, Any]) -> "PlaneBinding":
        """Create a plane from JSON representation."""
        return PlaneBinding(
            Vector.from_json(json_data["origin"]),
            Vector.from_json(json_data["normal"]),
            Vector.from_json(json_data["x_dir"]),
            json_data.get("plane_id"),
        )

    def __repr__(self) -> str:
        return (
            f"PlaneBinding(origin={self.origin.to_tuple()}, "
            f"normal={self.normal.to_tuple()}, x_dir={self.x_dir.to_tuple()}, "
            f"plane_id={self.plane_id})"
        )
