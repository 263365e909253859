"""
rapidsketch - 2D sketch topology and constraint engine.

Stores line and arc curves on a sketch plane, welds coincident endpoints,
splits curves at junctions while drawing, groups curves into wires and
exports ordered 3D edge chains for a solid modeling kernel.
"""

__version__ = "0.1.0"
__author__ = "Your Name"
__email__ = "your.email@example.com"

from .cad_types import Point2, Vector
from .constants import DEFAULT_TOLERANCE
from .constraints import Coincident, EndpointRef, OrderedCurve, OrderedPath, Wire
from .exceptions import InvalidReference, MalformedDocument, SketchError
from .primitives import Arc, Curve, Line
from .projector import ArcEdge3D, EdgeChain, LineEdge3D
from .sketch import Sketch
from .spatial_index import KdTree2D
from .workplane import PlaneBinding

# Define what gets imported with "from rapidsketch import *"
__all__ = [
    # Sketch
    "Sketch",
    "PlaneBinding",
    # Geometry types
    "Point2",
    "Vector",
    "Line",
    "Arc",
    "Curve",
    # Topology
    "EndpointRef",
    "Coincident",
    "Wire",
    "OrderedCurve",
    "OrderedPath",
    "KdTree2D",
    # 3D export
    "EdgeChain",
    "LineEdge3D",
    "ArcEdge3D",
    # Errors
    "SketchError",
    "InvalidReference",
    "MalformedDocument",
    "DEFAULT_TOLERANCE",
]
