"""
OCP wire builder - turns projected sketch edge chains into ``TopoDS_Wire``s.
"""

import logging
from typing import TYPE_CHECKING, List

from OCP.BRepBuilderAPI import (
    BRepBuilderAPI_MakeEdge,
    BRepBuilderAPI_MakeWire,
    BRepBuilderAPI_WireError,
)
from OCP.gp import gp_Ax2, gp_Circ, gp_Dir, gp_Pnt
from OCP.TopAbs import TopAbs_EDGE
from OCP.TopExp import TopExp_Explorer
from OCP.TopoDS import TopoDS, TopoDS_Edge, TopoDS_Shape, TopoDS_Wire

from rapidsketch.constants import DEFAULT_TOLERANCE
from rapidsketch.projector import ArcEdge3D, Edge3D, EdgeChain, LineEdge3D

if TYPE_CHECKING:
    from rapidsketch.sketch import Sketch

logger = logging.getLogger(__name__)


def _pnt(v) -> gp_Pnt:
    return gp_Pnt(float(v[0]), float(v[1]), float(v[2]))


def _dir(v) -> gp_Dir:
    return gp_Dir(float(v[0]), float(v[1]), float(v[2]))


def edge_to_occ(edge: Edge3D) -> TopoDS_Edge:
    """Convert a projected edge to an OCP edge, oriented the way it is walked."""
    if isinstance(edge, LineEdge3D):
        return BRepBuilderAPI_MakeEdge(_pnt(edge.start), _pnt(edge.end)).Edge()

    if isinstance(edge, ArcEdge3D):
        circle = gp_Circ(
            gp_Ax2(_pnt(edge.center), _dir(edge.normal), _dir(edge.x_dir)),
            edge.radius,
        )
        occ_edge = BRepBuilderAPI_MakeEdge(
            circle, edge.start_angle, edge.end_angle
        ).Edge()
        if edge.reversed:
            occ_edge = TopoDS.Edge_s(occ_edge.Reversed())
        return occ_edge

    raise TypeError(f"Unsupported edge type: {type(edge).__name__}")


def chain_to_wire(chain: EdgeChain) -> TopoDS_Wire:
    num_edges = len(chain)
    if num_edges == 0:
        raise ValueError("Cannot create wire: edge chain is empty")

    wire_builder = BRepBuilderAPI_MakeWire()
    for edge in chain:
        wire_builder.Add(edge_to_occ(edge))
    wire_builder.Build()

    if not wire_builder.IsDone():
        error_code = wire_builder.Error()

        # Map error codes to human-readable messages
        error_messages = {
            BRepBuilderAPI_WireError.BRepBuilderAPI_EmptyWire: "Empty wire - no edges provided",
            BRepBuilderAPI_WireError.BRepBuilderAPI_DisconnectedWire: "Disconnected wire - edges don't connect to form a continuous path",
            BRepBuilderAPI_WireError.BRepBuilderAPI_NonManifoldWire: "Non-manifold wire - more than two edges meet at a vertex",
        }
        error_msg = error_messages.get(error_code, f"Unknown error code: {error_code}")
        raise ValueError(
            f"Wire construction failed with {num_edges} edge(s): {error_msg}\n"
            f"Curves: {[oc.id for oc in chain.path]}"
        )

    return wire_builder.Wire()


def build_wires(sketch: "Sketch", tol: float = DEFAULT_TOLERANCE) -> List[TopoDS_Wire]:
    """Export every ordered path of ``sketch`` as an OCP wire.

    Chains left empty by degenerate curves are skipped.
    """
    result = []
    for chain in sketch.to_occt_wires(tol):
        if not len(chain):
            logger.debug("Skipping empty edge chain for path %s", chain.path)
            continue
        result.append(chain_to_wire(chain))
    return result


def edge_count(shape: TopoDS_Shape) -> int:
    count = 0
    explorer = TopExp_Explorer(shape, TopAbs_EDGE)
    while explorer.More():
        count += 1
        explorer.Next()
    return count
