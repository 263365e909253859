"""Matplotlib preview of a sketch."""

import math
from typing import TYPE_CHECKING, List, Optional, Tuple

from .geometry import angle_of, forward_angles
from .primitives import Arc, Line

if TYPE_CHECKING:
    from .sketch import Sketch


def _arc_samples(arc: Arc, num_points: int = 50) -> Tuple[List[float], List[float]]:
    first, last = (arc.p2, arc.p1) if arc.clockwise else (arc.p1, arc.p2)
    u1, u2 = forward_angles(angle_of(arc.center, first), angle_of(arc.center, last))
    radius = arc.radius
    arc_x, arc_y = [], []
    for i in range(num_points + 1):
        t = u1 + (u2 - u1) * i / num_points
        arc_x.append(arc.center.x + radius * math.cos(t))
        arc_y.append(arc.center.y + radius * math.sin(t))
    return arc_x, arc_y


def render_sketch(
    sketch: "Sketch",
    file_name: Optional[str] = None,
    width: int = 800,
    height: int = 600,
    margin: float = 0.1,
) -> None:
    """
    Render the sketch to a PNG image.

    Args:
        sketch: Sketch to draw
        file_name: Path to save the PNG file. If None, displays in a UI window instead.
        width: Image width in pixels (default: 800)
        height: Image height in pixels (default: 600)
        margin: Margin around the sketch as a fraction of size (default: 0.1)

    Raises:
        ImportError: If matplotlib is not installed
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for sketch rendering. Install with: pip install matplotlib"
        )

    fig, ax = plt.subplots(figsize=(width / 100, height / 100), dpi=100)
    ax.set_aspect("equal")

    all_points = []
    for curve in sketch.curves:
        if isinstance(curve, Line):
            ax.plot(
                [curve.p1.x, curve.p2.x], [curve.p1.y, curve.p2.y], "k-", linewidth=2
            )
            all_points.extend([curve.p1, curve.p2])
        elif isinstance(curve, Arc):
            arc_x, arc_y = _arc_samples(curve)
            ax.plot(arc_x, arc_y, "k-", linewidth=2)
            all_points.extend(zip(arc_x, arc_y))

    # Endpoints and auxiliary intersection points
    ends = [curve.endpoint(end) for curve in sketch.curves for end in (0, 1)]
    if ends:
        ax.plot([p[0] for p in ends], [p[1] for p in ends], "bo", markersize=4)
    if sketch.points:
        ax.plot(
            [p.x for p in sketch.points],
            [p.y for p in sketch.points],
            "rx",
            markersize=6,
        )
        all_points.extend(sketch.points)

    # Calculate bounds with margin
    if all_points:
        xs = [p[0] for p in all_points]
        ys = [p[1] for p in all_points]
        min_x, max_x = min(xs), max(xs)
        min_y, max_y = min(ys), max(ys)

        x_range = max(max_x - min_x, 1)
        y_range = max(max_y - min_y, 1)
        margin_x = x_range * margin
        margin_y = y_range * margin

        ax.set_xlim(min_x - margin_x, max_x + margin_x)
        ax.set_ylim(min_y - margin_y, max_y + margin_y)

    ax.grid(True, alpha=0.3)
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_title(sketch.name)

    plt.tight_layout()
    if file_name:
        plt.savefig(file_name, dpi=100, bbox_inches="tight", facecolor="white")
        plt.close(fig)
    else:
        plt.show()
