"""
Elevation curve: smooth 3D path through the resolved samples.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np
import pyvista as pv

from elevationprofile import config
from elevationprofile.model.points import ElevationSample

if TYPE_CHECKING:
    import numpy.typing as npt
    from elevationprofile.controller.scene import Scene

logger = logging.getLogger(__name__)


def _knot_interval(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64], alpha: float) -> float:
    return float(np.linalg.norm(b - a)) ** alpha


def catmull_rom(
    points: npt.ArrayLike,
    divisions_per_segment: int = config.CURVE_DIVISIONS_PER_SEGMENT,
    alpha: float = config.CURVE_ALPHA
) -> npt.NDArray[np.float64]:
    """
    Open Catmull-Rom spline through `points`.

    alpha = 0.5 gives the centripetal variant, which does not overshoot or
    form cusps when neighbouring points are unevenly spaced. The first and
    last spans use phantom end points mirrored through the end samples.

    Args:
        points: (N, 3) control points, N >= 2.
        divisions_per_segment: Points generated per span (excluding its end).
        alpha: Knot parameterization exponent (0 uniform, 0.5 centripetal,
            1 chordal).

    Returns:
        (M, 3) array passing through every control point.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    n = len(pts)
    if n < 2:
        raise ValueError(f"Need at least 2 points, got {n}.")

    divisions = max(1, int(divisions_per_segment))
    t = np.linspace(0.0, 1.0, divisions, endpoint=False)[:, None]

    out: list[npt.NDArray[np.float64]] = []
    for i in range(n - 1):
        p1, p2 = pts[i], pts[i + 1]
        p0 = pts[i - 1] if i > 0 else 2 * pts[0] - pts[1]
        p3 = pts[i + 2] if i + 2 < n else 2 * pts[-1] - pts[-2]

        dt0 = _knot_interval(p0, p1, alpha)
        dt1 = _knot_interval(p1, p2, alpha)
        dt2 = _knot_interval(p2, p3, alpha)

        # Coincident neighbours would divide by zero
        if dt1 < 1e-4:
            dt1 = 1.0
        if dt0 < 1e-4:
            dt0 = dt1
        if dt2 < 1e-4:
            dt2 = dt1

        # Tangents of the non-uniform spline, rescaled to the [0, 1] span
        m1 = ((p1 - p0) / dt0 - (p2 - p0) / (dt0 + dt1) + (p2 - p1) / dt1) * dt1
        m2 = ((p2 - p1) / dt1 - (p3 - p1) / (dt1 + dt2) + (p3 - p2) / dt2) * dt1

        c0 = p1
        c1 = m1
        c2 = -3 * p1 + 3 * p2 - 2 * m1 - m2
        c3 = 2 * p1 - 2 * p2 + m1 + m2
        out.append(c0 + c1 * t + c2 * t ** 2 + c3 * t ** 3)

    out.append(pts[-1][None, :])
    return np.vstack(out)


def polyline_to_polydata(points: npt.NDArray[np.float64]) -> pv.PolyData:
    """Convert an (N, 3) array into a single open polyline cell."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    n = points.shape[0]
    pd = pv.PolyData(points)
    pd.lines = np.hstack([[n], np.arange(n, dtype=np.int_)])
    # remove vertex cells, so they don't show up as dots
    pd.verts = np.empty(0, dtype=np.int_)
    return pd


class CurveBuilder:
    """
    Keeps exactly one elevation curve in the scene.

    Args:
        scene: Scene the curve is inserted into.
        tag: Fixed name identifying the curve object.
    """
    def __init__(self, scene: Scene, tag: str = config.ELEVATION_CURVE_TAG) -> None:
        self.scene = scene
        self.tag = tag

    def build(self, samples: Sequence[ElevationSample]) -> Optional[pv.PolyData]:
        """Replace the current curve with one through `samples`. No-op for fewer than 2."""
        if len(samples) < 2:
            logger.warning(f"Not enough elevation samples for a curve ({len(samples)} < 2).")
            return None

        control = np.array([s.to_array() for s in samples])
        curve = polyline_to_polydata(catmull_rom(control))

        self.scene.remove(self.tag)
        self.scene.add(
            self.tag,
            curve,
            pickable=False,
            color=config.CURVE_COLOR,
            line_width=4,
            render_lines_as_tubes=True,
            show_scalar_bar=False,
        )
        logger.info(f"Elevation curve rebuilt through {len(samples)} samples ({curve.n_points} points).")
        return curve
