"""
Camera ray projection: normalized device coordinates -> world-space ray.
"""
from __future__ import annotations

from typing import Callable

import numpy as np
import pyvista as pv
from vtkmodules.vtkRenderingCore import vtkCamera

from elevationprofile.model.points import Ray, ScreenPoint, ViewportRect


def screen_to_ndc(client_x: float, client_y: float, rect: ViewportRect) -> tuple[float, float]:
    """
    Map a pixel position to NDC in [-1, 1], y pointing up.

    Raises:
        ValueError: If the rectangle has no area.
    """
    if rect.width <= 0 or rect.height <= 0:
        raise ValueError(f"Viewport has no area: {rect}")
    ndc_x = ((client_x - rect.left) / rect.width) * 2 - 1
    ndc_y = -((client_y - rect.top) / rect.height) * 2 + 1
    return ndc_x, ndc_y


def pixel_to_ndc(point: ScreenPoint, width: float, height: float) -> tuple[float, float]:
    """Same mapping for a viewport-local pixel (no offset)."""
    return screen_to_ndc(point.x, point.y, ViewportRect(0.0, 0.0, width, height))


def ray_from_ndc(camera: vtkCamera, ndc_x: float, ndc_y: float, aspect: float) -> Ray:
    """
    Unproject an NDC position through the camera.

    Uses the inverse of VTK's composite projection (view coordinates with
    z in [-1, 1]), so perspective and parallel projection are both handled:
    the ray starts on the near plane and points at the far plane.
    """
    matrix = pv.array_from_vtkmatrix(camera.GetCompositeProjectionTransformMatrix(aspect, -1, 1))
    inverse = np.linalg.inv(matrix)

    near = inverse @ np.array([ndc_x, ndc_y, -1.0, 1.0])
    far = inverse @ np.array([ndc_x, ndc_y, 1.0, 1.0])
    near = near[:3] / near[3]
    far = far[:3] / far[3]

    return Ray.from_arrays(near, far - near)


class PlotterCamera:
    """
    Camera collaborator bound to a live plotter.

    Args:
        get_camera: Returns the active camera (looked up per call because the
            plotter may swap it).
        get_aspect: Returns the viewport width / height.
    """
    def __init__(self, get_camera: Callable[[], vtkCamera], get_aspect: Callable[[], float]) -> None:
        self._get_camera = get_camera
        self._get_aspect = get_aspect

    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> Ray:
        return ray_from_ndc(self._get_camera(), ndc_x, ndc_y, self._get_aspect())
