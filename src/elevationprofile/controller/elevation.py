"""
Elevation Resolver
==================
Finds the surface elevation under (or above) sampled XY coordinates.

Why is this file needed?
------------------------
The sampled line only knows horizontal positions. For each one a vertical ray
is cast from the probe plane, first downward and then, if nothing was hit,
upward. Points with no surface in either direction are dropped from the
profile rather than padded with a placeholder.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol, Sequence

from elevationprofile import config
from elevationprofile.controller.camera import pixel_to_ndc
from elevationprofile.model.points import ElevationSample, Hit, Ray, SampledPoint, ScreenPoint, WorldPoint

logger = logging.getLogger(__name__)

DOWN = WorldPoint(0.0, 0.0, -1.0)
UP = WorldPoint(0.0, 0.0, 1.0)


class IntersectableScene(Protocol):
    def intersect(self, ray: Ray) -> list[Hit]: ...


class RayProjector(Protocol):
    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> Ray: ...


class SizedViewport(Protocol):
    def size(self) -> tuple[float, float]: ...


class ElevationResolver:
    """
    Vertical ray probe against a scene.

    Args:
        scene: Anything with an `intersect(ray)` query.
        camera: Needed only for `generate_from_screen_points`.
        viewport: Needed only for `generate_from_screen_points`.
        probe_z: Height of the plane the vertical rays start from.
    """
    def __init__(
        self,
        scene: IntersectableScene,
        camera: Optional[RayProjector] = None,
        viewport: Optional[SizedViewport] = None,
        probe_z: float = config.PROBE_PLANE_Z
    ) -> None:
        self.scene = scene
        self.camera = camera
        self.viewport = viewport
        self.probe_z = probe_z

    def resolve_point(self, point: SampledPoint) -> Optional[ElevationSample]:
        """Nearest hit going down, else nearest hit going up, else None."""
        origin = WorldPoint(point.x, point.y, self.probe_z)

        for label, direction in (("Downward", DOWN), ("Upward", UP)):
            hits = self.scene.intersect(Ray(origin, direction))
            if hits:
                logger.debug(f"{label} intersection at {hits[0].point}")
                return ElevationSample.from_world(hits[0].point)
        return None

    def generate_from_points(self, points: Sequence[SampledPoint]) -> list[ElevationSample]:
        """
        Resolve an elevation for each sampled point, in order.

        Unresolved points are skipped, so the result may be shorter than the
        input.
        """
        if not points:
            logger.warning("No points provided.")
            return []

        samples: list[ElevationSample] = []
        for index, point in enumerate(points):
            sample = self.resolve_point(point)
            if sample is None:
                logger.warning(f"[{index}] No intersection found in Z direction at ({point.x}, {point.y}).")
                continue
            samples.append(sample)

        logger.info(f"Resolved {len(samples)}/{len(points)} elevation samples.")
        return samples

    def generate_from_screen_points(self, points: Iterable[ScreenPoint]) -> list[WorldPoint]:
        """
        Cast camera rays through viewport-local pixels and collect the nearest hits.

        Raises:
            RuntimeError: If the resolver was built without camera/viewport.
        """
        if self.camera is None or self.viewport is None:
            raise RuntimeError("Screen-point probing needs a camera and a viewport.")

        points = list(points)
        if not points:
            logger.warning("No screen points provided.")
            return []

        width, height = self.viewport.size()
        results: list[WorldPoint] = []
        for screen_point in points:
            ray = self.camera.ray_from_ndc(*pixel_to_ndc(screen_point, width, height))
            hits = self.scene.intersect(ray)
            if hits:
                logger.debug(f"Intersection at {hits[0].point}")
                results.append(hits[0].point)
            else:
                logger.warning(f"No intersection found for screen point ({screen_point.x}, {screen_point.y}).")
        return results
