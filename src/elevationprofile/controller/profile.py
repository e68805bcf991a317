"""
Profile Pipeline
================
Glue between the line sampler and the things that consume its output.

Why is this file needed?
------------------------
1. Ordering: sampled line -> (deferred) elevation probe -> curve + chart.
2. Scheduling: The probe runs after a configurable delay on the Qt event
   loop instead of blocking the click handler.
3. Overlays: The straight pick segments are drawn here so the sampler stays
   free of rendering calls.
"""
from __future__ import annotations

from functools import partial
import logging
from typing import Callable, Optional, Protocol, Sequence, TYPE_CHECKING

import numpy as np
import pyvista as pv
from PySide6.QtCore import QTimer

from elevationprofile import config
from elevationprofile.model.points import ElevationSample, SampledPoint, WorldPoint

if TYPE_CHECKING:
    import numpy.typing as npt
    from elevationprofile.controller.curve import CurveBuilder
    from elevationprofile.controller.elevation import ElevationResolver
    from elevationprofile.controller.scene import Scene

logger = logging.getLogger(__name__)

Scheduler = Callable[[int, Callable[[], None]], None]


def qt_scheduler(delay_ms: int, callback: Callable[[], None]) -> None:
    """Run `callback` once on the Qt event loop after `delay_ms`."""
    QTimer.singleShot(delay_ms, callback)


def profile_series(
    samples: Sequence[ElevationSample]
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Chart data for a profile.

    Returns:
        (distance, elevation) arrays, where distance is the cumulative
        horizontal (XY) distance from the first sample.
    """
    if not samples:
        return np.empty(0), np.empty(0)

    xy = np.array([[s.x, s.y] for s in samples], dtype=np.float64)
    steps = np.linalg.norm(np.diff(xy, axis=0), axis=1)
    distance = np.concatenate(([0.0], np.cumsum(steps)))
    elevation = np.array([s.z for s in samples], dtype=np.float64)
    return distance, elevation


class ProfileSink(Protocol):
    def show_profile(self, samples: Sequence[ElevationSample]) -> object: ...


class LineOverlay:
    """Straight segments between picked endpoints, one scene object per pick."""
    def __init__(self, scene: Scene, prefix: str = config.PICK_LINE_TAG) -> None:
        self.scene = scene
        self.prefix = prefix
        self._count = 0

    def draw(self, p1: WorldPoint, p2: WorldPoint) -> str:
        self._count += 1
        name = f"{self.prefix}-{self._count}"
        self.scene.add(
            name,
            pv.Line(p1.to_array(), p2.to_array()),
            pickable=False,
            color=config.PICK_LINE_COLOR,
            line_width=2,
        )
        self.scene.render()
        return name

    def clear(self) -> int:
        return self.scene.remove_prefixed(self.prefix)


class ProfileController:
    """
    Runs the elevation stage for every completed line.

    Args:
        resolver: Vertical elevation probe.
        curve_builder: Maintains the 3D elevation curve.
        renderer: Optional chart sink.
        delay_ms: Delay before probing; 0 or less runs synchronously.
        scheduler: Deferred-call function, defaults to a Qt single-shot timer.
    """
    def __init__(
        self,
        resolver: ElevationResolver,
        curve_builder: CurveBuilder,
        renderer: Optional[ProfileSink] = None,
        delay_ms: int = config.ELEVATION_RESOLVE_DELAY_MS,
        scheduler: Scheduler = qt_scheduler
    ) -> None:
        self.resolver = resolver
        self.curve_builder = curve_builder
        self.renderer = renderer
        self.delay_ms = delay_ms
        self.scheduler = scheduler
        self.last_samples: list[ElevationSample] = []

    def on_line_sampled(self, points: Sequence[SampledPoint]) -> None:
        """Sampler completion callback."""
        points = list(points)
        if self.delay_ms <= 0:
            self.run(points)
            return
        logger.debug(f"Elevation probe scheduled in {self.delay_ms} ms.")
        self.scheduler(self.delay_ms, partial(self.run, points))

    def run(self, points: Sequence[SampledPoint]) -> list[ElevationSample]:
        samples = self.resolver.generate_from_points(points)
        self.last_samples = samples

        if len(samples) < 2:
            logger.warning(f"Only {len(samples)} elevation sample(s) resolved, no curve or chart.")
            return samples

        self.curve_builder.build(samples)
        self.curve_builder.scene.render()
        if self.renderer is not None:
            self.renderer.show_profile(samples)
        return samples
