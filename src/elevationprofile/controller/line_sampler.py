"""
Line Sampler
============
Collects two picked points and marches between them in the XY plane.

Why is this file needed?
------------------------
1. Validation: It rejects pick pairs that are too close together and pairs
   that cannot be parameterized by x (equal x coordinates).
2. Sampling: It produces the ordered horizontal coordinates at which the
   elevation probe will later be run. Long lines use a coarse step to bound
   the sample count; short lines keep a fine step.

Classes:
    LineSampler: Pick buffer + completion algorithm.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from elevationprofile import config
from elevationprofile.model.points import SampledPoint, WorldPoint
from elevationprofile.model.state import PickBuffer, PickState

logger = logging.getLogger(__name__)

LineCallback = Callable[[WorldPoint, WorldPoint], None]
SampledCallback = Callable[[list[SampledPoint]], None]


def step_size_for(distance: float) -> float:
    """Coarse step for long lines, fine step for short ones."""
    return config.COARSE_STEP if distance >= config.LONG_LINE_THRESHOLD else config.FINE_STEP


def sample_line(p1: WorldPoint, p2: WorldPoint, distance: float) -> list[SampledPoint]:
    """
    March from p1 to p2 along x and interpolate y on the straight line.

    The caller guarantees p1.x != p2.x. Both endpoints are always included,
    interior samples stop once they are within half a step of p2.x.

    Args:
        p1: Start point.
        p2: End point.
        distance: Distance between p1 and p2, used to choose the step.

    Returns:
        The sampled coordinates, rounded to `config.COORDINATE_DECIMALS`.
    """
    decimals = config.COORDINATE_DECIMALS
    delta_x = p2.x - p1.x
    delta_y = p2.y - p1.y
    slope = delta_y / delta_x

    step_size = step_size_for(distance)
    step = step_size if p1.x < p2.x else -step_size
    direction = 1.0 if step > 0 else -1.0
    half_step = step_size / 2 - config.SAMPLING_TOLERANCE

    points = [SampledPoint.rounded(p1.x, p1.y, decimals)]

    i = 1
    x = p1.x + step
    # Signed remaining distance shrinks every iteration, so this terminates
    while (p2.x - x) * direction >= half_step:
        y = p1.y + slope * (x - p1.x)
        points.append(SampledPoint.rounded(x, y, decimals))
        i += 1
        x = p1.x + step * i

    points.append(SampledPoint.rounded(p2.x, p2.y, decimals))
    return points


class LineSampler:
    """
    Two-point pick buffer that samples the line once both points are known.

    Args:
        on_line: Called with (p1, p2) when a pair passes the distance check,
            so the straight segment can be drawn.
        on_sampled: Called with the new sampled sequence after a successful
            completion.
    """
    def __init__(
        self,
        on_line: Optional[LineCallback] = None,
        on_sampled: Optional[SampledCallback] = None
    ) -> None:
        self.on_line = on_line
        self.on_sampled = on_sampled
        self._buffer = PickBuffer()
        self._points: list[SampledPoint] = []

    @property
    def state(self) -> PickState:
        return self._buffer.state

    @property
    def pending_points(self) -> list[WorldPoint]:
        return self._buffer.points

    def get_points(self) -> list[SampledPoint]:
        """The most recently sampled sequence (empty before a completion or after an abort)."""
        return list(self._points)

    def reset(self) -> None:
        """Discard a half-finished pick."""
        self._buffer.reset()

    def add_point(self, point: WorldPoint) -> Optional[list[SampledPoint]]:
        """
        Feed one picked point.

        Returns:
            The sampled sequence when this point completed a valid pair,
            otherwise None.
        """
        pair = self._buffer.push(point)
        if pair is None:
            return None
        return self._complete(*pair)

    def _complete(self, p1: WorldPoint, p2: WorldPoint) -> Optional[list[SampledPoint]]:
        distance = p1.distance_to(p2)

        if distance < config.MIN_PICK_DISTANCE:
            logger.warning(f"Distance too short ({distance:.4f} < {config.MIN_PICK_DISTANCE}), pick discarded.")
            self._abort()
            return None

        if self.on_line is not None:
            self.on_line(p1, p2)

        if p2.x - p1.x == 0:
            logger.warning("Vertical line detected (equal x), cannot sample along x.")
            self._abort()
            return None

        self._points = sample_line(p1, p2, distance)
        self._buffer.reset()

        logger.info(f"Sampled {len(self._points)} points (step {step_size_for(distance)}).")
        logger.debug(f"Sampled points: {[p.as_tuple() for p in self._points]}")

        if self.on_sampled is not None:
            self.on_sampled(self.get_points())
        return self.get_points()

    def _abort(self) -> None:
        self._points = []
        self._buffer.reset()
