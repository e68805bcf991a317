"""
Geometric value types shared by the picking pipeline.

Screen clicks become ScreenPoints, ray hits become WorldPoints, the line
sampler produces SampledPoints and the elevation probe turns those into
ElevationSamples.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, TYPE_CHECKING
import math

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


def round_coordinate(value: float, decimals: int = 2) -> float:
    """
    Round half away from zero on the exact binary value.

    Matches fixed-point formatting of the float (e.g. 0.125 -> 0.13), which
    plain round() does not because it rounds ties to even.
    """
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ScreenPoint:
    """A pixel position in the viewport's coordinate space."""
    x: float
    y: float


@dataclass(frozen=True)
class WorldPoint:
    """A point in scene space."""
    x: float
    y: float
    z: float = 0.0

    @classmethod
    def from_array(cls, arr: npt.ArrayLike) -> WorldPoint:
        x, y, z = np.asarray(arr, dtype=np.float64).reshape(3)
        return cls(float(x), float(y), float(z))

    def copy(self) -> WorldPoint:
        return replace(self)

    def distance_to(self, other: WorldPoint) -> float:
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


@dataclass(frozen=True)
class SampledPoint:
    """A horizontal-plane coordinate on a picked line, rounded for display."""
    x: float
    y: float

    @classmethod
    def rounded(cls, x: float, y: float, decimals: int = 2) -> SampledPoint:
        return cls(round_coordinate(x, decimals), round_coordinate(y, decimals))

    def as_tuple(self) -> tuple[float, float]:
        return self.x, self.y


@dataclass(frozen=True)
class ElevationSample:
    """A sampled coordinate with its resolved surface elevation."""
    x: float
    y: float
    z: float

    @classmethod
    def from_world(cls, point: WorldPoint) -> ElevationSample:
        return cls(point.x, point.y, point.z)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


@dataclass(frozen=True)
class ViewportRect:
    """Bounding rectangle of the render surface, in the same pixel space as clicks."""
    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class ClickEvent:
    """
    Toolkit-neutral click payload.

    `target` is whatever object received the click; the picker compares it
    against the viewport's render target by identity.
    """
    target: Any
    client_x: float
    client_y: float


@dataclass(frozen=True)
class Ray:
    """A half-line starting at `origin` along the unit vector `direction`."""
    origin: WorldPoint
    direction: WorldPoint

    @classmethod
    def from_arrays(cls, origin: npt.ArrayLike, direction: npt.ArrayLike) -> Ray:
        d = np.asarray(direction, dtype=np.float64).reshape(3)
        norm = np.linalg.norm(d)
        if norm == 0.0:
            raise ValueError("Ray direction must be non-zero.")
        return cls(WorldPoint.from_array(origin), WorldPoint.from_array(d / norm))


@dataclass(frozen=True)
class Hit:
    """A ray/surface intersection."""
    point: WorldPoint
    distance: float
    name: str  # scene object that was hit
