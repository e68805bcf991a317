"""
Pick Buffer State Machine
=========================
Holds the points clicked so far for the line currently being picked.

Why is this file needed?
------------------------
The buffer is modelled as an explicit state (IDLE / ONE_PICKED) with a single
transition function, instead of inferring "where are we" from a list length
scattered through the click handler.

Classes:
    PickState: The two states of the buffer.
    PickBuffer: The buffer itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
import logging
from typing import Optional

from elevationprofile.model.points import WorldPoint

logger = logging.getLogger(__name__)


class PickState(IntEnum):
    """Number of points currently held."""
    IDLE = 0
    ONE_PICKED = 1


@dataclass
class PickBuffer:
    state: PickState = PickState.IDLE
    first: Optional[WorldPoint] = None

    @property
    def points(self) -> list[WorldPoint]:
        return [self.first] if self.first is not None else []

    def __len__(self) -> int:
        return len(self.points)

    def push(self, point: WorldPoint) -> Optional[tuple[WorldPoint, WorldPoint]]:
        """
        Feed a picked point into the buffer.

        Returns:
            None while waiting for the second point, otherwise the completed
            (first, second) pair. The buffer is back in IDLE either way once a
            pair is returned.
        """
        if self.state == PickState.IDLE:
            self.first = point.copy()
            self.state = PickState.ONE_PICKED
            logger.info(f"Point 1: ({point.x:.3f}, {point.y:.3f}, {point.z:.3f})")
            return None

        first = self.first
        self.reset()
        logger.info(f"Point 2: ({point.x:.3f}, {point.y:.3f}, {point.z:.3f})")
        return first, point.copy()

    def reset(self) -> None:
        self.state = PickState.IDLE
        self.first = None
