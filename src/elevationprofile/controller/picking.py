"""
Pointer Ray Caster
==================
Turns clicks on the render surface into world points for the line sampler.

Why is this file needed?
------------------------
1. Filtering: Only clicks that land on the render surface are considered.
2. Projection: Pixel -> NDC -> camera ray -> nearest surface hit.
3. Session control: enable()/disable() attach and detach the click listener
   and always leave the pick buffer empty.

The click handler itself is a plain function taking an explicit PickContext,
so it can be called directly in tests without any toolkit.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import partial
import logging
from typing import Any, Callable, Optional, Protocol, TYPE_CHECKING

from elevationprofile.controller.camera import screen_to_ndc
from elevationprofile.controller.elevation import IntersectableScene, RayProjector
from elevationprofile.controller.line_sampler import LineSampler
from elevationprofile.model.points import ClickEvent, ViewportRect, WorldPoint

if TYPE_CHECKING:
    from elevationprofile.store import DrawingStore

logger = logging.getLogger(__name__)

ClickListener = Callable[[ClickEvent], Any]


class Viewport(Protocol):
    @property
    def render_target(self) -> Any: ...

    def bounding_rect(self) -> ViewportRect: ...


class ClickSource(Protocol):
    def add_listener(self, listener: ClickListener) -> None: ...

    def remove_listener(self, listener: ClickListener) -> None: ...


@dataclass
class PickContext:
    """Everything the click handler needs."""
    viewport: Viewport
    camera: RayProjector
    scene: IntersectableScene
    sampler: LineSampler


def handle_click(context: PickContext, event: ClickEvent) -> Optional[WorldPoint]:
    """
    Process one click.

    Returns:
        The picked world point, or None if the click was ignored (wrong
        target, empty viewport, or nothing under the cursor).
    """
    if event.target is not context.viewport.render_target:
        return None

    rect = context.viewport.bounding_rect()
    if rect.width <= 0 or rect.height <= 0:
        logger.debug("Click ignored, viewport has no area.")
        return None

    ndc_x, ndc_y = screen_to_ndc(event.client_x, event.client_y, rect)
    ray = context.camera.ray_from_ndc(ndc_x, ndc_y)
    hits = context.scene.intersect(ray)

    if not hits:
        logger.debug(f"No intersection at NDC ({ndc_x:.3f}, {ndc_y:.3f}).")
        return None

    point = hits[0].point
    context.sampler.add_point(point)
    return point


class PointerRayCaster:
    """
    Owns the click listener registration for one pick context.

    Args:
        context: Collaborators passed to `handle_click`.
        click_source: Global click event source.
    """
    def __init__(self, context: PickContext, click_source: ClickSource) -> None:
        self.context = context
        self.click_source = click_source
        self._enabled = False
        self._listener: ClickListener = partial(handle_click, context)

    def enable(self) -> None:
        if self._enabled:
            return
        self.click_source.add_listener(self._listener)
        self._enabled = True
        self.context.sampler.reset()
        logger.info("Line drawing enabled.")

    def disable(self) -> None:
        if not self._enabled:
            return
        self.click_source.remove_listener(self._listener)
        self._enabled = False
        self.context.sampler.reset()
        logger.info("Line drawing disabled.")

    def toggle(self) -> None:
        if self._enabled:
            self.disable()
        else:
            self.enable()

    def set_enabled(self, enabled: bool) -> None:
        if enabled:
            self.enable()
        else:
            self.disable()

    def is_enabled(self) -> bool:
        return self._enabled

    def bind(self, store: DrawingStore) -> None:
        """Follow the store's toggle command, starting from its current value."""
        store.drawing_toggled.connect(self.set_enabled)
        self.set_enabled(store.is_drawing_enabled())
