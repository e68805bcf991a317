from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
import pyvista as pv

from elevationprofile.controller.scene import Scene
from elevationprofile.model.points import ClickEvent, Ray, ViewportRect, WorldPoint

pv.OFF_SCREEN = True


def make_plane(z: float, size: float = 10.0) -> pv.PolyData:
    """Horizontal square centred on the z axis; odd resolution keeps test rays off triangle edges."""
    return pv.Plane(center=(0.0, 0.0, z), direction=(0.0, 0.0, 1.0), i_size=size, j_size=size,
                    i_resolution=7, j_resolution=7)


class FakeClickSource:
    """Records listeners instead of hooking a GUI toolkit."""
    def __init__(self) -> None:
        self.listeners = []

    def add_listener(self, listener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener) -> None:
        self.listeners.remove(listener)

    def click(self, event: ClickEvent) -> None:
        for listener in list(self.listeners):
            listener(event)


class FakeViewport:
    def __init__(self, rect: ViewportRect) -> None:
        self.render_target = object()
        self.rect = rect

    def bounding_rect(self) -> ViewportRect:
        return self.rect

    def size(self) -> tuple[float, float]:
        return self.rect.width, self.rect.height


class TopDownCamera:
    """Orthographic stand-in: NDC (u, v) looks straight down at world (u*scale, v*scale)."""
    def __init__(self, scale: float = 5.0, height: float = 10.0) -> None:
        self.scale = scale
        self.height = height

    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> Ray:
        return Ray(WorldPoint(ndc_x * self.scale, ndc_y * self.scale, self.height), WorldPoint(0.0, 0.0, -1.0))


@pytest.fixture
def ground_scene() -> Scene:
    scene = Scene()
    scene.add("ground", make_plane(-2.0))
    return scene


@pytest.fixture
def click_source() -> FakeClickSource:
    return FakeClickSource()


@pytest.fixture
def viewport() -> FakeViewport:
    return FakeViewport(ViewportRect(left=100.0, top=50.0, width=200.0, height=100.0))
