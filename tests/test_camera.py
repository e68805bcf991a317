import numpy as np
import pytest
import pyvista as pv

from elevationprofile.controller.camera import PlotterCamera, pixel_to_ndc, ray_from_ndc
from elevationprofile.model.points import ScreenPoint


@pytest.fixture
def camera() -> pv.Camera:
    cam = pv.Camera()
    cam.position = (0.0, 0.0, 10.0)
    cam.focal_point = (0.0, 0.0, 0.0)
    cam.up = (0.0, 1.0, 0.0)
    cam.clipping_range = (0.1, 100.0)
    return cam


def test_center_ray_follows_view_direction(camera):
    ray = ray_from_ndc(camera, 0.0, 0.0, aspect=1.0)

    np.testing.assert_allclose(ray.direction.to_array(), [0.0, 0.0, -1.0], atol=1e-9)
    assert ray.origin.x == pytest.approx(0.0, abs=1e-9)
    assert ray.origin.y == pytest.approx(0.0, abs=1e-9)
    assert ray.origin.z == pytest.approx(9.9)  # near plane


def test_off_center_ray_diverges_towards_ndc(camera):
    ray = ray_from_ndc(camera, 0.5, -0.5, aspect=1.0)

    assert ray.direction.x > 0
    assert ray.direction.y < 0
    assert ray.direction.z < 0
    assert np.linalg.norm(ray.direction.to_array()) == pytest.approx(1.0)


def test_parallel_projection_rays_are_parallel(camera):
    camera.enable_parallel_projection()
    camera.parallel_scale = 5.0

    a = ray_from_ndc(camera, -0.8, 0.3, aspect=1.0)
    b = ray_from_ndc(camera, 0.6, -0.2, aspect=1.0)

    np.testing.assert_allclose(a.direction.to_array(), b.direction.to_array(), atol=1e-9)
    assert a.origin.x == pytest.approx(-4.0)
    assert b.origin.y == pytest.approx(-1.0)


def test_plotter_camera_queries_collaborators(camera):
    calls = []

    def aspect():
        calls.append("aspect")
        return 2.0

    projector = PlotterCamera(lambda: camera, aspect)
    ray = projector.ray_from_ndc(0.0, 0.0)

    assert calls == ["aspect"]
    assert ray.direction.z == pytest.approx(-1.0)


def test_pixel_to_ndc_has_no_offset():
    assert pixel_to_ndc(ScreenPoint(0.0, 0.0), 100.0, 50.0) == (-1.0, 1.0)
    assert pixel_to_ndc(ScreenPoint(50.0, 25.0), 100.0, 50.0) == (0.0, 0.0)
