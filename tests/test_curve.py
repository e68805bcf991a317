import numpy as np
import pytest

from elevationprofile import config
from elevationprofile.controller.curve import CurveBuilder, catmull_rom
from elevationprofile.controller.scene import Scene
from elevationprofile.model.points import ElevationSample


SAMPLES = [
    ElevationSample(0.0, 0.0, 0.0),
    ElevationSample(0.5, 0.25, 1.0),
    ElevationSample(1.0, 0.5, 0.2),
    ElevationSample(3.0, 1.5, 0.4),
]


def test_curve_passes_through_every_sample():
    control = np.array([s.to_array() for s in SAMPLES])
    curve = catmull_rom(control, divisions_per_segment=8)

    assert len(curve) == 8 * (len(control) - 1) + 1
    for i, point in enumerate(control):
        np.testing.assert_allclose(curve[i * 8], point, atol=1e-12)
    np.testing.assert_allclose(curve[-1], control[-1])


def test_two_points_give_straight_segment():
    curve = catmull_rom([[0, 0, 0], [2, 0, 1]], divisions_per_segment=10)

    # Mirrored end points make the single span linear
    np.testing.assert_allclose(curve[:, 1], 0.0, atol=1e-12)
    np.testing.assert_allclose(curve[:, 2], curve[:, 0] / 2, atol=1e-12)


def test_needs_two_points():
    with pytest.raises(ValueError):
        catmull_rom([[0, 0, 0]])


def test_builder_keeps_a_single_curve():
    scene = Scene()
    builder = CurveBuilder(scene)

    first = builder.build(SAMPLES)
    second = builder.build(SAMPLES[:2])

    assert first is not None and second is not None
    assert scene.names().count(config.ELEVATION_CURVE_TAG) == 1
    assert scene.get(config.ELEVATION_CURVE_TAG).dataset is second
    assert scene.get(config.ELEVATION_CURVE_TAG).pickable is False


def test_builder_ignores_fewer_than_two_samples():
    scene = Scene()
    builder = CurveBuilder(scene)

    assert builder.build(SAMPLES[:1]) is None
    assert builder.build([]) is None
    assert config.ELEVATION_CURVE_TAG not in scene


def test_curve_polydata_is_one_polyline():
    curve = CurveBuilder(Scene()).build(SAMPLES)

    assert curve.n_cells == 1
    assert curve.n_points == config.CURVE_DIVISIONS_PER_SEGMENT * (len(SAMPLES) - 1) + 1
