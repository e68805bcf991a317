import os

import pytest
from PySide6.QtCore import QObject

from elevationprofile import config
from elevationprofile.controller.line_sampler import LineSampler
from elevationprofile.controller.picking import PickContext, PointerRayCaster
from elevationprofile.controller.scene import Scene
from elevationprofile.controller.workers import ModelLoader, demo_terrain, read_model
from elevationprofile.model.points import ClickEvent, ElevationSample
from elevationprofile.store import DrawingStore
from elevationprofile.view.widgets.profile_plot import ProfilePanel
from elevationprofile.view.widgets.viewport import QtClickSource

from conftest import TopDownCamera


SAMPLES = [ElevationSample(0.0, 0.0, 1.0), ElevationSample(0.5, 0.25, 1.4), ElevationSample(1.0, 0.5, 0.9)]


def test_store_emits_only_on_change(qtbot):
    store = DrawingStore()
    received = []
    store.drawing_toggled.connect(received.append)

    store.set_drawing_enabled(False)
    store.set_drawing_enabled(True)
    store.set_drawing_enabled(True)
    store.toggle_drawing()

    assert received == [True, False]
    assert not store.is_drawing_enabled()


def test_caster_follows_store(qtbot, viewport, ground_scene, click_source):
    context = PickContext(viewport=viewport, camera=TopDownCamera(), scene=ground_scene, sampler=LineSampler())
    caster = PointerRayCaster(context, click_source)
    store = DrawingStore(enabled=True)

    caster.bind(store)
    assert caster.is_enabled()

    store.set_drawing_enabled(False)
    assert not caster.is_enabled()
    assert click_source.listeners == []


def test_profile_panel_accumulates_charts(qtbot):
    panel = ProfilePanel()
    qtbot.addWidget(panel)

    panel.show_profile(SAMPLES)
    panel.show_profile(SAMPLES[:2])
    assert panel.chart_count() == 2

    panel.clear()
    assert panel.chart_count() == 0


def test_click_source_registers_listener_once(qtbot):
    source = QtClickSource()
    received = []

    source.add_listener(received.append)
    source.add_listener(received.append)
    assert source.listener_count() == 1

    click = ClickEvent(target=QObject(), client_x=1.0, client_y=2.0)
    source.dispatch(click)
    assert received == [click]

    source.remove_listener(received.append)
    source.remove_listener(received.append)
    assert source.listener_count() == 0


def test_read_model_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_model(str(tmp_path / "missing.vtk"))


def test_demo_terrain_is_a_surface():
    terrain = demo_terrain(size=4.0, resolution=20)

    assert terrain.n_points == 400
    assert terrain.bounds[0] == pytest.approx(-2.0)
    assert terrain.bounds[1] == pytest.approx(2.0)


def test_loader_adds_model_to_scene(qtbot, tmp_path):
    path = tmp_path / "terrain.vtk"
    demo_terrain(resolution=10).save(str(path))
    scene = Scene()
    loader = ModelLoader(scene)

    with qtbot.waitSignal(loader.model_loaded, timeout=5000):
        loader.load_model(str(path))

    assert config.MODEL_TAG in scene
    assert scene.get(config.MODEL_TAG).pickable
    loader.wait_all()


def test_loader_reports_failure(qtbot, tmp_path):
    loader = ModelLoader(Scene())

    with qtbot.waitSignal(loader.load_failed, timeout=5000) as blocker:
        loader.load_model(str(tmp_path / "nope.obj"))

    assert "not found" in blocker.args[0]
    loader.wait_all()


def test_bundled_sample_model_is_readable():
    mesh = read_model(os.path.join(config.MODELS_PATH, "sample_terrain.obj"))

    assert mesh.n_points == 25
    assert mesh.n_cells == 16


@pytest.mark.filterwarnings("error::pyvista.PyVistaFutureWarning")
def test_demo_terrain_extracts_surface_without_warnings():
    assert demo_terrain(resolution=10).n_cells > 0
