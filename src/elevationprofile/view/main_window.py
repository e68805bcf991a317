"""
Main Application Window
=======================
The primary GUI container that holds the toolbar, the 3D viewport and the
profile chart dock.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Wiring: It builds the picking pipeline (sampler -> probe -> curve/chart)
   around the viewport's collaborators and connects it to the drawing toggle.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QDockWidget, QFileDialog, QMessageBox, QToolBar
from PySide6.QtCore import Qt, QSettings
from PySide6.QtGui import QAction, QCloseEvent

from elevationprofile import config
from elevationprofile.application import VISIBLE_APP_NAME
from elevationprofile.controller.curve import CurveBuilder
from elevationprofile.controller.elevation import ElevationResolver
from elevationprofile.controller.line_sampler import LineSampler
from elevationprofile.controller.picking import PickContext, PointerRayCaster
from elevationprofile.controller.profile import LineOverlay, ProfileController
from elevationprofile.controller.workers import ModelLoader, demo_terrain
from elevationprofile.store import DrawingStore
from elevationprofile.view.widgets.plot_3d import SceneWidget
from elevationprofile.view.widgets.profile_plot import ProfilePanel
from elevationprofile.view.widgets.viewport import QtClickSource

logger = logging.getLogger(__name__)
MODEL_FILTER = "Surface models (*.obj *.stl *.ply *.vtk *.vtp *.vtu);;All files (*)"


class MainWindow(QMainWindow):
    def __init__(self, store: DrawingStore, resolve_delay_ms: int = config.ELEVATION_RESOLVE_DELAY_MS) -> None:
        super().__init__()
        self.store: DrawingStore = store

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        # --- CENTRAL: 3D viewport ---
        self.visualizer = SceneWidget()
        self.setCentralWidget(self.visualizer)

        # --- DOCK: profile charts ---
        self.profile_panel = ProfilePanel()
        self.profile_dock = QDockWidget("Elevation Profiles", self)
        self.profile_dock.setWidget(self.profile_panel)
        self.profile_dock.setMinimumWidth(380)
        self.addDockWidget(Qt.RightDockWidgetArea, self.profile_dock)

        # --- PIPELINE ---
        scene = self.visualizer.scene
        self.line_overlay = LineOverlay(scene)
        self.resolver = ElevationResolver(scene, self.visualizer.camera, self.visualizer.viewport)
        self.curve_builder = CurveBuilder(scene)
        self.profile_controller = ProfileController(
            self.resolver,
            self.curve_builder,
            renderer=self.profile_panel,
            delay_ms=resolve_delay_ms,
        )
        self.sampler = LineSampler(
            on_line=self.line_overlay.draw,
            on_sampled=self.profile_controller.on_line_sampled,
        )

        self.click_source = QtClickSource(self)
        self.ray_caster = PointerRayCaster(
            PickContext(
                viewport=self.visualizer.viewport,
                camera=self.visualizer.camera,
                scene=scene,
                sampler=self.sampler,
            ),
            self.click_source,
        )

        self.model_loader = ModelLoader(scene, self)
        self.model_loader.model_loaded.connect(self.visualizer.show_model)
        self.model_loader.load_failed.connect(self.on_load_failed)

        # --- ACTIONS & TOOLBAR ---
        self._create_actions()
        self._create_toolbar()

        # --- SIGNAL CONNECTIONS ---
        # Toggle command -> picker, and independently -> toolbar state
        self.ray_caster.bind(self.store)
        self.store.drawing_toggled.connect(self.sync_drawing_action)
        self.sync_drawing_action(self.store.is_drawing_enabled())

    def _create_actions(self) -> None:
        self.act_open = QAction("Open Model...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.on_file_open)

        self.act_draw = QAction("Enable Line Drawing", self)
        self.act_draw.setCheckable(True)
        self.act_draw.setShortcut("Ctrl+L")
        self.act_draw.triggered.connect(self.store.set_drawing_enabled)

        self.act_clear = QAction("Clear Profiles", self)
        self.act_clear.triggered.connect(self.on_clear_profiles)

        self.act_exit = QAction("Exit", self)
        self.act_exit.setShortcut("Ctrl+Q")
        self.act_exit.triggered.connect(self.close)

    def _create_toolbar(self) -> None:
        toolbar = QToolBar("Main", self)
        toolbar.setMovable(False)
        toolbar.addAction(self.act_open)
        toolbar.addSeparator()
        toolbar.addAction(self.act_draw)
        toolbar.addAction(self.act_clear)
        self.addToolBar(toolbar)

        file_menu = self.menuBar().addMenu("File")
        file_menu.addAction(self.act_open)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        view_menu = self.menuBar().addMenu("Profile")
        view_menu.addAction(self.act_draw)
        view_menu.addAction(self.act_clear)
        view_menu.addAction(self.profile_dock.toggleViewAction())

    # ------------------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------------------

    def sync_drawing_action(self, enabled: bool) -> None:
        self.act_draw.blockSignals(True)
        self.act_draw.setChecked(enabled)
        self.act_draw.blockSignals(False)
        self.act_draw.setText("Disable Line Drawing" if enabled else "Enable Line Drawing")
        self.statusBar().showMessage(
            "Click two points on the surface to draw a profile." if enabled else "Line drawing disabled."
        )

    def load_model(self, path: Optional[str]) -> None:
        """Load a model file asynchronously, or show the demo terrain if no path is given."""
        if path:
            self.statusBar().showMessage(f"Loading {os.path.basename(path)}...")
            self.model_loader.load_model(path)
        else:
            self.model_loader.add_model(demo_terrain())

    def on_file_open(self) -> None:
        settings = QSettings()
        last_dir = settings.value("paths/last_model_dir", config.MODELS_PATH, type=str)
        path, _ = QFileDialog.getOpenFileName(self, "Open Model", last_dir, MODEL_FILTER)
        if not path:
            return
        settings.setValue("paths/last_model_dir", os.path.dirname(path))
        self.load_model(path)

    def on_load_failed(self, message: str) -> None:
        logger.error(f"Model load failed: {message}")
        self.statusBar().showMessage("Model load failed.")
        QMessageBox.critical(self, "Load Error", f"Failed to load model:\n{message}")

    def on_clear_profiles(self) -> None:
        removed = self.line_overlay.clear()
        self.visualizer.scene.remove(config.ELEVATION_CURVE_TAG)
        self.visualizer.scene.render()
        self.profile_panel.clear()
        logger.info(f"Cleared profiles ({removed} pick lines removed).")

    def closeEvent(self, event: QCloseEvent) -> None:
        self.ray_caster.disable()
        self.model_loader.wait_all()
        self.visualizer.close()
        event.accept()
