"""
3D Visualization Widget (PyVista Wrapper)
"""

from __future__ import annotations

from typing import Optional

import logging

from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QFrame, QStyle
from PySide6.QtGui import QCloseEvent, QResizeEvent

from pyvistaqt import QtInteractor
import pyvista as pv

from elevationprofile import config
from elevationprofile.controller.camera import PlotterCamera
from elevationprofile.controller.scene import Scene
from elevationprofile.view.widgets.viewport import QtViewport

logger = logging.getLogger(__name__)


class SceneWidget(QWidget):
    """
    The 3D viewport: a QtInteractor with trackball camera, axes and the
    intersectable Scene bound to it.
    """
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter.interactor)

        self._init_plotter()

        # --- Collaborators for the picker ---
        self.scene = Scene(self.plotter)
        self.viewport = QtViewport(self.plotter.interactor)
        self.camera = PlotterCamera(lambda: self.plotter.camera, self.viewport.aspect)

        # --- Visibility state ---
        self._visible_model: bool = True
        self._visible_overlays: bool = True

        self._setup_overlay_controls()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def show_model(self, mesh: pv.DataObject) -> None:
        """Frame the camera on a freshly loaded model."""
        logger.info("Framing camera on model.")
        self.plotter.reset_camera()
        self._apply_visibility()
        self.plotter.render()

    def set_model_visible(self, visible: bool, render: bool = True) -> None:
        """
        Public slot to toggle model visibility.
        Args:
            visible: True to show, False to hide.
            render: If True, triggers a re-render immediately. Set False for batch updates.
        """
        self._visible_model = visible
        # Sync UI button without triggering signal loop
        if self.btn_vis_model.isChecked() != visible:
            self.btn_vis_model.blockSignals(True)
            self.btn_vis_model.setChecked(visible)
            self.btn_vis_model.blockSignals(False)

        self._apply_visibility()
        if render:
            self.plotter.render()

    def set_overlays_visible(self, visible: bool, render: bool = True) -> None:
        """Public slot to toggle pick lines and the elevation curve."""
        self._visible_overlays = visible
        if self.btn_vis_overlays.isChecked() != visible:
            self.btn_vis_overlays.blockSignals(True)
            self.btn_vis_overlays.setChecked(visible)
            self.btn_vis_overlays.blockSignals(False)

        self._apply_visibility()
        if render:
            self.plotter.render()

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    def _init_plotter(self) -> None:
        self.plotter.set_background("#30343c", top="#6b7280")
        self.plotter.add_axes()
        self.plotter.enable_trackball_style()
        self.plotter.camera_position = "iso"

    def _apply_visibility(self) -> None:
        """Applies visibility states to all layers."""
        for name, actor in self.plotter.actors.items():
            if name == config.MODEL_TAG:
                actor.SetVisibility(self._visible_model)
            elif name == config.ELEVATION_CURVE_TAG or name.startswith(config.PICK_LINE_TAG):
                actor.SetVisibility(self._visible_overlays)

    def _setup_overlay_controls(self) -> None:
        """Floating toggle buttons."""
        self.overlay_widget = QFrame(self)
        self.overlay_widget.setStyleSheet("""
            QFrame { background-color: rgba(255, 255, 255, 200); border-radius: 6px; border: 1px solid #ccc; }
            QPushButton { background-color: transparent; border: none; padding: 4px; }
            QPushButton:checked { background-color: rgba(0, 120, 215, 50); border: 1px solid #0078D7; border-radius: 3px; }
            QPushButton:hover { background-color: rgba(0, 0, 0, 10); }
        """)

        layout = QHBoxLayout(self.overlay_widget)
        layout.setContentsMargins(4, 4, 4, 4)

        def make_btn(icon, slot, tooltip, default_state=True):
            btn = QPushButton()
            btn.setIcon(self.style().standardIcon(icon))
            btn.setCheckable(True)
            btn.setChecked(default_state)
            btn.setToolTip(tooltip)
            btn.toggled.connect(slot)
            layout.addWidget(btn)
            return btn

        self.btn_vis_model = make_btn(QStyle.SP_FileIcon, self.set_model_visible, "Show Model")
        self.btn_vis_overlays = make_btn(QStyle.SP_FileDialogListView, self.set_overlays_visible, "Show Lines & Curve")

        self.overlay_widget.adjustSize()
        self.overlay_widget.move(8, 8)

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self.overlay_widget.raise_()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.plotter.close()
        event.accept()
