"""
Background Workers (Threading)
==============================
This module contains the QThread used to load surface models.

Why is this file needed?
------------------------
1. Responsiveness: Reading a large OBJ/STL/VTK file on the main thread would
   freeze the GUI. The worker only reads the file; the dataset is handed back
   through a signal and inserted into the scene on the main thread.
2. Signals: They provide a safe way to report success or failure to the
   window from the background thread.

Classes:
    ModelLoadWorker: Reads one model file.
    ModelLoader: Starts workers and adds finished models to the scene.
"""
from __future__ import annotations

import logging
import os
from typing import Optional, TYPE_CHECKING

import numpy as np
import pyvista as pv
from PySide6.QtCore import QObject, QThread, Signal

from elevationprofile import config

if TYPE_CHECKING:
    from elevationprofile.controller.scene import Scene

logger = logging.getLogger(__name__)


def read_model(path: str) -> pv.DataSet:
    """
    Read a surface model with the PyVista/VTK readers.

    OBJ material libraries are not applied; only geometry is used.

    Raises:
        FileNotFoundError: If the path does not exist.
        ValueError: If the file contains no points.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Model file not found: {path}")

    mesh = pv.read(path)
    if mesh is None or (not isinstance(mesh, pv.MultiBlock) and mesh.n_points == 0):
        raise ValueError(f"Model file contains no geometry: {path}")
    return mesh


def demo_terrain(size: float = 10.0, resolution: int = 80) -> pv.PolyData:
    """
    Synthetic hilly surface centred on the origin, crossing z = 0.

    Used when the application is started without a model file.
    """
    axis = np.linspace(-size / 2, size / 2, resolution)
    x, y = np.meshgrid(axis, axis)
    z = (
        1.2 * np.exp(-((x - 1.5) ** 2 + (y - 1.0) ** 2) / 3.0)
        - 0.8 * np.exp(-((x + 2.0) ** 2 + (y + 1.5) ** 2) / 2.0)
        + 0.25 * np.sin(x) * np.cos(y)
    )
    return pv.StructuredGrid(x, y, z).extract_surface(algorithm=None)


class ModelLoadWorker(QThread):
    # Signals to update the UI from the background
    loaded = Signal(object)  # pv.DataSet
    error_occurred = Signal(str)

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path

    def run(self) -> None:
        try:
            logger.info(f"Loading model from: {self.path}")
            mesh = read_model(self.path)
            self.loaded.emit(mesh)
        except Exception as e:
            logger.exception(f"Failed to load model from {self.path}")
            self.error_occurred.emit(str(e))


class ModelLoader(QObject):
    """
    Asynchronously populates the scene with a surface model.

    Ray casts simply find nothing until the model is present.
    """
    model_loaded = Signal(object)
    load_failed = Signal(str)

    def __init__(self, scene: Scene, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.scene = scene
        self._workers: list[ModelLoadWorker] = []

    def load_model(self, path: str) -> ModelLoadWorker:
        worker = ModelLoadWorker(path)
        worker.loaded.connect(self.add_model)
        worker.error_occurred.connect(self.load_failed.emit)
        worker.finished.connect(lambda: self._forget(worker))
        self._workers.append(worker)
        worker.start()
        return worker

    def add_model(self, mesh: pv.DataObject) -> None:
        """Insert (or replace) the model. Must run on the main thread."""
        self.scene.add(config.MODEL_TAG, mesh, pickable=True, color="#c2b280", smooth_shading=True)
        logger.info(f"Model added to scene ({type(mesh).__name__}).")
        self.model_loaded.emit(mesh)

    def wait_all(self, msecs: int = 5000) -> None:
        for worker in list(self._workers):
            worker.wait(msecs)

    def _forget(self, worker: ModelLoadWorker) -> None:
        if worker in self._workers:
            self._workers.remove(worker)
        worker.deleteLater()
