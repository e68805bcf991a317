"""
Scene Graph
===========
Named PyVista datasets that can be drawn and ray-cast.

Why is this file needed?
------------------------
1. Intersection: Both the click picker and the vertical elevation probe need
   "where does this ray hit the surface" against every pickable object,
   including the blocks of nested MultiBlock datasets. Each leaf surface
   gets a static cell locator built once on insertion.
2. Tagging: Overlays (pick lines, the elevation curve) are addressed by a
   fixed name so they can be replaced instead of piling up.
3. Rendering: When bound to a plotter, every add/remove is mirrored as an
   actor change. Without a plotter the scene is a plain headless container.

Classes:
    SceneObject: One named dataset with its cached ray locator.
    Scene: The container.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Iterator, Optional, TYPE_CHECKING

import numpy as np
import pyvista as pv
from vtkmodules.vtkCommonCore import vtkIdList, vtkPoints
from vtkmodules.vtkCommonDataModel import vtkStaticCellLocator

from elevationprofile.model.points import Hit, Ray, WorldPoint

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def iter_leaf_datasets(dataset: pv.DataObject) -> Iterator[pv.DataSet]:
    """Yield every non-empty dataset inside a (possibly nested) MultiBlock."""
    if isinstance(dataset, pv.MultiBlock):
        for block in dataset:
            if block is None:
                continue
            yield from iter_leaf_datasets(block)
    elif dataset is not None and dataset.n_points > 0:
        yield dataset


def _build_locator(dataset: pv.DataSet) -> tuple[Optional[vtkStaticCellLocator], Optional[pv.PolyData]]:
    """Triangulated surface of the dataset wrapped in a cell locator."""
    surface = dataset.extract_surface(algorithm=None).triangulate()
    if surface.n_cells == 0:
        return None, None

    locator = vtkStaticCellLocator()
    locator.SetDataSet(surface)
    locator.BuildLocator()
    return locator, surface


@dataclass
class SceneObject:
    name: str
    dataset: pv.DataObject
    pickable: bool = True
    # (locator, surface) per leaf dataset; empty for non-pickable objects
    locators: list[tuple[vtkStaticCellLocator, pv.PolyData]] = field(default_factory=list)

    def build_locators(self) -> None:
        self.locators.clear()
        if not self.pickable:
            return
        for leaf in iter_leaf_datasets(self.dataset):
            locator, surface = _build_locator(leaf)
            if locator is not None:
                self.locators.append((locator, surface))


class Scene:
    """
    Intersectable scene graph.

    Args:
        plotter: Optional PyVista plotter mirroring the scene content.
    """
    def __init__(self, plotter: Optional[pv.Plotter] = None) -> None:
        self.plotter = plotter
        self._objects: dict[str, SceneObject] = {}

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def add(self, name: str, dataset: pv.DataObject, pickable: bool = True, **style: Any) -> SceneObject:
        """
        Insert a dataset under `name`, replacing any object with the same name.

        Extra keyword arguments are forwarded to `Plotter.add_mesh`.
        """
        if name in self._objects:
            self.remove(name)

        obj = SceneObject(name=name, dataset=dataset, pickable=pickable)
        obj.build_locators()
        self._objects[name] = obj

        if self.plotter is not None:
            self.plotter.add_mesh(dataset, name=name, pickable=pickable, reset_camera=False, **style)

        logger.debug(f"Scene object '{name}' added (pickable={pickable}, surfaces={len(obj.locators)}).")
        return obj

    def remove(self, name: str) -> bool:
        """Remove the object called `name`. Returns False if there was none."""
        obj = self._objects.pop(name, None)
        if obj is None:
            return False

        if self.plotter is not None:
            self.plotter.remove_actor(name, reset_camera=False, render=False)

        logger.debug(f"Scene object '{name}' removed.")
        return True

    def remove_prefixed(self, prefix: str) -> int:
        """Remove every object whose name starts with `prefix`."""
        names = [n for n in self._objects if n.startswith(prefix)]
        for name in names:
            self.remove(name)
        return len(names)

    def get(self, name: str) -> SceneObject:
        return self._objects[name]

    def names(self) -> list[str]:
        return list(self._objects)

    def __contains__(self, name: object) -> bool:
        return name in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def render(self) -> None:
        if self.plotter is not None:
            self.plotter.render()

    def intersect(self, ray: Ray) -> list[Hit]:
        """
        All intersections of `ray` with pickable objects, nearest first.

        The ray is treated as a half-line: hits behind the origin are ignored.
        """
        origin = ray.origin.to_array()
        direction = ray.direction.to_array()

        hits: list[Hit] = []
        for obj in self._objects.values():
            for locator, surface in obj.locators:
                end = origin + direction * self._reach(origin, surface)
                for point in self._intersect_locator(locator, origin, end):
                    distance = float(np.linalg.norm(point - origin))
                    hits.append(Hit(point=WorldPoint.from_array(point), distance=distance, name=obj.name))

        hits.sort(key=lambda h: h.distance)
        return hits

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    @staticmethod
    def _reach(origin: npt.NDArray[np.float64], surface: pv.PolyData) -> float:
        """Segment length guaranteed to cross the whole surface from `origin`."""
        x0, x1, y0, y1, z0, z1 = surface.bounds
        center = np.array([(x0 + x1) / 2, (y0 + y1) / 2, (z0 + z1) / 2])
        diagonal = float(np.linalg.norm([x1 - x0, y1 - y0, z1 - z0]))
        return float(np.linalg.norm(center - origin)) + diagonal + 1.0

    @staticmethod
    def _intersect_locator(
        locator: vtkStaticCellLocator,
        start: npt.NDArray[np.float64],
        end: npt.NDArray[np.float64]
    ) -> list[npt.NDArray[np.float64]]:
        points = vtkPoints()
        points.SetDataTypeToDouble()
        cells = vtkIdList()
        locator.IntersectWithLine(start.tolist(), end.tolist(), points, cells)
        return [np.array(points.GetPoint(i), dtype=np.float64) for i in range(points.GetNumberOfPoints())]
