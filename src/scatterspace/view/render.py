"""
Render Sink (PyVista Adapter)
=============================
The narrow interface through which plots hand their instance arrays and
tables to whatever draws the scene, and a PyVista-backed implementation.
"""
from __future__ import annotations

import itertools
import logging
from typing import Protocol, Sequence, TYPE_CHECKING

import numpy as np
import pyvista as pv

from scatterspace.controller.instances import instance_colors, instance_positions, instance_scales
from scatterspace.model.columns import Column, ColumnKind

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def numeric_table(columns: Sequence[Column]) -> pv.Table:
    return pv.Table({c.name: np.array(c.data) for c in columns if c.kind == ColumnKind.REAL})


class RenderSink(Protocol):
    def create_object(self, name: str) -> int: ...
    def update_instances(self, handle: int, instances: npt.NDArray[np.float64]) -> None: ...
    def publish_table(self, name: str, columns: Sequence[Column]) -> int: ...
    def update_table(self, handle: int, columns: Sequence[Column]) -> None: ...


class PyVistaSink:
    """
    Keeps one PolyData per drawable. Points come from the instance
    positions, 'color' and 'scale' are attached as point data.
    """
    def __init__(self) -> None:
        self._handles = itertools.count(1)
        self.objects: dict[int, pv.PolyData] = {}
        self.names: dict[int, str] = {}
        self.tables: dict[int, pv.Table] = {}

    def create_object(self, name: str) -> int:
        handle = next(self._handles)
        self.objects[handle] = pv.PolyData()
        self.names[handle] = name
        logger.debug(f"Created render object '{name}' ({handle}).")
        return handle

    def update_instances(self, handle: int, instances: npt.NDArray[np.float64]) -> None:
        if len(instances) == 0:
            self.objects[handle] = pv.PolyData()
            return

        poly = pv.PolyData(np.ascontiguousarray(instance_positions(instances)))
        poly.point_data["color"] = np.ascontiguousarray(instance_colors(instances))
        poly.point_data["scale"] = np.ascontiguousarray(instance_scales(instances))
        self.objects[handle] = poly

    def publish_table(self, name: str, columns: Sequence[Column]) -> int:
        """Expose the numeric columns of a table. Text and vector columns are skipped."""
        handle = next(self._handles)
        skipped = [c.name for c in columns if c.kind != ColumnKind.REAL]
        if skipped:
            logger.debug(f"Table '{name}': not publishing non-numeric columns {skipped}.")
        self.tables[handle] = numeric_table(columns)
        self.names[handle] = name
        return handle

    def update_table(self, handle: int, columns: Sequence[Column]) -> None:
        """Replace a published table with the current column contents."""
        self.tables[handle] = numeric_table(columns)

    def glyphs(self, handle: int) -> pv.PolyData:
        """Sphere glyphs sized by the largest per-axis scale of each point."""
        poly = self.objects[handle]
        if poly.n_points == 0:
            return pv.PolyData()

        source = poly.copy()
        source.point_data["size"] = np.max(poly.point_data["scale"], axis=1)
        return source.glyph(geom=pv.Sphere(radius=1.0), scale="size", orient=False)
