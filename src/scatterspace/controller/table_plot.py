"""
Table Plot
==========
A scatter plot over a table supplied from outside. Which columns feed the
positions, the color and the size is chosen with set_columns().
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtGui import QColor

from scatterspace.controller.instances import ScatterArrays, modulus_indexed
from scatterspace.controller.plot import ScatterPlot
from scatterspace.model.columns import Column, ColumnKind

if TYPE_CHECKING:
    import numpy.typing as npt

    from scatterspace.controller.host import PlotHost
    from scatterspace.model.table import Table

logger = logging.getLogger(__name__)

_BLANK = np.zeros(1, dtype=np.float64)


def color_to_rgb(name: str) -> tuple[float, float, float]:
    """Resolve a color name or hex string. Unknown names resolve to black."""
    c = QColor(name)
    return c.redF(), c.greenF(), c.blueF()


def seat_source(column: Column) -> npt.NDArray[np.float64]:
    """Numeric values of a column; text and vector columns read as a single 0.0."""
    if column.kind != ColumnKind.REAL:
        return _BLANK
    return column.as_doubles()


class TablePlot(ScatterPlot):
    def __init__(self, host: PlotHost, plot_id: int, table: Table) -> None:
        super().__init__(host, plot_id, table)

        self._xcol = 0
        self._ycol = 1
        self._zcol = 2
        self._color_col = -1
        self._size_col = -1

        logger.info(f"Table plot {plot_id} created over '{table.name}'.")

        self.connect_table()
        self.rebuild_instances()

    @property
    def column_mapping(self) -> tuple[int, int, int, int, int]:
        return self._xcol, self._ycol, self._zcol, self._color_col, self._size_col

    def set_columns(self, xcol: int, ycol: int, zcol: int, color_col: int = -1, size_col: int = -1) -> None:
        self._xcol = xcol
        self._ycol = ycol
        self._zcol = zcol
        self._color_col = color_col
        self._size_col = size_col
        self.rebuild_instances()

    def are_sources_valid(self) -> bool:
        num_cols = self.table.num_columns

        xyz = all(0 <= c < num_cols for c in (self._xcol, self._ycol, self._zcol))
        color_ok = self._color_col < 0 or self._color_col < num_cols
        size_ok = self._size_col < 0 or self._size_col < num_cols

        return xyz and color_ok and size_ok

    def _positions(self, count: int) -> tuple[npt.NDArray[np.float64], ...]:
        return tuple(
            modulus_indexed(seat_source(self.table.get_column(c)), count)
            for c in (self._xcol, self._ycol, self._zcol)
        )

    def _colors(self) -> tuple[Optional[npt.NDArray[np.float64]], ...]:
        if self._color_col < 0:
            return None, None, None

        column = self.table.get_column(self._color_col)
        if column.kind == ColumnKind.TEXT:
            rgb = np.asarray([color_to_rgb(name) for name in column.data], dtype=np.float64).reshape(-1, 3)
            return rgb[:, 0], rgb[:, 1], rgb[:, 2]
        if column.kind == ColumnKind.VECTOR:
            return column.data[:, 0], column.data[:, 1], column.data[:, 2]

        grey = column.as_doubles()
        return grey, grey, grey

    def _scales(self) -> tuple[Optional[npt.NDArray[np.float64]], ...]:
        if self._size_col < 0:
            return None, None, None

        column = self.table.get_column(self._size_col)
        if column.kind != ColumnKind.REAL:
            return None, None, None

        size = column.as_doubles()
        return size, size, size

    def scatter_arrays(self) -> Optional[ScatterArrays]:
        if self.table.num_columns == 0 or self.table.num_rows == 0:
            logger.debug(f"Table plot {self.plot_id}: nothing to draw.")
            self.set_clear()
            return None

        if not self.are_sources_valid():
            logger.warning(f"Table plot {self.plot_id}: invalid column mapping {self.column_mapping}.")
            return None

        count = self.table.num_rows
        px, py, pz = self._positions(count)
        cr, cg, cb = self._colors()
        sx, sy, sz = self._scales()

        return ScatterArrays(px=px, py=py, pz=pz, cr=cr, cg=cg, cb=cb, sx=sx, sy=sy, sz=sz)

    def data_positions(self) -> npt.NDArray[np.float64]:
        if not self.are_sources_valid() or self.table.num_rows == 0:
            return np.zeros((0, 3), dtype=np.float64)
        return np.column_stack(self._positions(self.table.num_rows))

    def annotations(self) -> Optional[list[str]]:
        """First text column of the table, if any, other than a mapped color column."""
        for index, column in enumerate(self.table.columns):
            if column.kind == ColumnKind.TEXT and index != self._color_col:
                return column.data
        return None
