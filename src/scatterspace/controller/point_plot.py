"""
Point Plot
==========
A scatter plot created from coordinate arrays. The arrays are loaded into a
table of its own (x, y, z, r, g, b, sx, sy, sz, anno) that clients may then
edit row by row.
"""
from __future__ import annotations

import logging
from enum import IntEnum
from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np

from scatterspace.config import DEFAULT_COLOR, DEFAULT_SCALE
from scatterspace.controller.instances import ScatterArrays
from scatterspace.controller.plot import ScatterPlot
from scatterspace.model.columns import Column, ColumnKind
from scatterspace.model.table import Table

if TYPE_CHECKING:
    import numpy.typing as npt

    from scatterspace.controller.host import PlotHost

logger = logging.getLogger(__name__)


class PointColumn(IntEnum):
    PX = 0
    PY = 1
    PZ = 2
    CR = 3
    CG = 4
    CB = 5
    SX = 6
    SY = 7
    SZ = 8
    ANNO = 9


def broadcast_triples(
    triples: Optional[npt.ArrayLike],
    num_rows: int,
    default: tuple[float, float, float]
) -> npt.NDArray[np.float64]:
    """Repeat a list of 3-vectors over num_rows rows (modulus indexing)."""
    arr = np.zeros((0, 3)) if triples is None else np.asarray(triples, dtype=np.float64).reshape(-1, 3)
    if len(arr) == 0:
        arr = np.asarray([default], dtype=np.float64)
    return arr[np.arange(num_rows) % len(arr)]


def expand_scales(scales: Optional[npt.ArrayLike], num_rows: int) -> Optional[npt.NDArray[np.float64]]:
    """
    Interpret a scale argument.

    A (K, 3) array or a flat list of exactly 3 * num_rows values gives
    per-axis triples; any other flat list gives one uniform scale per value.
    """
    if scales is None:
        return None

    arr = np.asarray(scales, dtype=np.float64)
    if arr.size == 0:
        return None
    if arr.ndim == 2 and arr.shape[1] == 3:
        return arr

    flat = arr.reshape(-1)
    if flat.size == 3 * num_rows:
        return flat.reshape(-1, 3)
    return np.repeat(flat[:, None], 3, axis=1)


def point_columns(
    px: npt.NDArray[np.float64],
    py: npt.NDArray[np.float64],
    pz: npt.NDArray[np.float64],
    colors: npt.NDArray[np.float64],
    scales: npt.NDArray[np.float64],
    annotations: list[str]
) -> list[Column]:
    return [
        Column("x", ColumnKind.REAL, px),
        Column("y", ColumnKind.REAL, py),
        Column("z", ColumnKind.REAL, pz),
        Column("r", ColumnKind.REAL, colors[:, 0]),
        Column("g", ColumnKind.REAL, colors[:, 1]),
        Column("b", ColumnKind.REAL, colors[:, 2]),
        Column("sx", ColumnKind.REAL, scales[:, 0]),
        Column("sy", ColumnKind.REAL, scales[:, 1]),
        Column("sz", ColumnKind.REAL, scales[:, 2]),
        Column("anno", ColumnKind.TEXT, annotations),
    ]


class PointPlot(ScatterPlot):
    def __init__(
        self,
        host: PlotHost,
        plot_id: int,
        px: npt.ArrayLike,
        py: npt.ArrayLike,
        pz: npt.ArrayLike,
        colors: Optional[npt.ArrayLike] = None,
        scales: Optional[npt.ArrayLike] = None,
        annotations: Optional[Sequence[str]] = None,
    ) -> None:
        px = np.asarray(px, dtype=np.float64).reshape(-1)
        py = np.asarray(py, dtype=np.float64).reshape(-1)
        pz = np.asarray(pz, dtype=np.float64).reshape(-1)

        if not (px.size == py.size == pz.size):
            raise ValueError("Coordinate arrays must be the same length.")

        num_rows = px.size

        # Colors and scales are written out per row so the table reads sanely
        colors_full = broadcast_triples(colors, num_rows, DEFAULT_COLOR)
        scales_full = broadcast_triples(expand_scales(scales, num_rows), num_rows, DEFAULT_SCALE)

        annos = list(annotations or [])[:num_rows]
        annos += [""] * (num_rows - len(annos))

        table = Table(
            f"Point Table {plot_id}",
            point_columns(px, py, pz, colors_full, scales_full, annos)
        )
        super().__init__(host, plot_id, table)

        logger.info(f"Point plot {plot_id} created with {num_rows} points.")

        self.rebuild_instances()
        self.connect_table()

    def _reals(self, column: PointColumn) -> npt.NDArray[np.float64]:
        return self.table.get_column(column).as_doubles()

    def scatter_arrays(self) -> ScatterArrays:
        return ScatterArrays(
            px=self._reals(PointColumn.PX),
            py=self._reals(PointColumn.PY),
            pz=self._reals(PointColumn.PZ),
            cr=self._reals(PointColumn.CR),
            cg=self._reals(PointColumn.CG),
            cb=self._reals(PointColumn.CB),
            sx=self._reals(PointColumn.SX),
            sy=self._reals(PointColumn.SY),
            sz=self._reals(PointColumn.SZ),
        )

    def data_positions(self) -> npt.NDArray[np.float64]:
        return np.column_stack((
            self._reals(PointColumn.PX),
            self._reals(PointColumn.PY),
            self._reals(PointColumn.PZ),
        ))

    def annotations(self) -> list[str]:
        return self.table.get_column(PointColumn.ANNO).data
