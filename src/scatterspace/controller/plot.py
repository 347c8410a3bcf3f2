"""
Scatter Plot Base
=================
Common behaviour of every plot that draws one glyph per table row.

Why is this file needed?
------------------------
1. Wiring: It connects the table signals and the shared domain signal to a
   single rebuild routine, so every change ends in a fresh instance array.
2. Queries: Brushing and probing work the same way no matter how the rows
   map to positions; subclasses only say where positions, colors and scales
   come from.
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject

from scatterspace.config import BRUSH_SLOT, PROBE_CUTOFF
from scatterspace.controller.instances import InstanceBuilder, ScatterArrays
from scatterspace.controller.probe import ProbeResult, probe
from scatterspace.model.domain import bounds_of
from scatterspace.model.predicates import CoordinateSpace, SpatialSelection, evaluate

if TYPE_CHECKING:
    import numpy.typing as npt

    from scatterspace.controller.host import PlotHost
    from scatterspace.model.table import Table

logger = logging.getLogger(__name__)


class ScatterPlot(QObject):
    """
    A plot backed by a Table.

    Subclasses implement scatter_arrays(), data_positions() and annotations().
    """
    def __init__(self, host: PlotHost, plot_id: int, table: Table) -> None:
        super().__init__()
        self.host = host
        self.plot_id = plot_id
        self.table = table
        self._builder = InstanceBuilder()

        self.table_handle = host.sink.publish_table(table.name, table.columns)
        self.object_handle = host.sink.create_object(f"Plot {plot_id}")

        host.domain.domain_updated.connect(self.on_domain_updated)

    def connect_table(self) -> None:
        """Rebuild on any structural change of the table."""
        self.table.rows_inserted.connect(self.on_table_updated)
        self.table.rows_updated.connect(self.on_table_updated)
        self.table.rows_deleted.connect(self.on_table_updated)
        self.table.table_reset.connect(self.on_table_updated)

    def disconnect_table(self) -> None:
        self.table.rows_inserted.disconnect(self.on_table_updated)
        self.table.rows_updated.disconnect(self.on_table_updated)
        self.table.rows_deleted.disconnect(self.on_table_updated)
        self.table.table_reset.disconnect(self.on_table_updated)

    # --- To be provided by subclasses ---

    def scatter_arrays(self) -> Optional[ScatterArrays]:
        """Per-row inputs for the builder, or None if the plot cannot be built."""
        raise NotImplementedError

    def data_positions(self) -> npt.NDArray[np.float64]:
        raise NotImplementedError

    def annotations(self) -> Optional[list[str]]:
        return None

    # --- Instances ---

    @property
    def instances(self) -> npt.NDArray[np.float64]:
        return self._builder.instances

    def rebuild_instances(self) -> None:
        arrays = self.scatter_arrays()
        if arrays is None:
            return

        domain = self.host.domain.current_domain()
        instances = self._builder.build(arrays, domain)
        self.host.sink.update_instances(self.object_handle, instances)

        if len(instances) and self.host.domain.domain_auto_updates():
            lo, hi = bounds_of(arrays.px, arrays.py, arrays.pz)
            self.host.domain.ask_update_input_bounds(lo, hi, source=self.plot_id)

    def set_clear(self) -> None:
        self._builder.clear()
        self.host.sink.update_instances(self.object_handle, self._builder.instances)

    def on_domain_updated(self) -> None:
        self.rebuild_instances()

    def on_table_updated(self, _keys: object = None) -> None:
        self.host.sink.update_table(self.table_handle, self.table.columns)
        self.rebuild_instances()

    # --- Spatial queries ---

    def positions_in(self, space: CoordinateSpace) -> Optional[npt.NDArray[np.float64]]:
        if space == CoordinateSpace.RENDER:
            positions = self._builder.positions()
        else:
            positions = self.data_positions()

        if len(positions) != self.table.num_rows:
            logger.debug(f"Plot {self.plot_id}: positions out of sync with table, query ignored.")
            return None
        return positions

    def handle_selection(self, selection: SpatialSelection, space: CoordinateSpace = CoordinateSpace.DATA) -> None:
        positions = self.positions_in(space)
        if positions is None:
            return

        mask = evaluate(selection, positions)
        keys = self.table.keys()[mask]
        logger.debug(f"Plot {self.plot_id}: {type(selection).__name__} matched {len(keys)} rows.")
        self.table.modify_selection(BRUSH_SLOT, keys, selection.select)

    def handle_probe(self, point: npt.ArrayLike, cutoff: float = PROBE_CUTOFF) -> Optional[ProbeResult]:
        """Nearest row to a render-space point."""
        positions = self.positions_in(CoordinateSpace.RENDER)
        if positions is None:
            return None
        return probe(positions, self.table.keys(), point, self.annotations(), cutoff)
