"""
Plot Host
=========
The root of one scene: owns the shared domain, the render sink and the
registry of plots, and fans spatial selections and probes out to every plot.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Instantiates the SharedDomain every plot observes.
2. Hands the render sink to the plots it creates.
3. Allocates plot ids (0 is reserved, the counter starts at 1).
"""
from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional, Sequence, TYPE_CHECKING

import numpy as np

from scatterspace.config import DEFAULT_AXIS_TITLES, PROBE_CUTOFF
from scatterspace.controller.plot import ScatterPlot
from scatterspace.controller.point_plot import PointPlot
from scatterspace.controller.table_plot import TablePlot
from scatterspace.model.domain import Domain, SharedDomain
from scatterspace.model.predicates import (
    CoordinateSpace, SelectHull, SelectPlane, SelectRegion, SelectSphere, SpatialSelection,
)
from scatterspace.model.selection import SelectAction
from scatterspace.view.render import PyVistaSink

if TYPE_CHECKING:
    import numpy.typing as npt

    from scatterspace.model.table import Table
    from scatterspace.view.render import RenderSink

logger = logging.getLogger(__name__)

PlotFactory = Callable[..., ScatterPlot]


class PlotHost:
    def __init__(self, sink: Optional[RenderSink] = None) -> None:
        self.sink: RenderSink = sink if sink is not None else PyVistaSink()
        self.domain = SharedDomain()
        self._plots: dict[int, ScatterPlot] = {}
        self._plot_counter = 1

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def append(self, factory: PlotFactory, *args, plot_id: int = -1, **kwargs) -> int:
        """
        Create a plot through factory(host, plot_id, *args, **kwargs).

        A negative plot_id takes the next free id. An id already in use keeps
        its existing plot.
        """
        place = plot_id
        if place < 0:
            place = self._plot_counter
            self._plot_counter += 1

        if place in self._plots:
            logger.warning(f"Plot id {place} already in use, keeping the existing plot.")
            return place

        self._plots[place] = factory(self, place, *args, **kwargs)
        return place

    def remove(self, plot_id: int) -> None:
        plot = self._plots.pop(plot_id, None)
        if plot is None:
            return
        self.domain.domain_updated.disconnect(plot.on_domain_updated)
        plot.disconnect_table()
        plot.set_clear()
        self.domain.forget_bounds(plot_id)
        logger.debug(f"Plot {plot_id} removed.")

    def get_plot(self, plot_id: int) -> Optional[ScatterPlot]:
        return self._plots.get(plot_id)

    def __iter__(self) -> Iterator[tuple[int, ScatterPlot]]:
        return iter(list(self._plots.items()))

    def __len__(self) -> int:
        return len(self._plots)

    def new_point_plot(
        self,
        px: npt.ArrayLike,
        py: npt.ArrayLike,
        pz: npt.ArrayLike,
        colors: Optional[npt.ArrayLike] = None,
        scales: Optional[npt.ArrayLike] = None,
        annotations: Optional[Sequence[str]] = None,
    ) -> int:
        return self.append(PointPlot, px, py, pz, colors=colors, scales=scales, annotations=annotations)

    def new_table_plot(self, table: Table) -> int:
        return self.append(TablePlot, table)

    # ------------------------------------------------------------------
    # Domain
    # ------------------------------------------------------------------

    def set_domain(
        self,
        input_min: npt.ArrayLike,
        input_max: npt.ArrayLike,
        output_min: npt.ArrayLike,
        output_max: npt.ArrayLike,
        axis_names: Sequence[str] = (),
    ) -> None:
        """Pin the domain and set the axis titles (missing titles fall back to x/y/z)."""
        self.domain.set_domain(Domain(input_min, input_max, output_min, output_max))

        names = list(axis_names)[:3]
        names += DEFAULT_AXIS_TITLES[len(names):]
        self.domain.set_axis_labels(*names)

    # ------------------------------------------------------------------
    # Spatial selection
    # ------------------------------------------------------------------

    def dispatch_selection(self, selection: SpatialSelection, space: CoordinateSpace = CoordinateSpace.DATA) -> None:
        for _plot_id, plot in self:
            plot.handle_selection(selection, space)

    def select_region(self, lo: npt.ArrayLike, hi: npt.ArrayLike, action: int = SelectAction.REPLACE) -> None:
        self.dispatch_selection(SelectRegion(lo, hi, action))

    def select_sphere(self, point: npt.ArrayLike, radius: float, action: int = SelectAction.REPLACE) -> None:
        self.dispatch_selection(SelectSphere(point, radius, action))

    def select_plane(self, point: npt.ArrayLike, normal: npt.ArrayLike, action: int = SelectAction.REPLACE) -> None:
        self.dispatch_selection(SelectPlane(point, normal, action))

    def select_hull(self, points: npt.ArrayLike, index: npt.ArrayLike, action: int = SelectAction.REPLACE) -> None:
        self.dispatch_selection(SelectHull(points, index, action))

    # ------------------------------------------------------------------
    # Probe
    # ------------------------------------------------------------------

    def probe_at(self, point: npt.ArrayLike, cutoff: float = PROBE_CUTOFF) -> tuple[str, Optional[npt.NDArray[np.float64]]]:
        """
        Probe every plot at a render-space point.

        Returns one "Plt <id>: <text>" line per plot that hit, and the mean
        of the places found (None if nothing was hit).
        """
        text = ""
        place: Optional[npt.NDArray[np.float64]] = None
        place_count = 0

        for plot_id, plot in self:
            result = plot.handle_probe(point, cutoff)
            if result is None:
                continue

            text += f"Plt {plot_id}: {result.text}\n"

            place_count += 1
            if place is None:
                place = result.place.copy()
            else:
                place = place + (result.place - place) / place_count

        return text, place
