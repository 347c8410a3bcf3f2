"""
Plot Domain
===========
Defines the affine mapping from data space to render space and the observable
container that every plot in a scene shares.

Classes:
    Domain: Per-axis linear mapping between two axis-aligned boxes.
    SharedDomain: QObject that owns the current Domain and announces changes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Hashable, Sequence

import numpy as np
from PySide6.QtCore import QObject, Signal

from scatterspace.config import (
    BOUNDS_EPSILON, DEFAULT_AXIS_TITLES,
    DEFAULT_INPUT_MAX, DEFAULT_INPUT_MIN,
    DEFAULT_OUTPUT_MAX, DEFAULT_OUTPUT_MIN,
)

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def as_vec3(value: Sequence[float] | npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Coerce a 3-sequence to a float64 array of shape (3,)."""
    arr = np.asarray(value, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {arr.shape}.")
    return arr


@dataclass
class Domain:
    """
    Maps data-space coordinates into render space.

    Each axis is interpolated independently. An axis whose input range is
    empty (input_min == input_max) passes coordinates through unchanged.
    """
    input_min: npt.NDArray[np.float64] = field(default_factory=lambda: as_vec3(DEFAULT_INPUT_MIN))
    input_max: npt.NDArray[np.float64] = field(default_factory=lambda: as_vec3(DEFAULT_INPUT_MAX))
    output_min: npt.NDArray[np.float64] = field(default_factory=lambda: as_vec3(DEFAULT_OUTPUT_MIN))
    output_max: npt.NDArray[np.float64] = field(default_factory=lambda: as_vec3(DEFAULT_OUTPUT_MAX))

    def __post_init__(self) -> None:
        self.input_min = as_vec3(self.input_min)
        self.input_max = as_vec3(self.input_max)
        self.output_min = as_vec3(self.output_min)
        self.output_max = as_vec3(self.output_max)

    def transform(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Transform a point (3,) or a batch of points (N, 3) into render space.

        Uses y0 * (1 - t) + y1 * t so both box corners map exactly onto the
        output corners.
        """
        p = np.asarray(points, dtype=np.float64)
        span = self.input_max - self.input_min
        degenerate = span == 0.0
        safe_span = np.where(degenerate, 1.0, span)

        t = (p - self.input_min) / safe_span
        mapped = self.output_min * (1.0 - t) + self.output_max * t
        return np.where(degenerate, p, mapped)

    def copy(self) -> Domain:
        return Domain(
            input_min=self.input_min.copy(),
            input_max=self.input_max.copy(),
            output_min=self.output_min.copy(),
            output_max=self.output_max.copy(),
        )


def bounds_of(
    px: npt.ArrayLike,
    py: npt.ArrayLike,
    pz: npt.ArrayLike
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Per-axis minimum and maximum of a set of positions.

    Returns two zero vectors when there are no positions.
    """
    px = np.asarray(px, dtype=np.float64)
    py = np.asarray(py, dtype=np.float64)
    pz = np.asarray(pz, dtype=np.float64)

    if px.size == 0 or py.size == 0 or pz.size == 0:
        return np.zeros(3), np.zeros(3)

    lo = np.array([px.min(), py.min(), pz.min()])
    hi = np.array([px.max(), py.max(), pz.max()])
    return lo, hi


class SharedDomain(QObject):
    """
    The Domain observed by all plots of one scene.

    Plots ask for their data bounds to be adopted while auto-updates are on;
    an explicit set_domain() pins the mapping and turns auto-updates off.
    """
    domain_updated = Signal()
    labels_updated = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._domain = Domain()
        self._auto_updates = True
        self._axis_titles: tuple[str, str, str] = DEFAULT_AXIS_TITLES
        self._source_bounds: dict[Hashable, tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]] = {}

    def current_domain(self) -> Domain:
        return self._domain

    def domain_auto_updates(self) -> bool:
        return self._auto_updates

    def set_domain_auto_updates(self, enabled: bool) -> None:
        self._auto_updates = enabled

    def set_domain(self, domain: Domain) -> None:
        """Pin an explicit domain. Data bounds are no longer adopted afterwards."""
        self._auto_updates = False
        self._domain = domain.copy()
        logger.debug(f"Domain set explicitly: {self._domain}")
        self.domain_updated.emit()

    def ask_update_input_bounds(
        self,
        lo: npt.ArrayLike,
        hi: npt.ArrayLike,
        source: Hashable = None
    ) -> None:
        """
        Adopt new data-space bounds if auto-updates are on and the bounds moved.

        Bounds are remembered per source and the input box is their union, so
        plots with different extents settle instead of overriding each other.
        """
        if not self._auto_updates:
            return

        self._source_bounds[source] = (as_vec3(lo), as_vec3(hi))
        self._apply_source_bounds()

    def forget_bounds(self, source: Hashable) -> None:
        """Drop the bounds a source reported earlier (e.g. a removed plot)."""
        if self._source_bounds.pop(source, None) is not None and self._auto_updates and self._source_bounds:
            self._apply_source_bounds()

    def _apply_source_bounds(self) -> None:
        lo = np.min([b[0] for b in self._source_bounds.values()], axis=0)
        hi = np.max([b[1] for b in self._source_bounds.values()], axis=0)

        lo_same = np.linalg.norm(self._domain.input_min - lo) <= BOUNDS_EPSILON
        hi_same = np.linalg.norm(self._domain.input_max - hi) <= BOUNDS_EPSILON
        if lo_same and hi_same:
            return

        logger.debug(f"Bounds updated: {lo} -> {hi}")
        self._domain.input_min = lo
        self._domain.input_max = hi
        self.domain_updated.emit()

    def set_axis_labels(self, x_title: str, y_title: str, z_title: str) -> None:
        self._axis_titles = (x_title, y_title, z_title)
        self.labels_updated.emit()

    def axis_titles(self) -> tuple[str, str, str]:
        return self._axis_titles
