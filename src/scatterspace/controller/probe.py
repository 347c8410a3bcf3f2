"""
Nearest-Point Probe
===================
Finds the row closest to a render-space point for tooltip display.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np

from scatterspace.config import PROBE_CUTOFF

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    key: int
    place: npt.NDArray[np.float64]
    text: str


def probe_text(key: int, annotation: Optional[str]) -> str:
    if annotation:
        return f"Key: {key}: {annotation}"
    return f"Key: {key}"


def nearest_row(
    positions: npt.NDArray[np.float64],
    point: npt.ArrayLike,
    cutoff: float = PROBE_CUTOFF
) -> Optional[int]:
    """
    Row index of the position closest to point, if it is strictly within cutoff.

    Exact ties go to the earliest row.
    """
    if len(positions) == 0:
        return None

    query = np.asarray(point, dtype=np.float64).reshape(3)
    d2 = np.sum((positions - query) ** 2, axis=1)
    best = int(np.argmin(d2))

    if d2[best] >= cutoff * cutoff:
        return None
    return best


def probe(
    positions: npt.NDArray[np.float64],
    keys: Sequence[int],
    point: npt.ArrayLike,
    annotations: Optional[Sequence[str]] = None,
    cutoff: float = PROBE_CUTOFF
) -> Optional[ProbeResult]:
    """
    Probe render-space positions (one per row, row order) for the nearest hit.

    keys and annotations run parallel to positions; annotations may be
    missing or shorter than the row count.
    """
    row = nearest_row(positions, point, cutoff)
    if row is None:
        return None

    key = int(keys[row])
    annotation = None
    if annotations is not None and row < len(annotations):
        annotation = annotations[row]

    return ProbeResult(key=key, place=np.array(positions[row], dtype=np.float64), text=probe_text(key, annotation))
