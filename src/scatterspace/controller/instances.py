"""
Scatter Instance Builder
========================
Packs per-row position, color and scale into 4x4 instance matrices for
batched glyph rendering.

Layout of one instance (columns of the matrix):
    0: render-space position, w = 1
    1: RGB color, w = 1
    2: orientation quaternion (x, y, z, w), identity (0, 0, 0, 1)
    3: per-axis scale, w = 1

Attribute arrays shorter than the row count are read modulo their length, so
a single value applies to every row and other lengths wrap around.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

import numpy as np

from scatterspace.config import DEFAULT_COLOR, DEFAULT_SCALE
from scatterspace.model.domain import Domain

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def seat_span(source: Optional[npt.ArrayLike], default: float) -> npt.NDArray[np.float64]:
    """The source values, or a one-element array holding the default."""
    if source is None:
        return np.array([default], dtype=np.float64)
    arr = np.asarray(source, dtype=np.float64).reshape(-1)
    if arr.size == 0:
        return np.array([default], dtype=np.float64)
    return arr


def modulus_indexed(span: npt.NDArray[np.float64], count: int) -> npt.NDArray[np.float64]:
    """Read span[i % len(span)] for i in 0..count-1."""
    return span[np.arange(count) % span.size]


@dataclass
class ScatterArrays:
    """Parallel per-row inputs. Positions are required, the rest optional."""
    px: npt.ArrayLike
    py: npt.ArrayLike
    pz: npt.ArrayLike
    cr: Optional[npt.ArrayLike] = None
    cg: Optional[npt.ArrayLike] = None
    cb: Optional[npt.ArrayLike] = None
    sx: Optional[npt.ArrayLike] = None
    sy: Optional[npt.ArrayLike] = None
    sz: Optional[npt.ArrayLike] = None


def empty_instances() -> npt.NDArray[np.float64]:
    return np.zeros((0, 4, 4), dtype=np.float64)


def build_instances(arrays: ScatterArrays, domain: Domain) -> npt.NDArray[np.float64]:
    """
    Build an (N, 4, 4) instance array.

    N is the length of px; py and pz must have the same length. Zero rows
    give an empty (0, 4, 4) array.
    """
    px = np.asarray(arrays.px, dtype=np.float64).reshape(-1)
    py = np.asarray(arrays.py, dtype=np.float64).reshape(-1)
    pz = np.asarray(arrays.pz, dtype=np.float64).reshape(-1)

    count = px.size
    if count == 0:
        return empty_instances()

    positions = domain.transform(np.column_stack((px, py, pz)))

    colors = np.column_stack([
        modulus_indexed(seat_span(arrays.cr, DEFAULT_COLOR[0]), count),
        modulus_indexed(seat_span(arrays.cg, DEFAULT_COLOR[1]), count),
        modulus_indexed(seat_span(arrays.cb, DEFAULT_COLOR[2]), count),
    ])

    scales = np.column_stack([
        modulus_indexed(seat_span(arrays.sx, DEFAULT_SCALE[0]), count),
        modulus_indexed(seat_span(arrays.sy, DEFAULT_SCALE[1]), count),
        modulus_indexed(seat_span(arrays.sz, DEFAULT_SCALE[2]), count),
    ])

    instances = np.zeros((count, 4, 4), dtype=np.float64)
    instances[:, :3, 0] = positions
    instances[:, :3, 1] = colors
    instances[:, :3, 3] = scales
    instances[:, 3, :] = 1.0

    return instances


def instance_positions(instances: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    return instances[:, :3, 0]


def instance_colors(instances: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    return instances[:, :3, 1]


def instance_scales(instances: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    return instances[:, :3, 3]


class InstanceBuilder:
    """Holds the most recently built instance array."""
    def __init__(self) -> None:
        self._instances = empty_instances()

    def build(self, arrays: ScatterArrays, domain: Domain) -> npt.NDArray[np.float64]:
        self._instances = build_instances(arrays, domain)
        logger.debug(f"Built {len(self._instances)} instances.")
        return self._instances

    def clear(self) -> None:
        self._instances = empty_instances()

    @property
    def instances(self) -> npt.NDArray[np.float64]:
        return self._instances

    @property
    def empty(self) -> bool:
        return len(self._instances) == 0

    def positions(self) -> npt.NDArray[np.float64]:
        return instance_positions(self._instances)
