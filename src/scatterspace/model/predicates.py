"""
Spatial Selection Shapes
========================
The four shapes a client can brush with, and their evaluation against an
(N, 3) array of positions.

Classes:
    SelectRegion: Axis-aligned box, inclusive bounds.
    SelectSphere: Passes points strictly OUTSIDE the radius.
    SelectPlane: Passes points in the open half-space the normal points to.
    SelectHull: Closed triangle mesh, ray-parity containment.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Union

import numpy as np

from scatterspace.config import HULL_RAY_LENGTH
from scatterspace.model.domain import as_vec3
from scatterspace.model.selection import SelectAction

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# Determinant threshold below which a ray is treated as parallel to a triangle
_PARALLEL_EPS = 1e-12

# Slack on the barycentric bounds so a ray through a shared edge hits both sides
_EDGE_EPS = 1e-9

# Crossings closer than this (in segment parameter) are the same surface crossing
_SAME_CROSSING_T = 1e-12


class CoordinateSpace(StrEnum):
    """Which positions a query runs against."""
    DATA = "data"
    RENDER = "render"


@dataclass
class SelectRegion:
    min: npt.NDArray[np.float64]
    max: npt.NDArray[np.float64]
    select: int = SelectAction.REPLACE

    def __post_init__(self) -> None:
        self.min = as_vec3(self.min)
        self.max = as_vec3(self.max)


@dataclass
class SelectSphere:
    point: npt.NDArray[np.float64]
    radius: float
    select: int = SelectAction.REPLACE

    def __post_init__(self) -> None:
        self.point = as_vec3(self.point)
        self.radius = float(self.radius)


@dataclass
class SelectPlane:
    point: npt.NDArray[np.float64]
    normal: npt.NDArray[np.float64]
    select: int = SelectAction.REPLACE

    def __post_init__(self) -> None:
        self.point = as_vec3(self.point)
        self.normal = as_vec3(self.normal)


@dataclass
class SelectHull:
    points: npt.NDArray[np.float64] = field(default_factory=lambda: np.zeros((0, 3)))
    index: npt.NDArray[np.int64] = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    select: int = SelectAction.REPLACE

    def __post_init__(self) -> None:
        self.points = np.asarray(self.points, dtype=np.float64).reshape(-1, 3)
        self.index = np.asarray(self.index, dtype=np.int64).reshape(-1)

    def triangles(self) -> npt.NDArray[np.float64]:
        """
        Triangle corners as a (T, 3, 3) array.

        A trailing partial triple and triples referencing missing vertices
        are ignored.
        """
        n_tri = self.index.size // 3
        tri_idx = self.index[:n_tri * 3].reshape(-1, 3)
        valid = np.all((tri_idx >= 0) & (tri_idx < len(self.points)), axis=1)
        if not np.all(valid):
            logger.debug(f"Hull: ignoring {np.count_nonzero(~valid)} triangles with bad indices.")
        return self.points[tri_idx[valid]]


SpatialSelection = Union[SelectRegion, SelectSphere, SelectPlane, SelectHull]


# -------------------------------------------------------------------------------
# Evaluation
# -------------------------------------------------------------------------------

def _normalized(v: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Row-wise normalization. Zero-length rows stay zero."""
    norm = np.linalg.norm(v, axis=-1, keepdims=True)
    return np.divide(v, norm, out=np.zeros_like(v), where=norm > 0.0)


def in_region(positions: npt.NDArray[np.float64], shape: SelectRegion) -> npt.NDArray[np.bool_]:
    return np.all((positions >= shape.min) & (positions <= shape.max), axis=1)


def outside_sphere(positions: npt.NDArray[np.float64], shape: SelectSphere) -> npt.NDArray[np.bool_]:
    # NOTE: passes points outside the radius. Kept as the clients expect it.
    d2 = np.sum((positions - shape.point) ** 2, axis=1)
    return d2 > shape.radius ** 2


def above_plane(positions: npt.NDArray[np.float64], shape: SelectPlane) -> npt.NDArray[np.bool_]:
    direction = _normalized(positions - shape.point)
    normal = _normalized(shape.normal)
    return direction @ normal > 0.0


def segment_crossings(
    origin: npt.NDArray[np.float64],
    direction: npt.NDArray[np.float64],
    triangles: npt.NDArray[np.float64]
) -> tuple[npt.NDArray[np.bool_], npt.NDArray[np.float64]]:
    """
    Moller-Trumbore segment/triangle test for one segment against many triangles.

    The segment runs from origin to origin + direction. Returns a hit flag and
    the segment parameter t of the crossing for each triangle. Edges count as
    part of both triangles that share them.
    """
    v0 = triangles[:, 0]
    e1 = triangles[:, 1] - v0
    e2 = triangles[:, 2] - v0

    pvec = np.cross(direction, e2)
    det = np.einsum("ij,ij->i", e1, pvec)
    parallel = np.abs(det) < _PARALLEL_EPS
    inv_det = np.divide(1.0, det, out=np.zeros_like(det), where=~parallel)

    tvec = origin - v0
    u = np.einsum("ij,ij->i", tvec, pvec) * inv_det

    qvec = np.cross(tvec, e1)
    v = (qvec @ direction) * inv_det
    t = np.einsum("ij,ij->i", e2, qvec) * inv_det

    hits = (
        (~parallel)
        & (u >= -_EDGE_EPS) & (v >= -_EDGE_EPS) & (u + v <= 1.0 + _EDGE_EPS)
        & (t >= 0.0) & (t <= 1.0)
    )
    return hits, t


def ray_hits(
    origin: npt.NDArray[np.float64],
    direction: npt.NDArray[np.float64],
    triangles: npt.NDArray[np.float64]
) -> npt.NDArray[np.bool_]:
    """One hit flag per triangle."""
    hits, _t = segment_crossings(origin, direction, triangles)
    return hits


def count_crossings(
    origin: npt.NDArray[np.float64],
    direction: npt.NDArray[np.float64],
    triangles: npt.NDArray[np.float64]
) -> int:
    """
    Number of distinct surface crossings along the segment.

    Triangles hit at the same t (a shared edge or vertex) count once.
    """
    hits, t = segment_crossings(origin, direction, triangles)
    t_hit = np.sort(t[hits])
    if t_hit.size == 0:
        return 0
    return 1 + int(np.count_nonzero(np.diff(t_hit) > _SAME_CROSSING_T))


def inside_hull(positions: npt.NDArray[np.float64], shape: SelectHull) -> npt.NDArray[np.bool_]:
    """Odd number of crossings along +Z means inside."""
    result = np.zeros(len(positions), dtype=bool)
    triangles = shape.triangles()
    if len(triangles) == 0:
        return result

    direction = np.array([0.0, 0.0, HULL_RAY_LENGTH])

    for i, origin in enumerate(positions):
        # Skip triangles lying entirely behind the ray origin
        ahead = np.any((triangles - origin) @ direction >= 0.0, axis=1)
        if not np.any(ahead):
            continue
        result[i] = count_crossings(origin, direction, triangles[ahead]) % 2 == 1

    return result


def evaluate(shape: SpatialSelection, positions: npt.ArrayLike) -> npt.NDArray[np.bool_]:
    """Pass/fail flag per position for any spatial selection shape."""
    pts = np.asarray(positions, dtype=np.float64).reshape(-1, 3)

    match shape:
        case SelectRegion():
            return in_region(pts, shape)
        case SelectSphere():
            return outside_sphere(pts, shape)
        case SelectPlane():
            return above_plane(pts, shape)
        case SelectHull():
            return inside_hull(pts, shape)
        case _:
            raise TypeError(f"Unknown selection shape: {type(shape).__name__}")
