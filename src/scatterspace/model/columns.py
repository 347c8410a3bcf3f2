"""
Table Columns
=============
A column is a named, homogeneous sequence of reals, text or 3-vectors.

Real and vector columns are stored as numpy arrays ((N,) and (N, 3)), text
columns as plain Python lists.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Iterable, Optional, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class ColumnKind(StrEnum):
    REAL = "real"
    TEXT = "text"
    VECTOR = "vector"


def infer_kind(values: Any) -> ColumnKind:
    """Guess the column kind from raw values. Empty input defaults to REAL."""
    if isinstance(values, np.ndarray):
        if values.dtype.kind in ("U", "S", "O"):
            return ColumnKind.TEXT
        if values.ndim == 2:
            return ColumnKind.VECTOR
        return ColumnKind.REAL

    values = list(values)
    if not values:
        return ColumnKind.REAL
    if isinstance(values[0], str):
        return ColumnKind.TEXT
    if np.ndim(values[0]) == 1:
        return ColumnKind.VECTOR
    return ColumnKind.REAL


@dataclass
class Column:
    """A single named column of uniform type."""
    name: str
    kind: ColumnKind = ColumnKind.REAL
    data: Any = field(default=None)

    def __post_init__(self) -> None:
        self.data = self._coerce_many([] if self.data is None else self.data)

    @classmethod
    def from_values(cls, name: str, values: Iterable[Any], kind: Optional[ColumnKind] = None) -> Column:
        if not isinstance(values, np.ndarray):
            values = list(values)
        return cls(name=name, kind=kind or infer_kind(values), data=values)

    # --- Conversion ---

    def _coerce_many(self, values: Any) -> Any:
        if self.kind == ColumnKind.TEXT:
            return ["" if v is None else str(v) for v in values]
        if self.kind == ColumnKind.VECTOR:
            arr = np.array(values, dtype=np.float64)
            if arr.size == 0:
                return np.zeros((0, 3), dtype=np.float64)
            if arr.ndim != 2 or arr.shape[1] != 3:
                raise ValueError(f"Column '{self.name}': expected shape (N, 3), got {arr.shape}.")
            return arr
        return np.array(values, dtype=np.float64).reshape(-1)

    def coerce(self, value: Any) -> Any:
        """Convert one incoming cell value. Missing values become the blank value."""
        if value is None:
            return self.blank()
        if self.kind == ColumnKind.TEXT:
            return str(value)
        if self.kind == ColumnKind.VECTOR:
            vec = np.zeros(3, dtype=np.float64)
            raw = np.asarray(value, dtype=np.float64).reshape(-1)[:3]
            vec[:raw.size] = raw
            return vec
        return float(value)

    def blank(self) -> Any:
        if self.kind == ColumnKind.TEXT:
            return ""
        if self.kind == ColumnKind.VECTOR:
            return np.zeros(3, dtype=np.float64)
        return 0.0

    # --- Storage ---

    def size(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return self.size()

    @property
    def is_numeric(self) -> bool:
        return self.kind == ColumnKind.REAL

    def value_at(self, row: int) -> Any:
        return self.data[row]

    def set_at(self, row: int, value: Any) -> None:
        self.data[row] = self.coerce(value)

    def extend(self, values: list[Any]) -> None:
        coerced = [self.coerce(v) for v in values]
        if self.kind == ColumnKind.TEXT:
            self.data.extend(coerced)
        elif self.kind == ColumnKind.VECTOR:
            if coerced:
                self.data = np.vstack([self.data, np.asarray(coerced)])
        else:
            self.data = np.concatenate([self.data, np.asarray(coerced, dtype=np.float64)])

    def pad_to(self, n_rows: int) -> None:
        """Fill an under-length column with blank values."""
        missing = n_rows - self.size()
        if missing > 0:
            self.extend([None] * missing)

    def delete_rows(self, rows_descending: list[int]) -> None:
        """Remove rows. Indices must be unique and sorted high to low."""
        if self.kind == ColumnKind.TEXT:
            for row in rows_descending:
                del self.data[row]
        else:
            self.data = np.delete(self.data, rows_descending, axis=0)

    def clear(self) -> None:
        self.data = self._coerce_many([])

    def as_doubles(self) -> npt.NDArray[np.float64]:
        """Numeric view of a REAL column. Other kinds give an empty array."""
        if self.kind != ColumnKind.REAL:
            return np.zeros(0, dtype=np.float64)
        return self.data
