"""
Point Table (Data Model)
========================
Columnar row store with stable row identity.

Why is this file needed?
------------------------
1. Identity: Every row gets a key at insertion that survives edits and the
   deletion of other rows. Keys are never reused.
2. Selections: Named slots of keys (brushes) live next to the data they refer to.
3. Notification: Plots listen to the table signals and rebuild their instances.

Classes:
    Table: The row store.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, Signal

from scatterspace.model.columns import Column
from scatterspace.model.selection import Selection, apply_action

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class Table(QObject):
    """
    A named list of equal-length columns plus the key/row bookkeeping.

    All mutations emit their signal synchronously before returning.
    """
    rows_inserted = Signal(object)      # keys (int64 array)
    rows_updated = Signal(object)       # keys that were actually touched
    rows_deleted = Signal(object)       # keys that were actually removed
    table_reset = Signal()
    selection_updated = Signal(object)  # Selection

    def __init__(self, name: str, columns: Sequence[Column], parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.name = name
        self._columns: list[Column] = list(columns)

        lengths = {c.size() for c in self._columns if c.size() > 0}
        if len(lengths) > 1:
            detail = ", ".join(f"{c.name}={c.size()}" for c in self._columns)
            raise ValueError(f"Table '{name}': columns have different lengths ({detail}).")

        num_rows = lengths.pop() if lengths else 0
        for column in self._columns:
            column.pad_to(num_rows)

        self._row_to_key: list[int] = list(range(num_rows))
        self._key_to_row: dict[int, int] = {k: k for k in range(num_rows)}
        self._key_counter: int = num_rows
        self._selections: dict[str, Selection] = {}

        logger.debug(f"Table '{name}' created with {len(self._columns)} columns, {num_rows} rows.")

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def headers(self) -> list[str]:
        return [c.name for c in self._columns]

    @property
    def columns(self) -> list[Column]:
        return self._columns

    @property
    def num_columns(self) -> int:
        return len(self._columns)

    @property
    def num_rows(self) -> int:
        return len(self._row_to_key)

    def get_column(self, index: int) -> Column:
        if index < 0 or index >= len(self._columns):
            raise IndexError(f"Table '{self.name}' has no column {index}.")
        return self._columns[index]

    def keys(self) -> npt.NDArray[np.int64]:
        """Live keys in row order."""
        return np.asarray(self._row_to_key, dtype=np.int64)

    def row_of(self, key: int) -> Optional[int]:
        return self._key_to_row.get(int(key))

    def key_of(self, row: int) -> int:
        return self._row_to_key[row]

    def rows_for_keys(self, keys: Iterable[int]) -> list[int]:
        """Rows of the given keys, skipping keys that are no longer live."""
        rows = []
        for key in keys:
            row = self._key_to_row.get(int(key))
            if row is not None:
                rows.append(row)
        return rows

    def get_row_by_key(self, column: int, key: int, default: Any = None) -> Any:
        row = self._key_to_row.get(int(key))
        if row is None:
            return default
        return self.get_column(column).value_at(row)

    def get_row(self, row: int) -> list[Any]:
        return [c.value_at(row) for c in self._columns]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _fit_row(self, values: Sequence[Any]) -> list[Any]:
        """Truncate or pad a row to the column count."""
        values = list(values)
        n = len(self._columns)
        if len(values) != n:
            logger.debug(f"Table '{self.name}': row of {len(values)} values fitted to {n} columns.")
        return (values + [None] * n)[:n]

    def insert(self, rows: Iterable[Sequence[Any]]) -> npt.NDArray[np.int64]:
        """Append rows and return their freshly allocated keys."""
        fitted = [self._fit_row(r) for r in rows]
        if not fitted:
            return np.zeros(0, dtype=np.int64)

        for ci, column in enumerate(self._columns):
            column.extend([r[ci] for r in fitted])

        new_keys = []
        for _ in fitted:
            key = self._key_counter
            self._key_counter += 1
            self._key_to_row[key] = len(self._row_to_key)
            self._row_to_key.append(key)
            new_keys.append(key)

        keys = np.asarray(new_keys, dtype=np.int64)
        logger.debug(f"Table '{self.name}': inserted {len(keys)} rows.")
        self.rows_inserted.emit(keys)
        return keys

    def update(self, keys: Iterable[int], rows: Iterable[Sequence[Any]]) -> npt.NDArray[np.int64]:
        """Overwrite rows in place. Unknown keys are skipped."""
        touched = []
        for key, values in zip(keys, rows):
            row = self._key_to_row.get(int(key))
            if row is None:
                logger.debug(f"Table '{self.name}': update skipped stale key {key}.")
                continue
            for column, value in zip(self._columns, self._fit_row(values)):
                column.set_at(row, value)
            touched.append(int(key))

        touched_keys = np.asarray(touched, dtype=np.int64)
        self.rows_updated.emit(touched_keys)
        return touched_keys

    def delete(self, keys: Iterable[int], prune: bool = False) -> npt.NDArray[np.int64]:
        """
        Remove the rows of all distinct live keys.

        Rows are removed highest index first; rows after the first removed one
        are renumbered. Selections keep the dead keys unless prune is set.
        """
        rows = sorted(set(self.rows_for_keys(keys)), reverse=True)
        removed = np.asarray([self._row_to_key[r] for r in rows], dtype=np.int64)

        if rows:
            for column in self._columns:
                column.delete_rows(rows)
            for row in rows:
                del self._key_to_row[self._row_to_key[row]]
                del self._row_to_key[row]
            for row in range(rows[-1], len(self._row_to_key)):
                self._key_to_row[self._row_to_key[row]] = row
            logger.debug(f"Table '{self.name}': deleted {len(rows)} rows.")

        self.rows_deleted.emit(removed)

        if prune:
            self.prune_selections()
        return removed

    def reset(self) -> None:
        """Drop all rows. Issued keys stay retired."""
        for column in self._columns:
            column.clear()
        self._row_to_key.clear()
        self._key_to_row.clear()
        logger.debug(f"Table '{self.name}': reset.")
        self.table_reset.emit()

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def selection_names(self) -> list[str]:
        return list(self._selections.keys())

    def selection(self, slot: str) -> npt.NDArray[np.int64]:
        current = self._selections.get(slot)
        if current is None:
            return np.zeros(0, dtype=np.int64)
        return current.keys.copy()

    def set_selection(self, selection: Selection) -> None:
        """Store a slot and announce it. Slots that end up empty are dropped."""
        self._selections[selection.name] = selection
        self.selection_updated.emit(selection)

        if selection.is_empty:
            self._selections.pop(selection.name, None)

    def modify_selection(self, slot: str, keys: npt.ArrayLike, action: int) -> None:
        """Replace (0), union (>0) or subtract (<0) keys in a slot."""
        result = apply_action(self._selections.get(slot), slot, keys, action)
        if result is None:
            logger.debug(f"Table '{self.name}': nothing to subtract from slot '{slot}'.")
            return
        self.set_selection(result)

    def prune_selections(self) -> None:
        """Drop keys that are no longer live from every slot."""
        live = self.keys()
        for slot, current in list(self._selections.items()):
            kept = current.keys[np.isin(current.keys, live)]
            if kept.size != current.keys.size:
                self.set_selection(Selection(slot, kept))
