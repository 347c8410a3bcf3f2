"""
Selection Algebra
=================
Named sets of row keys and the replace/union/subtract operations applied to
them. Key sets are stored canonically (sorted, unique int64) so the result of
an operation does not depend on input order or duplicates.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Optional

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


class SelectAction(IntEnum):
    SUBTRACT = -1
    REPLACE = 0
    UNION = 1

    @classmethod
    def from_int(cls, value: int) -> SelectAction:
        """Any positive value is a union, any negative one a subtraction."""
        if value > 0:
            return cls.UNION
        if value < 0:
            return cls.SUBTRACT
        return cls.REPLACE


def canonical_keys(keys: npt.ArrayLike) -> npt.NDArray[np.int64]:
    return np.unique(np.asarray(keys, dtype=np.int64).reshape(-1))


@dataclass
class Selection:
    """One selection slot."""
    name: str
    keys: npt.NDArray[np.int64] = field(default_factory=lambda: np.zeros(0, dtype=np.int64))

    def __post_init__(self) -> None:
        self.keys = canonical_keys(self.keys)

    @property
    def is_empty(self) -> bool:
        return self.keys.size == 0

    def __contains__(self, key: int) -> bool:
        idx = np.searchsorted(self.keys, key)
        return bool(idx < self.keys.size and self.keys[idx] == key)


def apply_action(
    current: Optional[Selection],
    slot: str,
    keys: npt.ArrayLike,
    action: int
) -> Optional[Selection]:
    """
    Compute the new state of a slot.

    Returns None when nothing changes, i.e. when subtracting from a slot that
    does not exist yet.
    """
    act = SelectAction.from_int(action)
    incoming = canonical_keys(keys)

    if current is None:
        if act == SelectAction.SUBTRACT:
            return None
        return Selection(slot, incoming)

    match act:
        case SelectAction.REPLACE:
            return Selection(slot, incoming)
        case SelectAction.UNION:
            return Selection(slot, np.union1d(current.keys, incoming))
        case SelectAction.SUBTRACT:
            return Selection(slot, np.setdiff1d(current.keys, incoming, assume_unique=True))
