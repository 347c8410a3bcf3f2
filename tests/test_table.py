# tests/test_table.py

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from scatterspace.model.columns import Column, ColumnKind
from scatterspace.model.table import Table
from tests.conftest import assert_key_row_consistent, record


def test_initial_keys_follow_rows(small_table):
    assert_array_equal(small_table.keys(), [0, 1, 2])
    assert small_table.headers == ["x", "name"]
    assert_key_row_consistent(small_table)


def test_mismatched_column_lengths_raise():
    with pytest.raises(ValueError):
        Table("bad", [Column.from_values("a", [1, 2]), Column.from_values("b", [1, 2, 3])])


def test_empty_columns_are_padded():
    table = Table("t", [Column.from_values("x", [1.0, 2.0]), Column("anno", ColumnKind.TEXT)])

    assert table.num_rows == 2
    assert table.get_column(1).data == ["", ""]


def test_get_column_out_of_range(small_table):
    with pytest.raises(IndexError):
        small_table.get_column(5)


def test_insert_allocates_fresh_keys(small_table):
    calls = record(small_table.rows_inserted)

    keys = small_table.insert([[4.0, "d"], [5.0, "e"]])

    assert_array_equal(keys, [3, 4])
    assert len(calls) == 1
    assert_array_equal(calls[0][0], [3, 4])
    assert small_table.num_rows == 5
    assert_key_row_consistent(small_table)


def test_insert_pads_and_truncates_rows(small_table):
    short_key, long_key = small_table.insert([[4.0], [5.0, "e", "extra"]])

    assert small_table.get_row_by_key(1, short_key) == ""
    assert small_table.get_row_by_key(1, long_key) == "e"
    assert small_table.get_row(small_table.row_of(long_key)) == [5.0, "e"]


def test_update_skips_stale_keys(small_table):
    calls = record(small_table.rows_updated)

    touched = small_table.update([1, 99], [[20.0, "B"], [0.0, "z"]])

    assert_array_equal(touched, [1])
    assert_array_equal(calls[0][0], [1])
    assert small_table.get_row_by_key(0, 1) == 20.0
    assert small_table.get_row_by_key(1, 1) == "B"
    assert "z" not in small_table.get_column(1).data


def test_delete_renumbers_rows(small_table):
    calls = record(small_table.rows_deleted)

    removed = small_table.delete([0, 0, 2, 42])

    assert sorted(removed.tolist()) == [0, 2]
    assert sorted(calls[0][0].tolist()) == [0, 2]
    assert_array_equal(small_table.keys(), [1])
    assert small_table.row_of(1) == 0
    assert small_table.row_of(0) is None
    assert_array_equal(small_table.get_column(0).data, [2.0])
    assert_key_row_consistent(small_table)


def test_keys_are_never_reused(small_table):
    small_table.delete([2])
    keys = small_table.insert([[9.0, "z"]])

    assert_array_equal(keys, [3])
    assert small_table.row_of(2) is None


def test_get_row_by_key_default(small_table):
    small_table.delete([1])
    assert small_table.get_row_by_key(0, 1) is None
    assert small_table.get_row_by_key(0, 1, default=-1.0) == -1.0
    assert small_table.get_row_by_key(0, 2) == 3.0


def test_reset_keeps_key_counter(small_table):
    calls = record(small_table.table_reset)

    small_table.reset()
    assert small_table.num_rows == 0
    assert len(calls) == 1

    keys = small_table.insert([[1.0, "a"]])
    assert_array_equal(keys, [3])


def test_vector_column_rows():
    table = Table("v", [Column.from_values("pos", [[0, 0, 0], [1, 2, 3]])])
    assert table.get_column(0).kind == ColumnKind.VECTOR

    key = table.insert([[[4, 5]]])[0]
    assert_array_equal(table.get_row_by_key(0, key), [4, 5, 0])


def test_columns_do_not_alias_input():
    values = np.array([1.0, 2.0])
    table = Table("t", [Column.from_values("x", values)])
    table.update([0], [[10.0]])
    assert values[0] == 1.0


# --- Selections ---

def test_replace_is_idempotent(small_table):
    small_table.modify_selection("s", [2, 0], 0)
    first = small_table.selection("s")
    small_table.modify_selection("s", [2, 0], 0)

    assert_array_equal(small_table.selection("s"), first)
    assert_array_equal(first, [0, 2])


def test_union_then_subtract_restores(small_table):
    small_table.modify_selection("s", [0], 0)
    small_table.modify_selection("s", [1, 2], 1)
    assert_array_equal(small_table.selection("s"), [0, 1, 2])

    small_table.modify_selection("s", [1, 2], -1)
    assert_array_equal(small_table.selection("s"), [0])


def test_subtract_from_missing_slot_is_noop(small_table):
    calls = record(small_table.selection_updated)

    small_table.modify_selection("nothing", [1], -1)

    assert calls == []
    assert "nothing" not in small_table.selection_names()


def test_selection_ignores_order_and_duplicates(small_table):
    small_table.modify_selection("a", [2, 1, 1, 2], 0)
    small_table.modify_selection("b", [1, 2], 0)

    assert_array_equal(small_table.selection("a"), small_table.selection("b"))


def test_emptied_slot_is_dropped_after_signal(small_table):
    small_table.modify_selection("s", [1], 0)
    calls = record(small_table.selection_updated)

    small_table.modify_selection("s", [1], -1)

    assert len(calls) == 1
    assert calls[0][0].is_empty
    assert "s" not in small_table.selection_names()


def test_selection_survives_reordering(small_table):
    small_table.modify_selection("s", [2], 0)
    small_table.delete([0])

    assert 2 in small_table.selection("s")
    assert small_table.row_of(2) == 1


def test_delete_keeps_stale_keys_unless_pruned(small_table):
    small_table.modify_selection("s", [0, 1], 0)
    small_table.delete([0])
    assert_array_equal(small_table.selection("s"), [0, 1])

    small_table.delete([1], prune=True)
    assert "s" not in small_table.selection_names()


def test_prune_selections(small_table):
    small_table.modify_selection("s", [0, 1, 2], 0)
    small_table.delete([1])

    small_table.prune_selections()

    assert_array_equal(small_table.selection("s"), [0, 2])
