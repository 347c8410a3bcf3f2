# tests/test_selection.py

from numpy.testing import assert_array_equal

from scatterspace.model.selection import SelectAction, Selection, apply_action, canonical_keys


def test_action_from_int():
    assert SelectAction.from_int(0) == SelectAction.REPLACE
    assert SelectAction.from_int(7) == SelectAction.UNION
    assert SelectAction.from_int(-3) == SelectAction.SUBTRACT


def test_canonical_keys():
    assert_array_equal(canonical_keys([5, 1, 5, 3]), [1, 3, 5])
    assert canonical_keys([]).size == 0


def test_selection_contains():
    sel = Selection("s", [4, 2])
    assert 2 in sel
    assert 4 in sel
    assert 3 not in sel
    assert 9 not in sel


def test_replace_on_new_slot():
    result = apply_action(None, "s", [3, 1], SelectAction.REPLACE)
    assert result.name == "s"
    assert_array_equal(result.keys, [1, 3])


def test_union_on_new_slot_behaves_like_replace():
    result = apply_action(None, "s", [2], SelectAction.UNION)
    assert_array_equal(result.keys, [2])


def test_subtract_on_new_slot_returns_none():
    assert apply_action(None, "s", [2], SelectAction.SUBTRACT) is None


def test_union_and_subtract():
    current = Selection("s", [1, 2])

    union = apply_action(current, "s", [2, 3], 5)
    assert_array_equal(union.keys, [1, 2, 3])

    subtract = apply_action(union, "s", [1, 7], -1)
    assert_array_equal(subtract.keys, [2, 3])


def test_does_not_mutate_current():
    current = Selection("s", [1, 2])
    apply_action(current, "s", [3], SelectAction.UNION)
    assert_array_equal(current.keys, [1, 2])
