# tests/test_probe.py

import numpy as np
from numpy.testing import assert_array_equal

from scatterspace.controller.probe import nearest_row, probe, probe_text


POSITIONS = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])


def test_hit_within_cutoff():
    result = probe(POSITIONS, [7, 8], (0.1, 0.0, 0.0))
    assert result.key == 7
    assert_array_equal(result.place, [0, 0, 0])
    assert result.text == "Key: 7"


def test_miss_outside_cutoff():
    assert probe(POSITIONS, [7, 8], (0.2, 0.0, 0.0)) is None


def test_cutoff_is_strict():
    assert nearest_row(POSITIONS, (0.5, 0.0, 0.0), cutoff=0.5) is None
    assert nearest_row(POSITIONS, (0.5, 0.0, 0.0), cutoff=0.51) == 0


def test_annotation_text():
    result = probe(POSITIONS, [7, 8], (1.0, 1.0, 1.05), annotations=["first", "second"])
    assert result.key == 8
    assert result.text == "Key: 8: second"


def test_empty_annotation_falls_back_to_key():
    assert probe_text(3, "") == "Key: 3"
    assert probe_text(3, None) == "Key: 3"


def test_short_annotation_list():
    result = probe(POSITIONS, [7, 8], (1.0, 1.0, 1.0), annotations=["only one"])
    assert result.text == "Key: 8"


def test_tie_goes_to_first_row():
    positions = np.array([[0.05, 0.0, 0.0], [-0.05, 0.0, 0.0]])
    assert nearest_row(positions, (0.0, 0.0, 0.0)) == 0


def test_no_positions():
    assert probe(np.zeros((0, 3)), [], (0, 0, 0)) is None
