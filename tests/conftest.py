# tests/conftest.py

import itertools

import numpy as np
import pytest

from scatterspace.controller.host import PlotHost
from scatterspace.model.columns import Column
from scatterspace.model.table import Table


class RecordingSink:
    """Render sink that only remembers what it was given."""
    def __init__(self):
        self._handles = itertools.count(1)
        self.names = {}
        self.instances = {}
        self.tables = {}
        self.table_rows = {}
        self.update_count = 0

    def create_object(self, name):
        handle = next(self._handles)
        self.names[handle] = name
        self.instances[handle] = np.zeros((0, 4, 4))
        return handle

    def update_instances(self, handle, instances):
        self.instances[handle] = np.array(instances)
        self.update_count += 1

    def publish_table(self, name, columns):
        handle = next(self._handles)
        self.names[handle] = name
        self.tables[handle] = [c.name for c in columns]
        return handle

    def update_table(self, handle, columns):
        self.tables[handle] = [c.name for c in columns]
        self.table_rows[handle] = max((len(c) for c in columns), default=0)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def host(sink):
    return PlotHost(sink=sink)


@pytest.fixture
def small_table():
    return Table("small", [
        Column.from_values("x", [1.0, 2.0, 3.0]),
        Column.from_values("name", ["a", "b", "c"]),
    ])


def record(signal):
    """Collect every emission of a Qt signal into a list."""
    calls = []
    signal.connect(lambda *args: calls.append(args))
    return calls


def assert_key_row_consistent(table):
    for row in range(table.num_rows):
        assert table.row_of(table.key_of(row)) == row
