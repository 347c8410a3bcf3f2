# tests/test_render.py

import numpy as np
import pyvista as pv
import pytest
from numpy.testing import assert_array_equal

from scatterspace.controller.host import PlotHost
from scatterspace.controller.instances import ScatterArrays, build_instances
from scatterspace.model.columns import Column
from scatterspace.model.domain import Domain
from scatterspace.view.render import PyVistaSink


@pytest.fixture
def pv_sink():
    return PyVistaSink()


def two_instances():
    arrays = ScatterArrays(px=[0, 1], py=[0, 1], pz=[0, 1], cr=[1, 0], cg=[0, 1], cb=[0, 0], sx=[0.1], sy=[0.2], sz=[0.3])
    return build_instances(arrays, Domain((0, 0, 0), (1, 1, 1), (0, 0, 0), (1, 1, 1)))


def test_update_instances(pv_sink):
    handle = pv_sink.create_object("dots")
    pv_sink.update_instances(handle, two_instances())

    poly = pv_sink.objects[handle]
    assert poly.n_points == 2
    assert_array_equal(poly.point_data["color"], [[1, 0, 0], [0, 1, 0]])
    assert_array_equal(poly.points[1], [1, 1, 1])
    assert pv_sink.names[handle] == "dots"


def test_empty_instances_clear_object(pv_sink):
    handle = pv_sink.create_object("dots")
    pv_sink.update_instances(handle, two_instances())
    pv_sink.update_instances(handle, np.zeros((0, 4, 4)))

    assert pv_sink.objects[handle].n_points == 0
    assert pv_sink.glyphs(handle).n_points == 0


def test_glyphs(pv_sink):
    handle = pv_sink.create_object("dots")
    pv_sink.update_instances(handle, two_instances())

    glyphs = pv_sink.glyphs(handle)
    assert isinstance(glyphs, pv.PolyData)
    assert glyphs.n_points > 0


def test_publish_table_keeps_numeric_columns(pv_sink):
    handle = pv_sink.publish_table("t", [
        Column.from_values("x", [1.0, 2.0]),
        Column.from_values("name", ["a", "b"]),
    ])

    table = pv_sink.tables[handle]
    assert table.n_rows == 2
    assert "x" in table.row_arrays.keys()
    assert "name" not in table.row_arrays.keys()


def test_handles_are_unique(pv_sink):
    handles = {pv_sink.create_object("a"), pv_sink.create_object("b"), pv_sink.publish_table("t", [])}
    assert len(handles) == 3


def test_host_defaults_to_pyvista():
    host = PlotHost()
    plot = host.get_plot(host.new_point_plot([0, 1], [0, 1], [0, 1]))

    assert isinstance(host.sink, PyVistaSink)
    assert host.sink.objects[plot.object_handle].n_points == 2


def test_update_table_replaces_snapshot(pv_sink):
    columns = [Column.from_values("x", [1.0, 2.0])]
    handle = pv_sink.publish_table("t", columns)

    columns[0].extend([3.0])
    pv_sink.update_table(handle, columns)

    assert pv_sink.tables[handle].n_rows == 3


def test_host_table_follows_edits():
    host = PlotHost()
    plot = host.get_plot(host.new_point_plot([0, 1], [0, 1], [0, 1]))

    plot.table.insert([[2, 2, 2]])

    assert host.sink.tables[plot.table_handle].n_rows == 3
