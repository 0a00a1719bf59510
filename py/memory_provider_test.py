# memory_provider_test.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import logging

import pytest
import shapely
from shapely.geometry import LineString, Point, Polygon, box

from envelope import Envelope
from feature_data import FeatureDataSet, FeatureDataTable
from memory_provider import MemoryProvider
from provider_errors import FeatureNotFoundError

# 三角形的外包矩形与 LINE 相交，但几何本身不相交
TRIANGLE = Polygon([(0, 0), (4, 0), (0, 4)])


def make_table():
    table = FeatureDataTable("parcels")
    table.add_column("name", str)
    table.add_row(table.new_row({"name": "square"}, box(0, 0, 2, 2), oid=10))
    table.add_row(
        table.new_row({"name": "line"}, LineString([(3, 3), (5, 5)]), oid=20))
    table.add_row(table.new_row({"name": "point"}, Point(10, 10), oid=30))
    return table


@pytest.fixture
def provider():
    return MemoryProvider(make_table(), srid=4326)


def names(table):
    return [row["name"] for row in table]


def test_object_ids_use_extents(provider):
    assert provider.get_object_ids_in_view((0, 0, 4, 4)) == [10, 20]
    assert provider.get_object_ids_in_view((20, 20, 30, 30)) == []
    assert provider.get_object_ids_in_view(Envelope.empty()) == []


def test_geometries_in_view_are_stamped(provider):
    geoms = provider.get_geometries_in_view((9, 9, 11, 11))
    assert [g.wkt for g in geoms] == ["POINT (10 10)"]
    assert shapely.get_srid(geoms[0]) == 4326

    provider.srid = 3857
    geoms = provider.get_geometries_in_view((9, 9, 11, 11))
    assert shapely.get_srid(geoms[0]) == 3857


def test_edges_touching_bbox_are_included(provider):
    assert provider.get_object_ids_in_view((2, 2, 2.5, 2.5)) == [10]


def test_geometry_by_id(provider):
    assert provider.get_geometry_by_id(30).wkt == "POINT (10 10)"
    with pytest.raises(FeatureNotFoundError):
        provider.get_geometry_by_id(31)


def test_feature_by_id(provider):
    row = provider.get_feature(20)
    assert row.oid == 20
    assert row["name"] == "line"
    assert shapely.get_srid(row.geometry) == 4326
    with pytest.raises(FeatureNotFoundError):
        provider.get_feature(99)


def test_returned_feature_is_a_copy(provider):
    row = provider.get_feature(10)
    row["name"] = "changed"
    assert provider.get_feature(10)["name"] == "square"


def test_count_and_extents(provider):
    assert provider.get_feature_count() == 3
    assert provider.get_extents() == Envelope(0, 0, 10, 10)


def test_empty_provider():
    provider = MemoryProvider([])
    assert provider.get_feature_count() == 0
    assert provider.get_extents().is_null
    assert provider.get_object_ids_in_view((0, 0, 1, 1)) == []


def test_geometry_list_uses_positions():
    provider = MemoryProvider([Point(0, 0), Point(1, 1), None])
    assert provider.get_feature_count() == 3
    assert provider.get_object_ids_in_view((0.5, 0.5, 2, 2)) == [1]
    assert provider.get_geometry_by_id(2) is None


def test_duplicate_ids_rejected():
    table = FeatureDataTable()
    table.add_row(table.new_row(geometry=Point(0, 0), oid=1))
    table.add_row(table.new_row(geometry=Point(1, 1), oid=1))
    with pytest.raises(ValueError):
        MemoryProvider(table)


def test_intersection_query_checks_geometry(provider):
    ds = FeatureDataSet()
    provider.execute_intersection_query(TRIANGLE, ds)
    assert names(ds[0]) == ["square"]
    assert ds[0].name == "parcels"
    assert ds[0].column_names == ["name"]


def test_envelope_query_skips_geometry_test(provider):
    ds = FeatureDataSet()
    provider.execute_intersection_query(Envelope.coerce(TRIANGLE), ds)
    assert names(ds[0]) == ["square", "line"]
    assert [row.oid for row in ds[0]] == [10, 20]


def test_from_provider_copies_everything(provider):
    copy = MemoryProvider.from_provider(provider)
    assert copy.srid == 4326
    assert copy.get_feature_count() == 3
    assert copy.get_feature(30)["name"] == "point"
    assert copy.get_extents() == provider.get_extents()


def test_from_provider_skips_features_without_geometry(caplog):
    source = MemoryProvider([Point(0, 0), None, Point(1, 1)])

    with caplog.at_level(logging.WARNING, logger="memory_provider"):
        copy = MemoryProvider.from_provider(source)

    assert copy.get_feature_count() == 2
    assert source.get_feature_count() == 3
    assert sorted(copy.get_object_ids_in_view((0, 0, 1, 1))) == [0, 2]
    assert "不一致" in caplog.text


def test_from_provider_without_geometries(caplog):
    source = MemoryProvider([None, None])

    with caplog.at_level(logging.WARNING, logger="memory_provider"):
        copy = MemoryProvider.from_provider(source)

    assert copy.get_feature_count() == 0
    assert "不一致" in caplog.text


def test_from_provider_complete_copy_does_not_warn(provider, caplog):
    with caplog.at_level(logging.WARNING, logger="memory_provider"):
        MemoryProvider.from_provider(provider)
    assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []
