# feature_data_test.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import pytest
from shapely.geometry import Point

from feature_data import (ColumnMapping, FeatureDataColumn, FeatureDataSet,
                          FeatureDataTable)


def make_table():
    table = FeatureDataTable("roads")
    table.add_column("id", int)
    table.add_column("name", str)
    return table


def test_row_values_follow_column_order():
    table = make_table()
    row = table.add_row(table.new_row({"name": "a", "id": 1}, Point(0, 0), oid=7))
    assert row.item_array == [1, "a"]
    assert row.oid == 7
    assert len(table) == 1


def test_unknown_column_is_rejected():
    table = make_table()
    with pytest.raises(KeyError):
        table.new_row({"missing": 1})
    row = table.new_row()
    with pytest.raises(KeyError):
        row["missing"]


def test_duplicate_column_rejected():
    table = make_table()
    with pytest.raises(ValueError):
        table.add_column("id", int)


def test_row_from_other_table_rejected():
    table = make_table()
    other = make_table()
    with pytest.raises(ValueError):
        table.add_row(other.new_row())


def test_unique_constraint_enforced():
    table = make_table()
    table.add_unique_constraint(["id"], primary_key=True)
    table.add_row(table.new_row({"id": 1}))
    with pytest.raises(ValueError):
        table.add_row(table.new_row({"id": 1}))


def test_import_row_keeps_matching_columns():
    source = make_table()
    row = source.add_row(source.new_row({"id": 1, "name": "a"}, Point(1, 1), 3))
    target = FeatureDataTable("ids", [FeatureDataColumn("id", int)])
    copied = target.import_row(row)
    assert copied.values == {"id": 1}
    assert copied.oid == 3
    assert copied.table is target


def test_column_defaults():
    column = FeatureDataColumn("total", float, expression="a + b")
    assert column.mapping is ColumnMapping.ELEMENT
    assert column.allow_null
    assert not column.auto_increment


def test_data_set_lookup():
    ds = FeatureDataSet()
    table = ds.add_table(make_table())
    assert ds[0] is table
    assert ds["roads"] is table
    assert len(ds) == 1
    with pytest.raises(KeyError):
        ds["rivers"]
