"""Tests for the row mapper."""

import pytest

from sheetstream.core.mapper import RowMapper
from sheetstream.core.types import ColumnDescriptor, DataType, Schema
from sheetstream.errors import UnsupportedColumnTypeError


@pytest.fixture
def schema():
    return Schema.from_pairs([("id", "int"), ("name", "text")])


class TestProject:
    """Test projecting source rows onto a schema"""

    def test_basic_row(self, schema):
        row = {"c": [{"v": 1.0, "f": "1"}, {"v": "Alice"}]}
        assert RowMapper(schema).project(row) == (1, "Alice")

    def test_short_row_gives_absent_cells(self, schema):
        assert RowMapper(schema).project({"c": [{"v": 5.0}]}) == (5, None)

    def test_null_slot_and_null_value(self, schema):
        assert RowMapper(schema).project({"c": [None, {"v": None}]}) == (None, None)

    def test_cell_without_v(self, schema):
        assert RowMapper(schema).project({"c": [{"f": "1"}, {"v": "x"}]}) == (None, "x")

    def test_row_without_cells(self, schema):
        assert RowMapper(schema).project({}) == (None, None)
        assert RowMapper(schema).project(None) == (None, None)

    def test_mismatched_kinds_are_absent(self, schema):
        row = {"c": [{"v": "not a number"}, {"v": 12.0}]}
        assert RowMapper(schema).project(row) == (None, None)

    def test_extra_cells_are_ignored(self, schema):
        row = {"c": [{"v": 1.0}, {"v": "a"}, {"v": "b"}, {"v": 9.0}]}
        assert RowMapper(schema).project(row) == (1, "a")

    def test_position_selects_cell(self):
        # Third sheet column declared first
        schema = Schema(
            [
                ColumnDescriptor(3, "city", DataType.STRING),
                ColumnDescriptor(1, "id", DataType.INTEGER),
                ColumnDescriptor(2, "name", DataType.STRING),
            ]
        )
        row = {"c": [{"v": 7.0}, {"v": "Bob"}, {"v": "LA"}]}
        assert RowMapper(schema).project(row) == ("LA", 7, "Bob")

    def test_negative_fraction_truncates(self, schema):
        assert RowMapper(schema).project({"c": [{"v": -3.9}]}) == (-3, None)


class TestUnsupportedColumns:
    """Test that unsupported column types fail the whole row"""

    def test_fails_even_if_other_columns_succeed(self):
        schema = Schema.from_pairs([("id", "int"), ("price", "float")])
        row = {"c": [{"v": 1.0}, {"v": 2.5}]}

        with pytest.raises(UnsupportedColumnTypeError) as exc_info:
            RowMapper(schema).project(row)

        assert exc_info.value.column_name == "price"

    def test_fails_when_cell_is_missing(self):
        schema = Schema.from_pairs([("id", "int"), ("flag", "bool")])

        with pytest.raises(UnsupportedColumnTypeError):
            RowMapper(schema).project({"c": [{"v": 1.0}]})

    def test_validate_reports_first_in_schema_order(self):
        schema = Schema.from_pairs([("a", "date"), ("b", "json")])

        with pytest.raises(UnsupportedColumnTypeError) as exc_info:
            RowMapper(schema).validate()

        assert exc_info.value.column_name == "a"
