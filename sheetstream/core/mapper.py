"""
Row mapper - projects one source row onto the declared columns

A source row looks like this (one entry per sheet cell, null for an
empty cell):

    {"c": [{"v": 1.0, "f": "1"}, {"v": "Erlich Bachman"}, null, {"v": null}]}

Column position N reads the cell at c[N - 1].
"""

from typing import Any, Optional, Tuple

from sheetstream.core.types import CellValue, ColumnDescriptor, Schema, coerce_cell
from sheetstream.errors import UnsupportedColumnTypeError


class RowMapper:
    """
    Convert source rows into target rows for a fixed schema

    The schema is validated once on construction and again on every
    projection, so an unsupported column type fails the row no matter
    which cells are present.
    """

    def __init__(self, schema: Schema):
        self.schema = schema

    def validate(self) -> None:
        """
        Check that every declared column type can be produced

        Raises:
            UnsupportedColumnTypeError: For the first column, in schema order,
                whose type the mapper cannot produce
        """
        for column in self.schema:
            if not column.data_type.is_supported():
                raise UnsupportedColumnTypeError(column.name, column.data_type)

    def project(self, source_row: Any) -> Tuple[Any, ...]:
        """
        Project a source row onto the schema

        Args:
            source_row: One element of the fetched table.rows array

        Returns:
            Tuple with one value per declared column, None where absent

        Raises:
            UnsupportedColumnTypeError: If any column type is unsupported
        """
        self.validate()
        return tuple(
            coerce_cell(self.lookup(source_row, column), column.data_type, column.name)
            for column in self.schema
        )

    @staticmethod
    def lookup(source_row: Any, column: ColumnDescriptor) -> Optional[CellValue]:
        """
        Find the cell for a column, or None if the row has no such cell

        A short cell array, a null slot, or a cell object without a "v"
        key all count as no cell.
        """
        if not isinstance(source_row, dict):
            return None

        cells = source_row.get("c")
        if not isinstance(cells, list):
            return None

        index = column.cell_index
        if index >= len(cells):
            return None

        cell = cells[index]
        if not isinstance(cell, dict) or "v" not in cell:
            return None

        return CellValue.from_json(cell["v"])
