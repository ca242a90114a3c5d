"""Type system for sheetstream.

This module defines the column types a host can declare, the tagged
representation of a sheet cell, and the coercion from one to the other.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Optional, Sequence, Union

from sheetstream.errors import UnsupportedColumnTypeError

# Target columns are 64-bit integers
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class DataType(Enum):
    """Column types a host may declare."""

    # Projectable types
    INTEGER = "INTEGER"
    STRING = "STRING"

    # Declarable, but rejected by the row mapper
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    DATETIME = "DATETIME"
    JSON = "JSON"

    def __str__(self) -> str:
        return self.value

    def is_supported(self) -> bool:
        """Check if cells can be projected onto this type."""
        return self in (DataType.INTEGER, DataType.STRING)

    @classmethod
    def parse(cls, name: str) -> "DataType":
        """Resolve a type name or SQL-style alias to a DataType.

        Examples:
            >>> DataType.parse("bigint")
            DataType.INTEGER
            >>> DataType.parse("text")
            DataType.STRING

        Raises:
            ValueError: If the name is not a known type
        """
        key = name.strip().lower()
        if key in _TYPE_ALIASES:
            return _TYPE_ALIASES[key]

        available = ", ".join(sorted(_TYPE_ALIASES))
        raise ValueError(f"Unknown column type: '{name}'. Available types: {available}")


_TYPE_ALIASES = {
    "integer": DataType.INTEGER,
    "int": DataType.INTEGER,
    "int8": DataType.INTEGER,
    "bigint": DataType.INTEGER,
    "i64": DataType.INTEGER,
    "string": DataType.STRING,
    "str": DataType.STRING,
    "text": DataType.STRING,
    "varchar": DataType.STRING,
    "float": DataType.FLOAT,
    "double": DataType.FLOAT,
    "numeric": DataType.FLOAT,
    "boolean": DataType.BOOLEAN,
    "bool": DataType.BOOLEAN,
    "date": DataType.DATE,
    "datetime": DataType.DATETIME,
    "timestamp": DataType.DATETIME,
    "json": DataType.JSON,
    "jsonb": DataType.JSON,
}


class CellKind(Enum):
    """Tag of a source cell value."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass(frozen=True)
class CellValue:
    """A loosely-typed sheet cell value, tagged with its kind.

    Build instances with from_json(), which maps every decoded JSON value
    onto exactly one kind. Arrays and objects are not scalars and map to NULL.
    """

    kind: CellKind
    value: Any = None

    @classmethod
    def from_json(cls, raw: Any) -> "CellValue":
        # bool is a subclass of int, so it must be checked first
        if isinstance(raw, bool):
            return cls(CellKind.BOOLEAN, raw)
        if isinstance(raw, (int, float)):
            return cls(CellKind.NUMBER, raw)
        if isinstance(raw, str):
            return cls(CellKind.STRING, raw)
        return NULL_CELL

    @property
    def is_null(self) -> bool:
        return self.kind is CellKind.NULL


NULL_CELL = CellValue(CellKind.NULL)


def _truncate_to_int64(number: Union[int, float]) -> Optional[int]:
    """Truncate toward zero, saturating at the 64-bit bounds."""
    if isinstance(number, float) and not math.isfinite(number):
        return None
    truncated = int(number)
    return max(INT64_MIN, min(INT64_MAX, truncated))


def coerce_cell(cell: Optional[CellValue], data_type: DataType, column_name: str = "") -> Any:
    """Coerce a cell to a column type.

    Total over (kind, type): every combination either returns a typed value,
    returns None (absent), or raises for an unsupported column type.

    - INTEGER: numbers truncate toward zero; any other kind is absent
    - STRING: strings are copied verbatim; any other kind is absent
    - other types: UnsupportedColumnTypeError

    Mismatched kinds are absent rather than errors so that one odd cell
    does not abort the whole scan.

    Args:
        cell: Source cell, or None when the row has no cell at that position
        data_type: Declared column type
        column_name: Used in the error message

    Returns:
        int, str, or None
    """
    if not data_type.is_supported():
        raise UnsupportedColumnTypeError(column_name, data_type)

    if cell is None or cell.is_null:
        return None

    if data_type is DataType.INTEGER:
        if cell.kind is CellKind.NUMBER:
            return _truncate_to_int64(cell.value)
        return None

    # DataType.STRING
    if cell.kind is CellKind.STRING:
        return cell.value
    return None


@dataclass(frozen=True)
class ColumnDescriptor:
    """A declared target column.

    The position is 1-based and refers to the cell at index position - 1
    of the source row. This offset is part of the remote format contract.
    """

    position: int
    name: str
    data_type: DataType

    def __post_init__(self):
        if isinstance(self.position, bool) or not isinstance(self.position, int):
            raise ValueError(f"Column position must be an integer, got {self.position!r}")
        if self.position < 1:
            raise ValueError(f"Column position must be >= 1, got {self.position} for '{self.name}'")
        if not self.name:
            raise ValueError("Column name must not be empty")
        if not isinstance(self.data_type, DataType):
            object.__setattr__(self, "data_type", DataType.parse(str(self.data_type)))

    @property
    def cell_index(self) -> int:
        """0-based index of the source cell for this column."""
        return self.position - 1

    def __str__(self) -> str:
        return f"{self.position}:{self.name}:{self.data_type}"


class Schema:
    """Ordered column descriptors declared for one scan.

    Positions must be unique and contiguous from 1. Iteration follows the
    order the columns were supplied in, which is also the order of values
    in each target row.
    """

    def __init__(self, columns: Iterable[ColumnDescriptor]):
        self.columns = list(columns)
        self._validate()

    def _validate(self) -> None:
        positions = sorted(col.position for col in self.columns)
        if positions != list(range(1, len(positions) + 1)):
            raise ValueError(
                f"Column positions must be unique and contiguous from 1, got {positions}"
            )

        names = [col.name for col in self.columns]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate column names: {', '.join(duplicates)}")

    def __iter__(self) -> Iterator[ColumnDescriptor]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    def __contains__(self, name: str) -> bool:
        return any(col.name == name for col in self.columns)

    def __getitem__(self, name: str) -> ColumnDescriptor:
        for col in self.columns:
            if col.name == name:
                return col
        raise KeyError(name)

    def __repr__(self) -> str:
        cols = ", ".join(f"{col.name}: {col.data_type}" for col in self.columns)
        return f"Schema({cols})"

    def get_column_names(self) -> list[str]:
        """Get list of column names in row order."""
        return [col.name for col in self.columns]

    def to_dict(self) -> dict[str, str]:
        """Convert schema to a name -> type dictionary."""
        return {col.name: col.data_type.value for col in self.columns}

    @staticmethod
    def from_pairs(pairs: Sequence[tuple[str, Union[str, DataType]]]) -> "Schema":
        """Build a schema from (name, type) pairs, numbering positions 1..n.

        Examples:
            >>> Schema.from_pairs([("id", "int"), ("name", "text")])
            Schema(id: INTEGER, name: STRING)
        """
        columns = []
        for position, (name, data_type) in enumerate(pairs, start=1):
            if not isinstance(data_type, DataType):
                data_type = DataType.parse(data_type)
            columns.append(ColumnDescriptor(position, name, data_type))
        return Schema(columns)

    @staticmethod
    def from_specs(specs: Sequence[str]) -> "Schema":
        """Build a schema from "name:type" strings, as given on the command line.

        A spec without a type defaults to STRING.
        """
        pairs = []
        for spec in specs:
            name, sep, type_name = spec.partition(":")
            name = name.strip()
            if not name:
                raise ValueError(f"Invalid column spec: '{spec}'")
            pairs.append((name, type_name if sep else "string"))
        return Schema.from_pairs(pairs)

    @staticmethod
    def coerce(columns: Union["Schema", Iterable[Any]]) -> "Schema":
        """Accept a Schema, a list of ColumnDescriptor, or (name, type) pairs."""
        if isinstance(columns, Schema):
            return columns

        columns = list(columns)
        if all(isinstance(col, ColumnDescriptor) for col in columns):
            return Schema(columns)
        return Schema.from_pairs(columns)
