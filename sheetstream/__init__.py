"""
sheetstream - typed row scans over Google Sheets

This package fetches a spreadsheet through its gviz JSON export and
yields rows matching a declared column schema.
"""

__version__ = "0.1.0"

from typing import Any, Iterable, Optional, Union

from sheetstream.config import AdapterConfig, ScanOptions, load_config
from sheetstream.core.types import ColumnDescriptor, DataType, Schema
from sheetstream.readers.sheets_reader import SheetsReader


def read_sheet(
    spread_sheet_id: str,
    columns: Union[Schema, Iterable[Any]],
    sheet_id: Optional[str] = None,
    config: Optional[AdapterConfig] = None,
) -> SheetsReader:
    """
    Create a reader for a spreadsheet

    Example:
        >>> from sheetstream import read_sheet
        >>> for row in read_sheet("abc123", [("id", "int"), ("name", "text")]):
        ...     print(row)
    """
    return SheetsReader(spread_sheet_id, columns, sheet_id=sheet_id, config=config)


__all__ = [
    "__version__",
    "AdapterConfig",
    "ColumnDescriptor",
    "DataType",
    "ScanOptions",
    "Schema",
    "SheetsReader",
    "load_config",
    "read_sheet",
]
