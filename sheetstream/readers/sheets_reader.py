"""
Sheets Reader - read a Google Sheets tab as typed rows

Supports:
- Whole documents or a single tab selected by gid
- INTEGER and STRING columns mapped by position
- Static extra request headers
- Early termination with a row limit
"""

from typing import Any, Iterable, Iterator, Optional, Tuple, Union

from sheetstream.config import AdapterConfig, ScanOptions
from sheetstream.core.controller import ScanController
from sheetstream.core.types import Schema
from sheetstream.readers.base import BaseReader
from sheetstream.readers.gviz import Transport


class SheetsReader(BaseReader):
    """
    Read rows from a spreadsheet through the gviz JSON export

    Every read performs one complete scan with a fresh ScanController:
    one fetch, one pass over the rows, and an end() that always runs,
    also when the caller stops early or an error is raised.

    Example:
        reader = SheetsReader("abc123", [("id", "int"), ("name", "text")])
        for row in reader:
            print(row)
    """

    def __init__(
        self,
        spread_sheet_id: str,
        columns: Union[Schema, Iterable[Any]],
        sheet_id: Optional[str] = None,
        config: Optional[AdapterConfig] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize sheets reader

        Args:
            spread_sheet_id: Document identifier from the sheet URL
            columns: Schema, list of ColumnDescriptor, or (name, type) pairs
            sheet_id: Optional tab gid
            config: Adapter configuration (default: AdapterConfig())
            transport: Transport override, mainly for tests

        Raises:
            ConfigurationError: If spread_sheet_id is missing
            ValueError: If the column declarations are invalid
        """
        self.options = ScanOptions.from_options(
            {"spread_sheet_id": spread_sheet_id, "sheet_id": sheet_id}
        )
        self.schema = Schema.coerce(columns)
        self.config = config or AdapterConfig()
        self.transport = transport
        self.limit: Optional[int] = None

    @property
    def url(self) -> str:
        """Request URL for this reader's sheet"""
        return self._new_controller().request_url(self.options)

    def _new_controller(self) -> ScanController:
        return ScanController(self.config, self.transport)

    def supports_limit(self) -> bool:
        return True

    def set_limit(self, limit: Optional[int]) -> None:
        if limit is not None and limit < 0:
            raise ValueError(f"Limit must be non-negative, got {limit}")
        self.limit = limit

    def get_schema(self) -> Schema:
        return self.schema

    def read_rows(self) -> Iterator[Tuple[Any, ...]]:
        """Run one scan and yield target rows as tuples"""
        controller = self._new_controller()
        try:
            controller.begin(self.options)

            rows_yielded = 0
            while self.limit is None or rows_yielded < self.limit:
                row = controller.iterate(self.schema)
                if row is None:
                    break

                yield row
                rows_yielded += 1
        finally:
            controller.end()

    def __repr__(self) -> str:
        return f"SheetsReader({self.options.spread_sheet_id!r}, {self.schema!r})"
