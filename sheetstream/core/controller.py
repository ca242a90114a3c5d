"""
Scan controller - drives one forward-only pass over a remote sheet

The host calls begin(), then iterate() until it returns None, then end().
Each controller owns its own AdapterState, so separate scan sessions
never share a buffer.

Example:
    controller = ScanController(config)
    controller.begin(ScanOptions("abc123"))
    try:
        while (row := controller.iterate(schema)) is not None:
            print(row)
    finally:
        controller.end()
"""

import logging
from typing import Any, Optional, Tuple

from sheetstream.config import AdapterConfig, ScanOptions
from sheetstream.core.mapper import RowMapper
from sheetstream.core.state import AdapterState
from sheetstream.core.types import Schema
from sheetstream.errors import UnsupportedOperationError
from sheetstream.readers.gviz import (
    HttpTransport,
    Transport,
    build_headers,
    build_query_url,
    decode_response,
)

logger = logging.getLogger(__name__)


class ScanController:
    """
    Orchestrates begin / iterate / end for a single scan session

    Not thread-safe and not re-entrant: calls must come from one caller,
    in protocol order.
    """

    def __init__(
        self,
        config: Optional[AdapterConfig] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize scan controller

        Args:
            config: Adapter configuration (default: AdapterConfig())
            transport: Object with get(url, headers) -> str
                (default: HttpTransport using the configured timeout)
        """
        self.config = config or AdapterConfig()
        self.transport = transport or HttpTransport(timeout=self.config.timeout)
        self.state = AdapterState()
        self.state.configure(self.config.base_url)
        self._mapper: Optional[RowMapper] = None

    def request_url(self, options: ScanOptions) -> str:
        """URL that begin() fetches for these options"""
        return build_query_url(self.state.base_url, options.spread_sheet_id, options.sheet_id)

    def begin(self, options: ScanOptions) -> None:
        """
        Fetch the sheet and load its rows into the buffer

        Args:
            options: Per-scan parameters

        Raises:
            UnsupportedOperationError: If a scan is already in progress
            TransportError: If the request fails
            InvalidEnvelopeError: If the body lacks the guard prefix
            MalformedJsonError: If the body is not valid JSON
            MissingRowsError: If the document has no table.rows array
        """
        if self.state.active:
            raise UnsupportedOperationError(
                "begin", "begin while another scan is in progress is not supported"
            )

        url = self.request_url(options)
        logger.debug("Fetching %s", url)

        body = self.transport.get(url, build_headers(self.config.headers))
        rows = decode_response(body)

        self.state.load(rows)
        logger.info("Fetched %d rows from spreadsheet %s", len(rows), options.spread_sheet_id)

    def iterate(self, schema: Schema) -> Optional[Tuple[Any, ...]]:
        """
        Project the row under the cursor and advance

        The cursor moves only after the projection succeeds, so a failed
        projection neither skips nor repeats a row.

        Args:
            schema: Declared target columns

        Returns:
            Target row tuple, or None once every row has been returned

        Raises:
            UnsupportedColumnTypeError: If the schema declares a type the
                mapper cannot produce
        """
        if self.state.exhausted:
            return None
        source_row = self.state.current()

        if self._mapper is None or self._mapper.schema is not schema:
            self._mapper = RowMapper(schema)

        row = self._mapper.project(source_row)
        self.state.advance()
        return row

    def rescan(self) -> None:
        """Always fails; buffer and cursor are left as they are"""
        raise UnsupportedOperationError("rescan", "rescan on spreadsheet source is not supported")

    def end(self) -> None:
        """Release the buffer. Safe to call at any time, any number of times."""
        if self.state.active:
            logger.debug("Ending scan after %d of %d rows", self.state.cursor, len(self.state.rows))
        self.state.reset_buffer()
        self._mapper = None

    # The source is read-only: every write operation is rejected.

    def begin_modify(self) -> None:
        raise UnsupportedOperationError("modify")

    def insert(self, row: Any) -> None:
        raise UnsupportedOperationError("insert")

    def update(self, rowid: Any, row: Any) -> None:
        raise UnsupportedOperationError("update")

    def delete(self, rowid: Any) -> None:
        raise UnsupportedOperationError("delete")

    def end_modify(self) -> None:
        raise UnsupportedOperationError("modify")

    def __repr__(self) -> str:
        return f"ScanController({self.state!r})"
