"""
Tests for the scan controller begin / iterate / end protocol
"""

import logging

import pytest
from conftest import PREFIX, FakeTransport, gviz_body

from sheetstream.config import AdapterConfig, ScanOptions
from sheetstream.core.controller import ScanController
from sheetstream.core.types import Schema
from sheetstream.errors import (
    InvalidEnvelopeError,
    MalformedJsonError,
    MissingRowsError,
    TransportError,
    UnsupportedColumnTypeError,
    UnsupportedOperationError,
)


@pytest.fixture
def schema():
    return Schema.from_pairs([("id", "int"), ("name", "text")])


def drain(controller, schema):
    rows = []
    while True:
        row = controller.iterate(schema)
        if row is None:
            return rows
        rows.append(row)


class TestBegin:
    """Test fetching and loading the row buffer"""

    def test_url_without_sheet_id(self, transport):
        controller = ScanController(transport=transport)
        controller.begin(ScanOptions("abc123"))

        url, _ = transport.calls[0]
        assert url == "https://docs.google.com/spreadsheets/d/abc123/gviz/tq?tqx=out:json"

    def test_url_with_sheet_id(self, transport):
        controller = ScanController(transport=transport)
        controller.begin(ScanOptions("abc123", "2"))

        url, _ = transport.calls[0]
        assert url == "https://docs.google.com/spreadsheets/d/abc123/gviz/tq?gid=2&tqx=out:json"

    def test_custom_base_url(self, transport):
        controller = ScanController(AdapterConfig(base_url="http://localhost:9000/d/"), transport)
        controller.begin(ScanOptions("abc"))

        assert transport.calls[0][0] == "http://localhost:9000/d/abc/gviz/tq?tqx=out:json"

    def test_fixed_headers_sent(self, transport):
        controller = ScanController(transport=transport)
        controller.begin(ScanOptions("abc123"))

        _, headers = transport.calls[0]
        assert headers["user-agent"] == "Sheets FDW"
        assert headers["x-datasource-auth"] == "true"

    def test_extra_headers_cannot_override_fixed(self, transport):
        config = AdapterConfig(headers={"Authorization": "Bearer t", "User-Agent": "other"})
        controller = ScanController(config, transport)
        controller.begin(ScanOptions("abc123"))

        _, headers = transport.calls[0]
        assert headers["Authorization"] == "Bearer t"
        assert "User-Agent" not in headers
        assert headers["user-agent"] == "Sheets FDW"

    def test_loads_rows_and_rewinds(self, transport, sample_rows):
        controller = ScanController(transport=transport)
        controller.begin(ScanOptions("abc123"))

        assert controller.state.rows == sample_rows
        assert controller.state.cursor == 0
        assert controller.state.active

    def test_reports_row_count(self, transport, caplog):
        controller = ScanController(transport=transport)
        with caplog.at_level(logging.INFO, logger="sheetstream"):
            controller.begin(ScanOptions("abc123"))

        assert "Fetched 4 rows" in caplog.text

    def test_transport_error_propagates(self):
        transport = FakeTransport(error=TransportError("http://x", "connection refused"))
        controller = ScanController(transport=transport)

        with pytest.raises(TransportError):
            controller.begin(ScanOptions("abc123"))
        assert not controller.state.active

    def test_missing_prefix(self):
        controller = ScanController(transport=FakeTransport('{"table": {"rows": []}}'))

        with pytest.raises(InvalidEnvelopeError):
            controller.begin(ScanOptions("abc123"))

    def test_missing_prefix_checked_before_json(self):
        controller = ScanController(transport=FakeTransport("<html>not json</html>"))

        with pytest.raises(InvalidEnvelopeError):
            controller.begin(ScanOptions("abc123"))

    def test_malformed_json(self):
        controller = ScanController(transport=FakeTransport(PREFIX + "{not json"))

        with pytest.raises(MalformedJsonError) as exc_info:
            controller.begin(ScanOptions("abc123"))
        assert exc_info.value.detail

    @pytest.mark.parametrize(
        "payload",
        ['{"status": "error"}', '{"table": {}}', '{"table": {"rows": {}}}', "[]"],
    )
    def test_missing_rows(self, payload):
        controller = ScanController(transport=FakeTransport(PREFIX + payload))

        with pytest.raises(MissingRowsError):
            controller.begin(ScanOptions("abc123"))

    def test_begin_during_active_scan(self, transport):
        controller = ScanController(transport=transport)
        controller.begin(ScanOptions("abc123"))

        with pytest.raises(UnsupportedOperationError):
            controller.begin(ScanOptions("abc123"))
        assert len(transport.calls) == 1


class TestIterate:
    """Test cursor movement and projection"""

    def test_example_document(self, schema):
        body = ')]}\'\n{"table":{"rows":[{"c":[{"v":1.0},{"v":"Alice"}]}]}}'
        controller = ScanController(transport=FakeTransport(body))
        controller.begin(ScanOptions("abc123"))

        assert controller.iterate(schema) == (1, "Alice")
        assert controller.iterate(schema) is None

    def test_every_row_exactly_once(self, transport, schema):
        controller = ScanController(transport=transport)
        controller.begin(ScanOptions("abc123"))

        rows = drain(controller, schema)

        assert rows == [(1, "Alice"), (2, "Bob"), (3, None), (None, "Dana")]
        assert controller.iterate(schema) is None
        assert controller.iterate(schema) is None

    def test_empty_sheet(self, schema):
        controller = ScanController(transport=FakeTransport(gviz_body([])))
        controller.begin(ScanOptions("abc123"))

        assert controller.iterate(schema) is None

    def test_iterate_before_begin(self, schema):
        assert ScanController(transport=FakeTransport()).iterate(schema) is None

    def test_null_row_is_returned(self, schema):
        controller = ScanController(transport=FakeTransport(gviz_body([None])))
        controller.begin(ScanOptions("abc123"))

        assert controller.iterate(schema) == (None, None)
        assert controller.iterate(schema) is None

    def test_unsupported_type_does_not_advance(self, transport):
        controller = ScanController(transport=transport)
        controller.begin(ScanOptions("abc123"))

        with pytest.raises(UnsupportedColumnTypeError):
            controller.iterate(Schema.from_pairs([("id", "int"), ("score", "float")]))

        assert controller.state.cursor == 0


class TestEndAndRescan:
    """Test cleanup and unsupported operations"""

    def test_end_clears_state(self, transport, schema):
        controller = ScanController(transport=transport)
        controller.begin(ScanOptions("abc123"))
        controller.iterate(schema)

        controller.end()

        assert controller.state.rows == []
        assert controller.state.cursor == 0
        assert not controller.state.active

    def test_end_without_begin_and_repeated(self):
        controller = ScanController(transport=FakeTransport())
        controller.end()
        controller.end()
        assert controller.state.exhausted

    def test_end_after_failed_begin(self):
        controller = ScanController(transport=FakeTransport("garbage"))
        with pytest.raises(InvalidEnvelopeError):
            controller.begin(ScanOptions("abc123"))
        controller.end()

    def test_end_then_begin_refetches(self, schema):
        transport = FakeTransport(gviz_body([{"c": [{"v": 1.0}, {"v": "a"}]}]))
        controller = ScanController(transport=transport)

        controller.begin(ScanOptions("abc123"))
        assert drain(controller, schema) == [(1, "a")]
        controller.end()

        transport.body = gviz_body([{"c": [{"v": 2.0}, {"v": "b"}]}, {"c": [{"v": 3.0}, {"v": "c"}]}])
        controller.begin(ScanOptions("abc123"))

        assert controller.state.cursor == 0
        assert drain(controller, schema) == [(2, "b"), (3, "c")]
        assert len(transport.calls) == 2

    def test_rescan_is_unsupported_and_leaves_state(self, transport, schema):
        controller = ScanController(transport=transport)
        controller.begin(ScanOptions("abc123"))
        controller.iterate(schema)

        with pytest.raises(UnsupportedOperationError) as exc_info:
            controller.rescan()

        assert exc_info.value.operation == "rescan"
        assert controller.state.cursor == 1
        assert len(controller.state.rows) == 4

    def test_rescan_before_begin(self):
        with pytest.raises(UnsupportedOperationError):
            ScanController(transport=FakeTransport()).rescan()

    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.begin_modify(),
            lambda c: c.insert((1, "a")),
            lambda c: c.update(1, (1, "a")),
            lambda c: c.delete(1),
            lambda c: c.end_modify(),
        ],
    )
    def test_write_operations_rejected(self, call):
        with pytest.raises(UnsupportedOperationError, match="not supported"):
            call(ScanController(transport=FakeTransport()))
