"""
Google Visualization (gviz) export endpoint - request and response handling

The spreadsheet export endpoint answers with JSON preceded by a guard
prefix that stops browsers from executing the body as a script:

    )]}'
    {"version": "0.6", "table": {"cols": [...], "rows": [...]}}

This module builds the request, strips the prefix, parses the JSON and
extracts table.rows. HttpTransport performs the GET with httpx.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import quote

import httpx

from sheetstream.errors import (
    InvalidEnvelopeError,
    MalformedJsonError,
    MissingRowsError,
    TransportError,
)

ENVELOPE_PREFIX = ")]}'\n"

USER_AGENT = "Sheets FDW"

# Fixed request headers; x-datasource-auth asks for a cleaner JSON body
FIXED_HEADERS = {
    "user-agent": USER_AGENT,
    "x-datasource-auth": "true",
}


class Transport(Protocol):
    """Anything that can GET a URL and return the response body as text"""

    def get(self, url: str, headers: Dict[str, str]) -> str: ...


def build_query_url(base_url: str, spread_sheet_id: str, sheet_id: Optional[str] = None) -> str:
    """
    Build the gviz query URL for a spreadsheet

    Args:
        base_url: e.g. https://docs.google.com/spreadsheets/d
        spread_sheet_id: Document identifier
        sheet_id: Optional sub-sheet (gid) identifier

    Returns:
        {base_url}/{id}/gviz/tq?tqx=out:json, or with gid={sheet_id}& before tqx
    """
    base = base_url.rstrip("/")
    document = quote(spread_sheet_id, safe="")

    if sheet_id is not None:
        return f"{base}/{document}/gviz/tq?gid={quote(str(sheet_id), safe='')}&tqx=out:json"
    return f"{base}/{document}/gviz/tq?tqx=out:json"


def build_headers(extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Merge static extra headers with the fixed headers

    Fixed headers win over extra headers with the same name (names are
    compared case-insensitively).
    """
    headers: Dict[str, str] = {}
    for name, value in (extra or {}).items():
        if name.lower() not in FIXED_HEADERS:
            headers[name] = value
    headers.update(FIXED_HEADERS)
    return headers


def strip_envelope(body: str) -> str:
    """
    Remove the guard prefix from a response body

    Raises:
        InvalidEnvelopeError: If the body does not start with the prefix
    """
    if not body.startswith(ENVELOPE_PREFIX):
        raise InvalidEnvelopeError()
    return body[len(ENVELOPE_PREFIX):]


def parse_document(payload: str) -> Any:
    """
    Parse the JSON document left after stripping the prefix

    Raises:
        MalformedJsonError: If the payload is not valid JSON
    """
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedJsonError(str(e)) from e


def extract_rows(document: Any) -> List[Any]:
    """
    Get the table.rows array from a parsed document

    Raises:
        MissingRowsError: If table.rows is absent or not an array
    """
    table = document.get("table") if isinstance(document, dict) else None
    rows = table.get("rows") if isinstance(table, dict) else None

    if not isinstance(rows, list):
        raise MissingRowsError()
    return rows


def decode_response(body: str) -> List[Any]:
    """Envelope check, JSON parse and row extraction, in that order"""
    return extract_rows(parse_document(strip_envelope(body)))


class HttpTransport:
    """
    Default transport collaborator built on httpx

    Performs one blocking GET per call. There are no retries; timeouts
    come from the configured value.

    Example:
        transport = HttpTransport(timeout=10)
        body = transport.get(url, build_headers())
    """

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def get(self, url: str, headers: Dict[str, str]) -> str:
        """
        GET a URL and return the decoded response body

        Raises:
            TransportError: On network failure or a non-2xx status
        """
        try:
            response = httpx.get(
                url, headers=headers, timeout=self.timeout, follow_redirects=True
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                url, f"HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(url, str(e) or e.__class__.__name__) from e

        return response.text

    def __repr__(self) -> str:
        return f"HttpTransport(timeout={self.timeout})"
