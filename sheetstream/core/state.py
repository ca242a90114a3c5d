"""
Adapter state - configuration plus the per-scan row buffer

One AdapterState belongs to one scan session. It is not re-entrant: a
buffer loaded by one scan must be released with reset_buffer() before
another scan can load its own.
"""

from typing import Any, List, Optional

from sheetstream.config import DEFAULT_BASE_URL


class AdapterState:
    """
    Mutable state owned by a scan controller

    Invariant: 0 <= cursor <= len(rows). The scan is exhausted
    exactly when cursor == len(rows).
    """

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = DEFAULT_BASE_URL
        self.rows: List[Any] = []
        self.cursor = 0
        self.active = False

        if base_url is not None:
            self.configure(base_url)

    def configure(self, base_url: Optional[str]) -> None:
        """
        Set the base URL used to build request URLs

        Args:
            base_url: Base URL; empty or None keeps the default
        """
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")

    def load(self, rows: List[Any]) -> None:
        """Take ownership of a freshly fetched row buffer and rewind"""
        self.rows = rows
        self.cursor = 0
        self.active = True

    def reset_buffer(self) -> None:
        """Drop the row buffer and rewind the cursor. Idempotent."""
        self.rows = []
        self.cursor = 0
        self.active = False

    def current(self) -> Optional[Any]:
        """Source row under the cursor, or None when exhausted"""
        if self.exhausted:
            return None
        return self.rows[self.cursor]

    def advance(self) -> None:
        if not self.exhausted:
            self.cursor += 1

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.rows)

    @property
    def remaining(self) -> int:
        return len(self.rows) - self.cursor

    def __repr__(self) -> str:
        return f"AdapterState(base_url={self.base_url!r}, cursor={self.cursor}, rows={len(self.rows)})"
