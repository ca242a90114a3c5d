"""
Base reader interface for row sources

Readers are the host side of a scan: they run the begin / iterate / end
protocol and hand rows to callers as plain Python values.
"""

from typing import Any, Dict, Iterator, Optional, Tuple

from sheetstream.core.types import Schema


class BaseReader:
    """
    Base class for readers

    Readers are responsible for:
    1. Yielding rows lazily as tuples (read_rows) or dictionaries (read_lazy)
    2. Reporting the declared schema
    3. Optionally supporting early termination with a limit
    """

    def read_rows(self) -> Iterator[Tuple[Any, ...]]:
        """
        Yield rows as tuples in schema column order

        This is the core method that all readers must implement.
        """
        raise NotImplementedError("Subclasses must implement read_rows()")

    def read_lazy(self) -> Iterator[Dict[str, Any]]:
        """
        Yield rows as dictionaries keyed by column name

        Example:
            {'id': 1, 'name': 'Alice'}
        """
        names = self.get_schema().get_column_names()
        for row in self.read_rows():
            yield dict(zip(names, row))

    def supports_limit(self) -> bool:
        """
        Does this reader support early termination with a limit?

        Returns:
            True if set_limit() is honoured
        """
        return False

    def set_limit(self, limit: Optional[int]) -> None:
        """
        Set maximum number of rows to read

        Args:
            limit: Maximum number of rows to yield, None for no limit

        Note:
            Only called if supports_limit() returns True
        """
        pass

    def get_schema(self) -> Schema:
        """Get the declared column schema"""
        raise NotImplementedError("Subclasses must implement get_schema()")

    def __iter__(self):
        """Allow readers to be used directly in for loops"""
        return self.read_lazy()

    def to_dataframe(self):
        """
        Convert reader content to pandas DataFrame

        Returns:
            pandas.DataFrame with one column per declared column, even when
            the sheet has no rows
        """
        try:
            import pandas as pd
        except ImportError as e:
            raise ImportError(
                "Pandas is required for to_dataframe(). Install `sheetstream[pandas]`"
            ) from e

        return pd.DataFrame(list(self.read_rows()), columns=self.get_schema().get_column_names())
