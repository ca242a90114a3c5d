"""
Base formatter interface for CLI output
"""

from typing import Any, List, Sequence, Tuple


class BaseFormatter:
    """Base class for all output formatters"""

    def format(self, columns: List[str], rows: Sequence[Tuple[Any, ...]], **kwargs) -> str:
        """
        Format scanned rows for output

        Args:
            columns: Column names, in row order
            rows: Target rows as tuples, None for NULL cells
            **kwargs: Additional formatter-specific options

        Returns:
            Formatted string ready for output
        """
        raise NotImplementedError("Formatters must implement format() method")

    def get_name(self) -> str:
        """Get formatter name"""
        return self.__class__.__name__.replace("Formatter", "").lower()

    @staticmethod
    def footer_text(row_count: int) -> str:
        return f"{row_count} row{'s' if row_count != 1 else ''}"
