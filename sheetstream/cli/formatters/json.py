"""
JSON formatter for machine-readable output
"""

import json
from typing import Any, List, Sequence, Tuple

from sheetstream.cli.formatters.base import BaseFormatter


class JSONFormatter(BaseFormatter):
    """Format rows as a JSON array of objects"""

    def format(self, columns: List[str], rows: Sequence[Tuple[Any, ...]], **kwargs) -> str:
        """
        Args:
            columns: Column names
            rows: Target rows
            **kwargs: 'compact' for no whitespace, 'indent' otherwise

        Returns:
            JSON string
        """
        records = [dict(zip(columns, row)) for row in rows]

        if kwargs.get("compact", False):
            return json.dumps(records, separators=(",", ":"), ensure_ascii=False)
        return json.dumps(records, indent=kwargs.get("indent", 2), ensure_ascii=False)
