"""
CSV formatter for Unix-friendly output
"""

import csv
import io
from typing import Any, List, Sequence, Tuple

from sheetstream.cli.formatters.base import BaseFormatter


class CSVFormatter(BaseFormatter):
    """Format rows as CSV, NULL cells as empty fields"""

    def format(self, columns: List[str], rows: Sequence[Tuple[Any, ...]], **kwargs) -> str:
        output = io.StringIO()
        writer = csv.writer(
            output,
            delimiter=kwargs.get("delimiter", ","),
            quoting=csv.QUOTE_ALL if kwargs.get("quote_all") else csv.QUOTE_MINIMAL,
            lineterminator="\n",
        )

        writer.writerow(columns)
        writer.writerows(["" if value is None else value for value in row] for row in rows)

        return output.getvalue()
