"""
Rich table formatter for terminal output
"""

from typing import Any, List, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sheetstream.cli.formatters.base import BaseFormatter


class TableFormatter(BaseFormatter):
    """Format rows as a Rich table"""

    def format(self, columns: List[str], rows: Sequence[Tuple[Any, ...]], **kwargs) -> str:
        """
        Args:
            columns: Column names
            rows: Target rows
            **kwargs: 'no_color', 'show_footer', 'max_width'

        Returns:
            Rendered table string
        """
        console = Console(
            force_terminal=not kwargs.get("no_color", False),
            no_color=kwargs.get("no_color", False),
        )

        # Narrow terminals or wide sheets get a compact box and harder truncation
        compact = console.width < 80 or len(columns) > 8
        max_width = kwargs.get("max_width", 15 if compact else 30)
        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE if compact else box.HEAVY_HEAD,
        )

        for col in columns:
            table.add_column(col, style="cyan", overflow="ellipsis", max_width=max_width, no_wrap=compact)

        for row in rows:
            table.add_row(*["[dim]NULL[/dim]" if value is None else escape(str(value)) for value in row])

        with console.capture() as capture:
            console.print(table)
            if kwargs.get("show_footer", True):
                console.print(f"[dim]{self.footer_text(len(rows))}[/dim]")

        return capture.get()
