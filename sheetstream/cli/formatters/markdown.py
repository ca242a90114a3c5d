"""
Markdown formatter for documentation and sharing
"""

from typing import Any, List, Sequence, Tuple

from sheetstream.cli.formatters.base import BaseFormatter


class MarkdownFormatter(BaseFormatter):
    """Format rows as a Markdown table"""

    def format(self, columns: List[str], rows: Sequence[Tuple[Any, ...]], **kwargs) -> str:
        """
        Args:
            columns: Column names
            rows: Target rows
            **kwargs: 'show_footer' to append the row count

        Returns:
            Markdown table string
        """
        lines = [
            "| " + " | ".join(self._escape(col) for col in columns) + " |",
            "| " + " | ".join(":---" for _ in columns) + " |",
        ]

        for row in rows:
            cells = ["_NULL_" if value is None else self._escape(str(value)) for value in row]
            lines.append("| " + " | ".join(cells) + " |")

        output = "\n".join(lines)
        if kwargs.get("show_footer", True):
            output += f"\n\n_{self.footer_text(len(rows))}_"

        return output

    @staticmethod
    def _escape(text: str) -> str:
        return text.replace("|", "\\|")
