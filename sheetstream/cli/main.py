"""
sheetstream CLI - read Google Sheets as typed rows

Usage:
    sheetstream scan <spread_sheet_id> -c name:type [-c name:type ...] [options]
    sheetstream url <spread_sheet_id> [--sheet-id gid]
"""

import logging
import sys
import time
from dataclasses import replace
from typing import Dict, Optional, Tuple

import click

from sheetstream import __version__
from sheetstream.cli.formatters import FORMATTERS, format_for_path, get_formatter
from sheetstream.config import AdapterConfig, ScanOptions, load_config
from sheetstream.core.types import Schema
from sheetstream.errors import SheetStreamError
from sheetstream.readers.gviz import build_query_url
from sheetstream.readers.sheets_reader import SheetsReader

logger = logging.getLogger("sheetstream")


def setup_logging(log_level: str) -> None:
    """Send sheetstream log records to stderr at the given level."""
    level = getattr(logging, log_level.upper(), logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)


def parse_header_options(values: Tuple[str, ...]) -> Dict[str, str]:
    """Turn repeated "Name: value" options into a header dict."""
    headers = {}
    for value in values:
        name, sep, header_value = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected 'Name: value', got '{value}'", param_hint="--header")
        headers[name.strip()] = header_value.strip()
    return headers


def build_config(
    base_url: Optional[str],
    headers: Tuple[str, ...],
    timeout: Optional[float],
) -> AdapterConfig:
    """Environment configuration with command-line overrides applied."""
    config = load_config()

    overrides = {}
    if base_url:
        overrides["base_url"] = base_url
    if timeout is not None:
        overrides["timeout"] = timeout
    if headers:
        overrides["headers"] = {**config.headers, **parse_header_options(headers)}

    return replace(config, **overrides) if overrides else config


@click.group()
@click.version_option(version=__version__, prog_name="sheetstream")
def cli():
    """
    sheetstream - read Google Sheets as typed rows

    Columns are declared as name:type and map to sheet columns by
    position: the first declared column reads column A, and so on.
    """


@cli.command()
@click.argument("spread_sheet_id", type=str)
@click.option(
    "--column",
    "-c",
    "columns",
    multiple=True,
    required=True,
    help="Column declaration name:type, in sheet order (types: integer, text)",
)
@click.option("--sheet-id", "-s", type=str, default=None, help="Tab gid within the document")
@click.option("--base-url", type=str, default=None, help="Override the export base URL")
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    help="Extra request header 'Name: value' (repeatable)",
)
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds")
@click.option(
    "--format",
    "-f",
    type=click.Choice(sorted(FORMATTERS), case_sensitive=False),
    default=None,
    help="Output format (default: table, or inferred from --output)",
)
@click.option("--limit", "-l", type=click.IntRange(min=0), default=None, help="Stop after N rows")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write output to file instead of stdout",
)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--time", "-t", "show_time", is_flag=True, help="Show scan time")
@click.option("--log-level", type=str, default=None, help="Logging level (default: WARNING)")
def scan(
    spread_sheet_id: str,
    columns: Tuple[str, ...],
    sheet_id: Optional[str],
    base_url: Optional[str],
    headers: Tuple[str, ...],
    timeout: Optional[float],
    format: Optional[str],
    limit: Optional[int],
    output: Optional[str],
    no_color: bool,
    show_time: bool,
    log_level: Optional[str],
):
    """
    Scan a spreadsheet and print its rows

    Examples:

        \b
        # Two columns from the first tab
        $ sheetstream scan abc123 -c id:integer -c name:text

        \b
        # A specific tab, as JSON
        $ sheetstream scan abc123 --sheet-id 2 -c id:int -c name:text -f json

        \b
        # Save to CSV (format inferred from the extension)
        $ sheetstream scan abc123 -c id:int -c name:text -o people.csv
    """
    fmt = format
    del format
    try:
        config = build_config(base_url, headers, timeout)
        setup_logging(log_level or config.log_level)

        schema = Schema.from_specs(list(columns))
        reader = SheetsReader(spread_sheet_id, schema, sheet_id=sheet_id, config=config)
        reader.set_limit(limit)

        output_format = (fmt or (format_for_path(output) if output else "table")).lower()

        start_time = time.time()
        rows = list(reader.read_rows())
        elapsed = time.time() - start_time

        formatter = get_formatter(output_format)
        output_text = formatter.format(
            schema.get_column_names(),
            rows,
            no_color=no_color or output is not None or not sys.stdout.isatty(),
            show_footer=not output,
        )

        if output:
            with open(output, "w", encoding="utf-8") as f:
                f.write(output_text)
            click.echo(f"Results written to {output} ({output_format} format)", err=True)
        else:
            click.echo(output_text.rstrip("\n"))

        if show_time:
            click.echo(f"Scanned {len(rows)} rows in {elapsed:.3f}s", err=True)

    except (SheetStreamError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("spread_sheet_id", type=str)
@click.option("--sheet-id", "-s", type=str, default=None, help="Tab gid within the document")
@click.option("--base-url", type=str, default=None, help="Override the export base URL")
def url(spread_sheet_id: str, sheet_id: Optional[str], base_url: Optional[str]):
    """
    Print the export URL a scan would fetch
    """
    try:
        config = build_config(base_url, (), None)
        options = ScanOptions.from_options({"spread_sheet_id": spread_sheet_id, "sheet_id": sheet_id})
    except SheetStreamError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(build_query_url(config.base_url, options.spread_sheet_id, options.sheet_id))


if __name__ == "__main__":
    cli()
