"""Output formatting for CLI results."""

import csv
import io
import json
from enum import Enum
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table


class OutputFormat(str, Enum):
    json = "json"
    table = "table"
    csv = "csv"


def format_output(
    data: Any,
    fmt: OutputFormat = OutputFormat.json,
    columns: Optional[list[str]] = None,
) -> None:
    """Format and print data in the requested format."""
    if data is None:
        typer.echo("{}")
        return

    if fmt == OutputFormat.json:
        typer.echo(json.dumps(data, indent=2, default=str))
    elif fmt == OutputFormat.table:
        _print_table(data, columns)
    elif fmt == OutputFormat.csv:
        _print_csv(data, columns)


def _resolve_nested(obj: dict, key: str) -> Any:
    """Resolve dotted key path like 'cover.url'."""
    current: Any = obj
    for part in key.split("."):
        if isinstance(current, dict):
            current = current.get(part, "")
        else:
            return ""
    return current


def _cell(value: Any) -> str:
    # Expanded fields come back as nested objects or id lists
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def _columns(rows: list, columns: Optional[list[str]], max_cols: Optional[int] = None) -> list[str]:
    if columns:
        return columns
    cols: list[str] = []
    for row in rows:
        for key in row:
            if key not in cols:
                cols.append(key)
    return cols[:max_cols] if max_cols else cols


def _print_table(data: Any, columns: Optional[list[str]] = None) -> None:
    """Print data as a rich table."""
    console = Console()
    if isinstance(data, list):
        if not data:
            typer.echo("(no results)")
            return
        cols = _columns(data, columns, max_cols=8)
        table = Table()
        for col in cols:
            table.add_column(col.split(".")[-1])
        for row in data:
            table.add_row(*[_cell(_resolve_nested(row, c)) for c in cols])
        console.print(table)
    elif isinstance(data, dict):
        table = Table(show_header=False)
        table.add_column("Field")
        table.add_column("Value")
        for k, v in data.items():
            table.add_row(str(k), _cell(v))
        console.print(table)


def _print_csv(data: Any, columns: Optional[list[str]] = None) -> None:
    """Print data as CSV."""
    rows = data if isinstance(data, list) else [data]
    if not rows:
        return
    cols = _columns(rows, columns)
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=cols, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({c: _cell(_resolve_nested(row, c)) for c in cols})
    typer.echo(output.getvalue().strip())
