"""Shared CLI utilities: Rich console, logging, error handling and output."""

from __future__ import annotations

import csv
import functools
import io
import json
import logging
import math
import traceback
from pathlib import Path
from typing import Any, Callable

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# Set by the --verbose flag on the top-level CLI group.
verbose: bool = False


def configure_logging(verbose_logging: bool) -> None:
    """Route library logging through Rich (INFO with --verbose, else WARNING)."""
    logging.basicConfig(
        level=logging.INFO if verbose_logging else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def error_handler(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator wrapping CLI commands with standard error handling.

    Catches MiniDreamError (exit 1) and unexpected exceptions (exit 2).
    With --verbose, unexpected errors include the full traceback.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from minidream.core.exceptions import MiniDreamError

        try:
            return func(*args, **kwargs)
        except (SystemExit, click.exceptions.Exit, click.ClickException):
            raise
        except MiniDreamError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        except FileNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        except Exception as e:
            if verbose:
                console.print(f"[red]Internal error:[/red] {e}")
                console.print(traceback.format_exc())
            else:
                console.print(
                    f"[red]Internal error:[/red] {type(e).__name__}: {e}\n"
                    "[dim]Use --verbose for the full traceback.[/dim]"
                )
            raise SystemExit(2)

    return wrapper


def parse_assignments(values: tuple[str, ...], option: str) -> dict[str, str]:
    """Parse repeated ``NAME=VALUE`` options into a dict.

    Raises:
        click.BadParameter: If an entry has no ``=`` or an empty name.
    """
    result: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}", param_hint=option)
        result[name.strip()] = value.strip()
    return result


def check_output_path(out_path: Path, overwrite: bool) -> None:
    """Reject directories, missing parents and (without --overwrite) existing files."""
    if out_path.is_dir():
        console.print(
            f"[red]Error:[/red] Output path is a directory: {out_path}\n"
            f"Provide a file path, e.g. {out_path / 'scores.csv'}"
        )
        raise SystemExit(1)

    if not out_path.parent.exists():
        console.print(
            f"[red]Error:[/red] Parent directory does not exist: {out_path.parent}"
        )
        raise SystemExit(1)

    if out_path.exists() and not overwrite:
        console.print(
            f"[red]Error:[/red] Output file already exists: {out_path}\n"
            "Use --overwrite to replace it."
        )
        raise SystemExit(1)


def format_output(
    rows: list[dict[str, Any]],
    columns: list[str],
    fmt: str,
    title: str,
) -> None:
    """Render rows in the requested format (table, csv, or json).

    Args:
        rows: List of dicts, each with keys matching columns.
        columns: Column names (display order).
        fmt: One of "table", "csv", "json".
        title: Title for table output.
    """
    rows = [{c: _clean(row.get(c)) for c in columns} for row in rows]
    if fmt == "table":
        table = Table(show_header=True, title=title)
        for col in columns:
            if col == columns[0]:
                table.add_column(col, style="bold")
            else:
                table.add_column(col)
        for row in rows:
            table.add_row(*(_display(row.get(c)) for c in columns))
        console.print(table)
    elif fmt == "csv":
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(columns)
        for row in rows:
            writer.writerow(["" if row.get(c) is None else row.get(c) for c in columns])
        console.print(buf.getvalue().rstrip(), markup=False, highlight=False, soft_wrap=True)
    elif fmt == "json":
        console.print(json.dumps(rows, indent=2, default=str), markup=False, highlight=False, soft_wrap=True)


def _clean(value: Any) -> Any:
    """Missing numeric cells (NaN) become None so json and csv stay valid."""
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.4g}"
    return str(value)
