"""minidream record — build and validate a prediction record file."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from minidream.cli.utils import check_output_path, console, error_handler, parse_assignments


@click.command()
@click.argument("module")
@click.option(
    "-a", "--answer", "answer", multiple=True, metavar="NAME=VALUE",
    help="An answer for the module (repeatable).",
)
@click.option(
    "-o", "--output", default=None, type=click.Path(),
    help="Submission YAML to write. Defaults to <module>_submission.yml.",
)
@click.option("--overwrite", is_flag=True, help="Overwrite output file if it exists.")
@click.option("--show-schema", is_flag=True, help="List the module's answers and exit.")
@error_handler
def record(
    module: str,
    answer: tuple[str, ...],
    output: str | None,
    overwrite: bool,
    show_schema: bool,
) -> None:
    """Build a prediction record for a challenge module."""
    from minidream.submit.client import submission_filename
    from minidream.submit.record import RecordBuilder, get_schema

    schema = get_schema(module)
    if show_schema:
        table = Table(show_header=True, title=f"Answers for {module}")
        table.add_column("Name", style="bold")
        table.add_column("Type")
        table.add_column("Required")
        table.add_column("Description")
        for f in schema.fields:
            kind = f"choice ({'/'.join(f.choices)})" if f.choices else f.type
            table.add_row(f.name, kind, "yes" if f.required else "no", f.description)
        console.print(table)
        return

    built = RecordBuilder(schema).build(parse_assignments(answer, "--answer"))

    out_path = Path(output).expanduser() if output else Path(submission_filename(built))
    check_output_path(out_path, overwrite)
    built.to_yaml(out_path)
    console.print(f"[green]Wrote {module} record to {out_path}[/green]")
