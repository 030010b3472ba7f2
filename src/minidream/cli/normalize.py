"""minidream normalize — composite motility scores from a measurement table."""

from __future__ import annotations

from pathlib import Path

import click

from minidream.cli.utils import (
    check_output_path,
    console,
    error_handler,
    format_output,
    parse_assignments,
)

_SCORE_COLUMNS = ["sample_id", "cell_line", "surface", "stiffness", "diagnosis", "n_metrics", "score"]


@click.command()
@click.argument("data", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-c", "--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False),
    help="Analysis config YAML (columns, filters, overrides).",
)
@click.option(
    "--where", "where", multiple=True, metavar="FIELD=VALUE",
    help="Keep only rows where FIELD equals VALUE (repeatable).",
)
@click.option(
    "--override", "override", multiple=True, metavar="SURFACE=STIFFNESS",
    help="Stiffness for a surface missing one in the data (repeatable).",
)
@click.option(
    "--summary", "summary_by", default=None, metavar="FIELDS",
    help="Comma-separated fields to summarize scores by (e.g. cell_line,surface).",
)
@click.option("--format", "fmt", type=click.Choice(["table", "csv", "json"]),
              default="table", help="Output format.")
@click.option("-o", "--output", default=None, type=click.Path(), help="Write scores to a CSV file.")
@click.option("--overwrite", is_flag=True, help="Overwrite output file if it exists.")
@error_handler
def normalize(
    data: str,
    config_path: str | None,
    where: tuple[str, ...],
    override: tuple[str, ...],
    summary_by: str | None,
    fmt: str,
    output: str | None,
    overwrite: bool,
) -> None:
    """Normalize motility metrics and print composite scores."""
    from minidream.io.config import AnalysisConfig
    from minidream.measure.normalizer import as_override_rules
    from minidream.measure.summary import scores_to_frame, summarize_scores
    from minidream.workflow import motility_pipeline

    config = AnalysisConfig.from_yaml(Path(config_path)) if config_path else AnalysisConfig(module="motility")
    config.filters.update(_typed_filters(parse_assignments(where, "--where")))
    if override:
        mapping = {}
        for surface, value in parse_assignments(override, "--override").items():
            try:
                mapping[surface] = float(value)
            except ValueError:
                raise click.BadParameter(
                    f"stiffness for {surface!r} must be a number, got {value!r}",
                    param_hint="--override",
                ) from None
        config.overrides = config.overrides + as_override_rules(mapping)

    out_path = Path(output).expanduser() if output else None
    if out_path is not None:
        check_output_path(out_path, overwrite)

    engine = motility_pipeline(config, source=Path(data))
    with console.status("[bold blue]Normalizing measurements..."):
        result = engine.run()
    scores = result.outputs["scores"]

    if summary_by:
        keys = [k.strip() for k in summary_by.split(",") if k.strip()]
        summary = summarize_scores(scores, by=keys)
        rows = summary.to_dict(orient="records")
        format_output(rows, keys + ["mean", "std", "n"], fmt, "Composite score summary")
    elif not scores:
        console.print("[dim]No composite scores (no matching samples).[/dim]")
    else:
        rows = scores_to_frame(scores).to_dict(orient="records")
        format_output(rows, _SCORE_COLUMNS, fmt, "Composite motility scores")

    if out_path is not None:
        scores_to_frame(scores).to_csv(out_path, index=False)
        console.print(f"[green]Wrote {len(scores)} score(s) to {out_path}[/green]")


def _typed_filters(raw: dict[str, str]) -> dict[str, object]:
    """Stiffness is numeric; every other filter field is matched as text."""
    typed: dict[str, object] = {}
    for name, value in raw.items():
        if name == "stiffness":
            try:
                typed[name] = float(value)
            except ValueError:
                raise click.BadParameter(
                    f"stiffness must be a number, got {value!r}", param_hint="--where",
                ) from None
        else:
            typed[name] = value
    return typed
