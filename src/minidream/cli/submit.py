"""minidream submit — send a prediction record to the challenge."""

from __future__ import annotations

from pathlib import Path

import click

from minidream.cli.utils import console, error_handler


@click.command()
@click.argument("record_path", metavar="RECORD", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-c", "--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False),
    help="Analysis config YAML providing evaluation_id, parent_id and team.",
)
@click.option("--evaluation-id", default=None, help="Synapse evaluation queue ID.")
@click.option("--parent-id", default=None, help="Synapse project/folder to store the file in.")
@click.option("--team", default=None, help="Team name recorded with the submission.")
@click.option(
    "--auth-token", envvar="SYNAPSE_AUTH_TOKEN", default=None,
    help="Synapse personal access token (default: $SYNAPSE_AUTH_TOKEN or ~/.synapseConfig).",
)
@click.option(
    "--dry-run", "dry_run", default=None, type=click.Path(file_okay=False),
    help="Write the validated submission file to this directory instead of submitting.",
)
@error_handler
def submit(
    record_path: str,
    config_path: str | None,
    evaluation_id: str | None,
    parent_id: str | None,
    team: str | None,
    auth_token: str | None,
    dry_run: str | None,
) -> None:
    """Validate a record file and submit it to Synapse."""
    from minidream.core.exceptions import ConfigError
    from minidream.core.models import PredictionRecord
    from minidream.io.config import AnalysisConfig
    from minidream.submit.client import DryRunSubmitter, SynapseSubmitter
    from minidream.submit.record import RecordBuilder

    loaded = PredictionRecord.from_yaml(Path(record_path))
    # Re-validate: the file may have been edited by hand
    validated = RecordBuilder(loaded.module).build(dict(loaded.answers))

    if config_path:
        config = AnalysisConfig.from_yaml(Path(config_path))
        evaluation_id = evaluation_id or config.evaluation_id
        parent_id = parent_id or config.parent_id
        team = team or config.team

    if dry_run:
        submitter = DryRunSubmitter(Path(dry_run))
    else:
        if not evaluation_id:
            raise ConfigError("An evaluation ID is required (--evaluation-id)", field="evaluation_id")
        if not parent_id:
            raise ConfigError("A parent ID is required (--parent-id)", field="parent_id")
        submitter = SynapseSubmitter(
            str(evaluation_id), str(parent_id), auth_token=auth_token, team=team,
        )

    with console.status("[bold blue]Submitting..."):
        submission_id = submitter.submit(validated)
    console.print(f"[green]Submitted {validated.module} record: {submission_id}[/green]")
