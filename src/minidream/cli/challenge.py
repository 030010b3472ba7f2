"""minidream challenge — run the challenge scoring driver."""

from __future__ import annotations

from pathlib import Path

import click

from minidream.cli.utils import console, error_handler


@click.command()
@click.argument("action", type=click.Choice(["validate", "score"]))
@click.option("-u", "--user", required=True, help="Synapse user the driver logs in as.")
@click.option(
    "--send-messages/--no-send-messages", default=False,
    help="Email participants about their results. Leave off to rescore silently.",
)
@click.option("--notifications/--no-notifications", default=False,
              help="Notify challenge admins of errors.")
@click.option("--all/--new-only", "all_submissions", default=True,
              help="Process every submission, not only new ones.")
@click.option(
    "--script", default="challenge.py", type=click.Path(dir_okay=False),
    help="Path to the challenge scoring script.",
)
@click.option(
    "--log-dir", default=None, type=click.Path(file_okay=False),
    help="Directory for score.log (default: log/ next to the script).",
)
@error_handler
def challenge(
    action: str,
    user: str,
    send_messages: bool,
    notifications: bool,
    all_submissions: bool,
    script: str,
    log_dir: str | None,
) -> None:
    """Validate or score challenge submissions."""
    from minidream.scoring.harness import LOG_FILENAME, ScoringCommand, run_scoring

    script_path = Path(script).expanduser()
    log_path = Path(log_dir).expanduser() if log_dir else script_path.parent / "log"
    command = ScoringCommand(
        script=script_path,
        user=user,
        action=action,
        send_messages=send_messages,
        notifications=notifications,
        all_submissions=all_submissions,
    )

    with console.status(f"[bold blue]Running {action}..."):
        code = run_scoring(command, log_path)

    if code != 0:
        console.print(
            f"[red]Error:[/red] {action} exited with code {code}; "
            f"see {log_path / LOG_FILENAME}"
        )
        raise SystemExit(code)
    console.print(f"[green]{action.title()} complete.[/green] Log: {log_path / LOG_FILENAME}")
