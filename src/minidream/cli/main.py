"""minidream CLI — top-level Click group."""

from __future__ import annotations

import click


@click.group()
@click.version_option(package_name="minidream")
@click.option("--verbose", "-v", is_flag=True, help="Show progress logs and full tracebacks.")
def cli(verbose: bool) -> None:
    """mini-DREAM — cell motility scoring and challenge submission."""
    from minidream.cli import utils

    utils.verbose = verbose
    utils.configure_logging(verbose)


def _register_commands() -> None:
    """Register all subcommands. Imports are deferred so startup does not load pandas."""
    from minidream.cli.challenge import challenge
    from minidream.cli.normalize import normalize
    from minidream.cli.record import record
    from minidream.cli.submit import submit

    cli.add_command(challenge)
    cli.add_command(normalize)
    cli.add_command(record)
    cli.add_command(submit)


_register_commands()
