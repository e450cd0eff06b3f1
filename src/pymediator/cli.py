"""Root CLI group for pymediator with global flags and command registration."""

from __future__ import annotations

import click

from pymediator import __version__
from pymediator.commands import register_commands
from pymediator.commands._context import AppContext
from pymediator.config.settings import MediatorSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="pymediator")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and telemetry span tree.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--no-plugins", is_flag=True, help="Skip entry-point and local plugin discovery.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    no_plugins: bool,
) -> None:
    """pymediator — send requests and publish notifications through the mediator."""
    ctx.ensure_object(dict)
    settings = MediatorSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
        no_plugins=no_plugins,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
