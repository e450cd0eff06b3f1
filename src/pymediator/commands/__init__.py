"""Subcommand modules for pymediator.

Provides register_commands() which uses deferred imports to keep
``pymediator --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from pymediator.commands.handlers import handlers
    from pymediator.commands.publish import publish
    from pymediator.commands.send import send
    from pymediator.commands.validate import validate

    cli.add_command(handlers)
    cli.add_command(send)
    cli.add_command(publish)
    cli.add_command(validate)
