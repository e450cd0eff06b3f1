"""Command: list every handler and validator registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pymediator.commands._base import MediatorCommand
from pymediator.results import DispatchResult

if TYPE_CHECKING:
    from pymediator.commands._context import AppContext


@click.command(
    cls=MediatorCommand,
    examples="""\
  pymediator handlers
  pymediator --json handlers
  pymediator --no-plugins handlers""",
)
@click.pass_obj
def handlers(app: AppContext) -> None:
    """List registered request handlers, notification handlers and validators."""
    registry = app.registry
    app.emit(
        DispatchResult.success(
            "handlers",
            "",
            {
                "entries": registry.entries(),
                "summary": registry.summary(),
                "plugins": app.plugins.list_plugin_names(),
            },
        )
    )
