"""Click command class with an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints copy-pasteable invocations
and exits before arguments are validated.
"""

from __future__ import annotations

import inspect
import textwrap
from typing import Any

import click


class MediatorCommand(click.Command):
    """``click.Command`` accepting ``examples=`` and exposing ``--examples``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = inspect.cleandoc(examples) if examples else None
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(textwrap.indent(self.examples or "", "  "))
        ctx.exit(0)
