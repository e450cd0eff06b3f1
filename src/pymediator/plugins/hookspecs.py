"""Pluggy hook specifications for pymediator handler plugins.

One setup-time hook lets a plugin register handlers and validators; a
second tells it the mediator is ready so it can publish from handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pymediator.dispatch.mediator import Mediator
    from pymediator.dispatch.registry import HandlerRegistry

hookspec = pluggy.HookspecMarker("pymediator")
hookimpl = pluggy.HookimplMarker("pymediator")


class PymediatorHookSpec:
    """Hook specifications for the pymediator plugin system."""

    @hookspec
    def register_handlers(self, registry: HandlerRegistry) -> None:
        """Register request handlers, notification handlers and validators."""

    @hookspec
    def mediator_ready(self, mediator: Mediator) -> None:
        """Called once the mediator has been built over the sealed registry."""
