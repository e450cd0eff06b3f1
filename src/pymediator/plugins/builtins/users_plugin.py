"""Built-in plugin that contributes the users feature.

Registers every users handler and validator, then binds the feature to the
mediator so command handlers can publish their domain events.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pluggy

from pymediator.features.users.feature import UsersFeature

if TYPE_CHECKING:
    from pymediator.dispatch.mediator import Mediator
    from pymediator.dispatch.registry import HandlerRegistry

hookimpl = pluggy.HookimplMarker("pymediator")

logger = logging.getLogger(__name__)


class UsersPlugin:
    """Users feature plugin backed by an in-memory repository."""

    def __init__(self, feature: UsersFeature | None = None) -> None:
        self.feature = feature or UsersFeature()

    @hookimpl
    def register_handlers(self, registry: HandlerRegistry) -> None:
        count = registry.scan(self.feature.components())
        logger.debug("Users plugin registered %d component(s)", count)

    @hookimpl
    def mediator_ready(self, mediator: Mediator) -> None:
        self.feature.bind(mediator)
