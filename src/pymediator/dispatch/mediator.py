"""Mediator — the single entry point for ``send`` and ``publish``.

``send`` routes a request to its one handler through the behavior
pipeline. ``publish`` fans a notification out to every subscribed handler.

INVARIANT: Notification handler failures are warnings, never errors.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

import anyio

from pymediator.dispatch.behaviors import default_behaviors
from pymediator.dispatch.contracts import PipelineBehavior
from pymediator.dispatch.pipeline import PipelineBuilder
from pymediator.dispatch.registry import HandlerRegistry
from pymediator.domain.messages import Notification, Request, type_identity
from pymediator.domain.types import PublishStrategy
from pymediator.errors import HandlerNotFoundError

logger = logging.getLogger(__name__)

TResponse = TypeVar("TResponse")


class Mediator:
    """In-process command bus with a fixed behavior pipeline.

    Parameters:
        registry: Handler registry. Sealed on construction.
        behaviors: Pipeline behaviors, outermost first. Defaults to
            Validation, Logging, Telemetry.
        publish_strategy: Run notification handlers one after another
            (default) or concurrently in a task group.
        send_timeout: Seconds allowed for one ``send``; ``None`` disables.
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        behaviors: Sequence[PipelineBehavior] | None = None,
        *,
        publish_strategy: PublishStrategy = PublishStrategy.SEQUENTIAL,
        send_timeout: float | None = None,
    ) -> None:
        registry.seal()
        self._registry = registry
        self._pipeline = PipelineBuilder(
            default_behaviors(registry) if behaviors is None else behaviors
        )
        self._publish_strategy = PublishStrategy(publish_strategy)
        self._send_timeout = send_timeout

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    @property
    def behaviors(self) -> tuple[PipelineBehavior, ...]:
        return self._pipeline.behaviors

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def send(self, request: Request[TResponse]) -> TResponse:
        """Dispatch *request* to its handler and return the handler's response.

        Raises:
            HandlerNotFoundError: No handler is registered; no behavior runs.
            ValidationFailedError: The request's validator rejected it.
            TimeoutError: ``send_timeout`` elapsed.
            Exception: Anything the handler raises, unchanged.
        """
        identity = type_identity(request)
        handler = self._registry.resolve(identity)
        if handler is None:
            logger.debug("No handler found for %s", identity)
            raise HandlerNotFoundError(identity)

        async def invoke_handler() -> Any:
            return await handler.handle_async(request)

        pipeline = self._pipeline.build(request, invoke_handler)
        with anyio.fail_after(self._send_timeout):
            return await pipeline()

    async def publish(self, notification: Notification) -> None:
        """Deliver *notification* to every registered handler, best effort.

        Handlers run in registration order. A failing handler is logged and
        skipped; the rest still run and ``publish`` itself does not raise.
        """
        identity = type_identity(notification)
        handlers = self._registry.resolve_all(identity)
        if not handlers:
            logger.warning("No notification handlers registered for %s", identity)
            return

        logger.debug("Publishing %s to %d handler(s)", identity, len(handlers))
        if self._publish_strategy is PublishStrategy.CONCURRENT:
            async with anyio.create_task_group() as tg:
                for index, handler in enumerate(handlers):
                    tg.start_soon(self._deliver, identity, index, handler, notification)
        else:
            for index, handler in enumerate(handlers):
                await self._deliver(identity, index, handler, notification)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _deliver(
        self,
        identity: str,
        index: int,
        handler: Any,
        notification: Notification,
    ) -> bool:
        """Run one notification handler in isolation. Returns success."""
        try:
            await handler.handle_async(notification)
        except Exception:
            logger.warning(
                "Notification handler %d (%s) failed for %s",
                index,
                type(handler).__name__,
                identity,
                exc_info=True,
            )
            return False
        logger.debug(
            "Notification handler %d (%s) completed for %s",
            index,
            type(handler).__name__,
            identity,
        )
        return True
