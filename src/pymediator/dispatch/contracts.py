"""Structural contracts between the mediator and its collaborators.

Handlers and validators are duck-typed (``typing.Protocol``); behaviors
subclass :class:`PipelineBehavior`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from pymediator.validation.result import ValidationResult

TRequest_contra = TypeVar("TRequest_contra", contravariant=True)
TResponse_co = TypeVar("TResponse_co", covariant=True)

NextStep = Callable[[], Awaitable[Any]]
"""Zero-argument coroutine function invoking the rest of the pipeline."""


@runtime_checkable
class RequestHandler(Protocol[TRequest_contra, TResponse_co]):
    """Handles exactly one request type and produces its response."""

    async def handle_async(self, request: TRequest_contra) -> TResponse_co: ...


@runtime_checkable
class NotificationHandler(Protocol[TRequest_contra]):
    """Reacts to a notification. Several may subscribe to the same type."""

    async def handle_async(self, notification: TRequest_contra) -> None: ...


@runtime_checkable
class Validator(Protocol[TRequest_contra]):
    """Validates a request before its handler runs."""

    async def validate_async(self, instance: TRequest_contra) -> ValidationResult: ...


class PipelineBehavior(ABC):
    """Middleware wrapping one ``send`` invocation.

    A behavior may work before ``await next_()``, after it, or both, and may
    decline to call it at all. It must not mutate *request* and must
    re-raise anything ``next_()`` raises.
    """

    name: str = "behavior"

    @abstractmethod
    async def handle(self, request: Any, next_: NextStep) -> Any:
        """Run this behavior around the remaining pipeline."""
