"""Error taxonomy for the dispatch engine.

* Configuration errors (:class:`DuplicateHandlerError`,
  :class:`RegistrySealedError`) are fatal at start-up.
* :class:`HandlerNotFoundError` is raised by ``send`` for an unknown request.
* :class:`ValidationFailedError` aggregates every failure of one dispatch.

Handler errors are never wrapped: they reach the ``send`` caller unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pymediator.validation.result import ValidationFailure


class MediatorError(Exception):
    """Base exception for every error raised by the mediator infrastructure."""


class DuplicateHandlerError(MediatorError):
    """A second handler (or validator) was registered for a request type."""

    def __init__(self, identity: str, kind: str = "request handler") -> None:
        super().__init__(f"Duplicate {kind} for {identity}")
        self.identity = identity
        self.kind = kind


class RegistrySealedError(MediatorError):
    """Registration was attempted after the registry was sealed."""

    def __init__(self, identity: str) -> None:
        super().__init__(f"Registry is sealed; cannot register {identity}")
        self.identity = identity


class HandlerNotFoundError(MediatorError):
    """No handler is registered for the request's type identity."""

    def __init__(self, identity: str) -> None:
        super().__init__(f"No handler found for request type: {identity}")
        self.identity = identity


class ValidationFailedError(MediatorError):
    """One or more validation failures for a single request."""

    def __init__(
        self,
        failures: list[ValidationFailure],
        message: str = "Validation failed",
    ) -> None:
        super().__init__(message)
        self.failures = list(failures)

    def __str__(self) -> str:
        base = super().__str__()
        if not self.failures:
            return base
        details = "; ".join(f"{f.property_name}: {f.message}" for f in self.failures)
        return f"{base}: {details}"
