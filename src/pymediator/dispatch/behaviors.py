"""Built-in pipeline behaviors: validation, logging, telemetry.

Default order, outermost first: Validation → Logging → Telemetry → handler.
Logging and telemetry capture their outcome on both the success and the
failure path and always re-raise.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from pymediator.dispatch.contracts import NextStep, PipelineBehavior
from pymediator.dispatch.telemetry import Span, open_span
from pymediator.domain.messages import type_identity
from pymediator.errors import ValidationFailedError

if TYPE_CHECKING:
    from pymediator.dispatch.registry import HandlerRegistry


class ValidationBehavior(PipelineBehavior):
    """Run the request's validator, refusing to continue when it fails.

    The only behavior allowed to short-circuit: an invalid request raises
    :class:`ValidationFailedError` and the handler never runs.
    """

    name = "validation"

    def __init__(self, registry: HandlerRegistry) -> None:
        self._registry = registry

    async def handle(self, request: Any, next_: NextStep) -> Any:
        validator = self._registry.resolve_validator(type_identity(request))
        if validator is None:
            return await next_()

        result = await validator.validate_async(request)
        if not result.is_valid:
            raise ValidationFailedError(result.errors)
        return await next_()


class LoggingBehavior(PipelineBehavior):
    """Log elapsed time and outcome of every dispatch.

    Parameters:
        slow_request_ms: Successful dispatches slower than this are logged
            at warning level. ``None`` disables the check.
    """

    name = "logging"

    def __init__(self, *, slow_request_ms: float | None = None) -> None:
        self._slow_request_ms = slow_request_ms
        self._log = structlog.get_logger("pymediator.dispatch")

    async def handle(self, request: Any, next_: NextStep) -> Any:
        identity = type_identity(request)
        start = time.perf_counter()
        error: Exception | None = None
        completed = False
        try:
            response = await next_()
            completed = True
            return response
        except Exception as exc:
            error = exc
            raise
        finally:
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            if error is not None:
                self._log.error(
                    "dispatch.failed",
                    request=identity,
                    elapsed_ms=elapsed_ms,
                    ok=False,
                    error_type=type(error).__name__,
                    error=str(error),
                )
            elif not completed:
                self._log.warning("dispatch.cancelled", request=identity, elapsed_ms=elapsed_ms)
            elif self._slow_request_ms is not None and elapsed_ms > self._slow_request_ms:
                self._log.warning(
                    "dispatch.slow",
                    request=identity,
                    elapsed_ms=elapsed_ms,
                    ok=True,
                    threshold_ms=self._slow_request_ms,
                )
            else:
                self._log.info("dispatch.complete", request=identity, elapsed_ms=elapsed_ms, ok=True)


class TelemetryBehavior(PipelineBehavior):
    """Wrap the remaining pipeline in a span named after the request.

    Parameters:
        on_complete: Receives each finished *root* span (exporter hook).
            Nested dispatches attach to the caller's span instead.
    """

    name = "telemetry"

    def __init__(self, *, on_complete: Callable[[Span], None] | None = None) -> None:
        self._on_complete = on_complete

    async def handle(self, request: Any, next_: NextStep) -> Any:
        identity = type_identity(request)
        with open_span(f"send:{identity}") as span:
            if span is None:
                return await next_()
            span.annotate("request", identity)
            try:
                response = await next_()
            except Exception as exc:
                span.record_exception(exc)
                raise
            else:
                span.set_ok()
                return response
            finally:
                if span.parent is None and self._on_complete is not None:
                    span.end()
                    self._on_complete(span)


def default_behaviors(
    registry: HandlerRegistry,
    *,
    slow_request_ms: float | None = None,
    on_span_complete: Callable[[Span], None] | None = None,
) -> list[PipelineBehavior]:
    """The fixed, documented pipeline: Validation, Logging, Telemetry."""
    return [
        ValidationBehavior(registry),
        LoggingBehavior(slow_request_ms=slow_request_ms),
        TelemetryBehavior(on_complete=on_span_complete),
    ]
