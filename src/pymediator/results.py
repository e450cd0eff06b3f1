"""DispatchResult and DispatchError — the outcome envelope for outer layers.

The mediator itself raises; adapters such as the CLI convert each outcome
into a DispatchResult so that not-found, validation and handler errors map
to stable codes.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from pymediator.errors import HandlerNotFoundError, ValidationFailedError

NOT_FOUND = "NOT_FOUND"
VALIDATION_FAILED = "VALIDATION_FAILED"
TIMEOUT = "TIMEOUT"
HANDLER_ERROR = "HANDLER_ERROR"


class DispatchError(BaseModel):
    """Structured error payload within a DispatchResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class DispatchResult(BaseModel):
    """Outcome of one send, publish, or validate operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name (``"send"``, ``"publish"``, ``"validate"``).
        message: Type identity of the dispatched message.
        data: Operation-specific payload on success.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry spans, handler counts).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    error: DispatchError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(
        cls,
        op: str,
        message: str,
        data: dict[str, Any] | None = None,
        *,
        meta: dict[str, Any] | None = None,
    ) -> DispatchResult:
        return cls(ok=True, op=op, message=message, data=data or {}, meta=meta)

    @classmethod
    def failure(
        cls,
        op: str,
        message: str,
        code: str,
        error_message: str,
        detail: dict[str, Any] | None = None,
        *,
        meta: dict[str, Any] | None = None,
    ) -> DispatchResult:
        return cls(
            ok=False,
            op=op,
            message=message,
            error=DispatchError(code=code, message=error_message, detail=detail or {}),
            meta=meta,
        )

    @classmethod
    def from_exception(
        cls,
        op: str,
        message: str,
        exc: Exception,
        *,
        meta: dict[str, Any] | None = None,
    ) -> DispatchResult:
        """Map a dispatch exception onto its error code."""
        code: str
        detail: dict[str, Any]
        if isinstance(exc, HandlerNotFoundError):
            code, text, detail = NOT_FOUND, str(exc), {"identity": exc.identity}
        elif isinstance(exc, ValidationFailedError):
            failures = [f.model_dump(mode="json") for f in exc.failures]
            code, text, detail = VALIDATION_FAILED, "Validation failed", {"failures": failures}
        elif isinstance(exc, TimeoutError):
            code, text, detail = TIMEOUT, "Dispatch timed out", {}
        else:
            code = HANDLER_ERROR
            text = str(exc) or type(exc).__name__
            detail = {"type": type(exc).__name__}
        return cls.failure(op, message, code, text, detail, meta=meta)
