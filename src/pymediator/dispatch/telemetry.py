"""Telemetry primitives — Span, trace_span, open_span, @traced.

Near-zero overhead when disabled (single ContextVar.get per call).
When enabled, each dispatch builds a span tree with timing, status and
annotations. Spans live in ContextVars, so concurrent dispatches running
in separate tasks never see each other's spans.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Awaitable, Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

# ── Context variables ────────────────────────────────────────────────

_telemetry_enabled: ContextVar[bool] = ContextVar("_telemetry_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("_current_span", default=None)


# ── Span ─────────────────────────────────────────────────────────────


@dataclass
class Span:
    """Hierarchical timing span with status and free-form annotations."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None
    status: str = "unset"
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def end(self) -> None:
        if self.end_time is None:
            self.end_time = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def set_ok(self) -> None:
        self.status = "ok"

    def record_exception(self, exc: BaseException) -> None:
        self.status = "error"
        self.annotations["error.type"] = type(exc).__name__
        self.annotations["error.message"] = str(exc)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "duration_ms": round(self.duration_ms, 2),
            "status": self.status,
        }
        if self.annotations:
            result["annotations"] = self.annotations
        if self.children:
            result["children"] = [c.to_dict() for c in self.children]
        return result


def _log_span(span: Span) -> None:
    log = structlog.get_logger("pymediator.telemetry")
    log.debug(
        "span.complete",
        span_name=span.name,
        duration_ms=round(span.duration_ms, 2),
        status=span.status,
        children=len(span.children),
    )


# ── Context managers ─────────────────────────────────────────────────


def _new_span(name: str, parent: Span | None) -> Span:
    span = Span(name=name, parent=parent)
    if parent is not None:
        parent.children.append(span)
    return span


@contextmanager
def _activated(span: Span) -> Generator[Span]:
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Create a child span under the current span.

    Yields None when telemetry is disabled or no span is active.
    """
    parent = _current_span.get() if _telemetry_enabled.get() else None
    if parent is None:
        yield None
        return
    with _activated(_new_span(name, parent)) as span:
        yield span


@contextmanager
def open_span(name: str) -> Generator[Span | None]:
    """Open a span: a child of the active span, or a new root.

    Yields None when telemetry is disabled. The span is ended and the
    previous span restored on every exit path; status is left to the caller.
    """
    if not _telemetry_enabled.get():
        yield None
        return
    span = _new_span(name, _current_span.get())
    try:
        with _activated(span):
            yield span
    finally:
        _log_span(span)


# ── @traced decorator ────────────────────────────────────────────────

_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, Awaitable[_R]]) -> Callable[_P, Awaitable[_R]]:  # noqa: UP047
    """Decorator: record an async callable as a child span of the active one.

    No-op when telemetry is disabled or no dispatch span is active.
    """

    @functools.wraps(func)
    async def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        with trace_span(func.__qualname__) as span:
            try:
                result = await func(*args, **kwargs)
            except Exception as exc:
                if span is not None:
                    span.record_exception(exc)
                raise
            if span is not None:
                span.set_ok()
            return result

    return wrapper


# ── Public helpers ───────────────────────────────────────────────────


def enable_telemetry() -> None:
    """Enable span collection (called by AppContext at startup)."""
    _telemetry_enabled.set(True)


def disable_telemetry() -> None:
    """Disable span collection."""
    _telemetry_enabled.set(False)


def telemetry_enabled() -> bool:
    return _telemetry_enabled.get()


def get_current_span() -> Span | None:
    """Get the current active span (for manual annotation)."""
    if not _telemetry_enabled.get():
        return None
    return _current_span.get()
