"""Tests for the built-in validation, logging and telemetry behaviors."""

from __future__ import annotations

import anyio
import pytest
from structlog.testing import capture_logs

from pymediator.dispatch.behaviors import (
    LoggingBehavior,
    TelemetryBehavior,
    ValidationBehavior,
    default_behaviors,
)
from pymediator.dispatch.registry import HandlerRegistry
from pymediator.dispatch.telemetry import Span, enable_telemetry
from pymediator.domain.messages import Request
from pymediator.errors import ValidationFailedError
from pymediator.validation.validator import AbstractValidator


class Greet(Request[str]):
    name: str = ""


class GreetValidator(AbstractValidator[Greet]):
    def __init__(self) -> None:
        super().__init__()
        self.rule_for("name").not_empty().with_message("Name is required")


async def _ok() -> str:
    return "hello"


async def _boom() -> str:
    raise RuntimeError("handler failed")


class TestValidationBehavior:
    def test_passes_through_without_validator(self, registry: HandlerRegistry) -> None:
        behavior = ValidationBehavior(registry)
        assert anyio.run(behavior.handle, Greet(), _ok) == "hello"

    def test_valid_request_continues(self, registry: HandlerRegistry) -> None:
        registry.register_validator(Greet, GreetValidator())
        behavior = ValidationBehavior(registry)
        assert anyio.run(behavior.handle, Greet(name="Ada"), _ok) == "hello"

    def test_invalid_request_short_circuits(self, registry: HandlerRegistry) -> None:
        registry.register_validator(Greet, GreetValidator())
        behavior = ValidationBehavior(registry)
        called = False

        async def handler() -> str:
            nonlocal called
            called = True
            return "hello"

        with pytest.raises(ValidationFailedError) as exc_info:
            anyio.run(behavior.handle, Greet(name=""), handler)
        assert called is False
        assert [f.message for f in exc_info.value.failures] == ["Name is required"]


class TestLoggingBehavior:
    def test_logs_completion(self) -> None:
        with capture_logs() as logs:
            behavior = LoggingBehavior()
            assert anyio.run(behavior.handle, Greet(), _ok) == "hello"
        assert logs[-1]["event"] == "dispatch.complete"
        assert logs[-1]["request"] == "Greet"
        assert logs[-1]["ok"] is True
        assert logs[-1]["log_level"] == "info"

    def test_logs_failure_and_reraises(self) -> None:
        with capture_logs() as logs:
            behavior = LoggingBehavior()
            with pytest.raises(RuntimeError, match="handler failed"):
                anyio.run(behavior.handle, Greet(), _boom)
        assert logs[-1]["event"] == "dispatch.failed"
        assert logs[-1]["log_level"] == "error"
        assert logs[-1]["error_type"] == "RuntimeError"

    def test_logs_slow_request(self) -> None:
        async def slow() -> str:
            await anyio.sleep(0.02)
            return "late"

        with capture_logs() as logs:
            behavior = LoggingBehavior(slow_request_ms=1)
            anyio.run(behavior.handle, Greet(), slow)
        assert logs[-1]["event"] == "dispatch.slow"
        assert logs[-1]["log_level"] == "warning"


class TestTelemetryBehavior:
    def test_disabled_is_transparent(self) -> None:
        completed: list[Span] = []
        behavior = TelemetryBehavior(on_complete=completed.append)
        assert anyio.run(behavior.handle, Greet(), _ok) == "hello"
        assert completed == []

    def test_root_span_reported(self) -> None:
        enable_telemetry()
        completed: list[Span] = []
        behavior = TelemetryBehavior(on_complete=completed.append)
        anyio.run(behavior.handle, Greet(), _ok)
        (span,) = completed
        assert span.name == "send:Greet"
        assert span.ok
        assert span.annotations["request"] == "Greet"
        assert span.end_time is not None

    def test_error_span(self) -> None:
        enable_telemetry()
        completed: list[Span] = []
        behavior = TelemetryBehavior(on_complete=completed.append)
        with pytest.raises(RuntimeError):
            anyio.run(behavior.handle, Greet(), _boom)
        assert completed[0].status == "error"
        assert completed[0].annotations["error.type"] == "RuntimeError"


class TestDefaultBehaviors:
    def test_fixed_order(self, registry: HandlerRegistry) -> None:
        names = [b.name for b in default_behaviors(registry)]
        assert names == ["validation", "logging", "telemetry"]
