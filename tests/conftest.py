"""Shared pytest fixtures and test helpers for pymediator tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from pymediator.dispatch.registry import HandlerRegistry
from pymediator.dispatch.telemetry import disable_telemetry
from pymediator.features.users.feature import UsersFeature


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """Telemetry is a context variable; keep it from leaking between tests."""
    yield
    disable_telemetry()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root and package logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    package_logger = logging.getLogger("pymediator")
    package_level = package_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    package_logger.setLevel(package_level)


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty directory with no config override.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PYMEDIATOR_CONFIG", raising=False)


@pytest.fixture
def registry() -> HandlerRegistry:
    return HandlerRegistry()


@pytest.fixture
def users() -> UsersFeature:
    return UsersFeature()


def _parse_envelope(output: str) -> dict[str, Any]:
    start = output.index("{\n")
    end = output.rindex("\n}") + 2
    return json.loads(output[start:end])


@pytest.fixture
def parse_envelope() -> Callable[[str], dict[str, Any]]:
    """Extract the pretty-printed JSON result from CLI output.

    Log lines may precede the envelope on the shared stream; the envelope is
    always the last thing written.
    """
    return _parse_envelope
