"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pymediator.toml only contains
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from pymediator.domain.types import PublishStrategy


class DispatchConfig(BaseModel):
    """[dispatch] section."""

    model_config = {"frozen": True}

    publish_strategy: PublishStrategy = PublishStrategy.SEQUENTIAL
    send_timeout: float | None = Field(default=None, gt=0)
    slow_request_ms: float | None = Field(default=None, ge=0)


class TelemetryConfig(BaseModel):
    """[telemetry] section."""

    model_config = {"frozen": True}

    enabled: bool = False


class PluginsConfig(BaseModel):
    """[plugins] section.

    ``enabled`` gates entry-point and local discovery only; the built-in
    users plugin is always registered.
    """

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: Path | None = None
