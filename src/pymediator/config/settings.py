"""MediatorSettings: one frozen object built from CLI flags, env and TOML.

Sources, highest priority first:

1. Keyword arguments (the CLI flags Click parsed).
2. ``PYMEDIATOR_*`` environment variables; ``__`` reaches into sections,
   e.g. ``PYMEDIATOR_DISPATCH__SEND_TIMEOUT=5``.
3. ``pymediator.toml`` (``--config`` or walk-up discovery).
4. Defaults on the section models.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pymediator.config.discovery import find_config
from pymediator.config.models import DispatchConfig, PluginsConfig, TelemetryConfig

# TOML file for the settings object under construction; set only inside from_cli.
_active_toml: ContextVar[Path | None] = ContextVar("_active_toml", default=None)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by a parsed ``pymediator.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = _read_toml(toml_path) if toml_path is not None else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class MediatorSettings(BaseSettings):
    """Settings for the pymediator CLI and the mediator it builds.

    Attributes:
        root: Directory that relative paths resolve against: the parent of
            the loaded ``pymediator.toml``, else the working directory.
        config_path: The TOML file that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PYMEDIATOR_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    verbose: bool = False
    log_json: bool = False
    no_plugins: bool = False

    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _active_toml.get()),
        )

    @property
    def plugins_enabled(self) -> bool:
        """Entry-point and local discovery run unless config or ``--no-plugins`` say no."""
        return self.plugins.enabled and not self.no_plugins

    @property
    def local_plugin_dir(self) -> Path | None:
        local_dir = self.plugins.local_dir
        if local_dir is None or local_dir.is_absolute():
            return local_dir
        return self.root / local_dir

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> MediatorSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* must exist; without one, ``pymediator.toml``
        is discovered by walking up from *root* (or the working directory).

        Raises:
            click.ClickException: The config file is missing or not valid TOML.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            toml_path = find_config(root)

        if root is None:
            root = toml_path.parent if toml_path is not None else Path.cwd()

        token = _active_toml.set(toml_path)
        try:
            return cls(root=root, config_path=toml_path, **cli_flags)
        finally:
            _active_toml.reset(token)
