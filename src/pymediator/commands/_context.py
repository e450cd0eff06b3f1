"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy plugin loading, registry population and
mediator construction, plus centralized result emission (stdout/stderr
routing + exit codes).
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

import anyio
import click
from pydantic import ValidationError

from pymediator.domain.messages import Message
from pymediator.errors import HandlerNotFoundError
from pymediator.output.formatters import format_result

if TYPE_CHECKING:
    from pymediator.config.settings import MediatorSettings
    from pymediator.dispatch.mediator import Mediator
    from pymediator.dispatch.registry import HandlerRegistry
    from pymediator.dispatch.telemetry import Span
    from pymediator.plugins.manager import PluginManager
    from pymediator.results import DispatchResult

_T = TypeVar("_T")
_M = TypeVar("_M", bound=Message)


def parse_payload(data: str) -> dict[str, Any]:
    """Decode ``--data`` into a JSON object or raise ``click.BadParameter``."""
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"invalid JSON: {exc.msg}", param_hint="--data") from exc
    if not isinstance(payload, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--data")
    return payload


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The plugin manager, registry and mediator are built lazily on first
    use so ``--help`` and ``--version`` never load plugins.
    """

    def __init__(self, settings: MediatorSettings) -> None:
        self.settings = settings
        self.last_span: Span | None = None
        self._plugins: PluginManager | None = None
        self._registry: HandlerRegistry | None = None
        self._mediator: Mediator | None = None

        from pymediator.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose or settings.telemetry.enabled:
            from pymediator.dispatch.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager with the built-in users plugin plus discovered plugins."""
        if self._plugins is None:
            from pymediator.plugins.builtins.users_plugin import UsersPlugin
            from pymediator.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.register_plugin(UsersPlugin(), name="users")
            if self.settings.plugins_enabled:
                self._plugins.discover_and_load(local_dir=self.settings.local_plugin_dir)
        return self._plugins

    @property
    def registry(self) -> HandlerRegistry:
        if self._registry is None:
            from pymediator.dispatch.registry import HandlerRegistry

            registry = HandlerRegistry()
            self.plugins.populate(registry)
            self._registry = registry
        return self._registry

    @property
    def mediator(self) -> Mediator:
        """The mediator (built on first access; seals the registry)."""
        if self._mediator is None:
            from pymediator.dispatch.behaviors import default_behaviors
            from pymediator.dispatch.mediator import Mediator

            dispatch = self.settings.dispatch
            behaviors = default_behaviors(
                self.registry,
                slow_request_ms=dispatch.slow_request_ms,
                on_span_complete=self._record_span,
            )
            self._mediator = Mediator(
                self.registry,
                behaviors,
                publish_strategy=dispatch.publish_strategy,
                send_timeout=dispatch.send_timeout,
            )
            self.plugins.notify_ready(self._mediator)
        return self._mediator

    def load_message(self, identity: str, payload: dict[str, Any], base: type[_M]) -> _M:
        """Build a *base* message instance for *identity* from a JSON payload.

        Raises:
            HandlerNotFoundError: *identity* names no registered message type.
            click.BadParameter: Wrong message kind or payload fails the model.
        """
        message_type = self.registry.resolve_message_type(identity)
        if message_type is None:
            raise HandlerNotFoundError(identity)
        if not issubclass(message_type, base):
            raise click.BadParameter(
                f"{identity} is not a {base.__name__.lower()}", param_hint="MESSAGE_TYPE"
            )
        try:
            return message_type.model_validate(payload)
        except ValidationError as exc:
            raise click.BadParameter(str(exc), param_hint="--data") from exc

    def run(self, func: Callable[..., Awaitable[_T]], *args: Any) -> _T:
        """Drive an async dispatch to completion on a fresh event loop."""
        return anyio.run(func, *args)

    def telemetry_meta(self) -> dict[str, Any] | None:
        """Span tree of the last dispatch, when verbose output wants it."""
        if not self.settings.verbose or self.last_span is None:
            return None
        return {"telemetry": self.last_span.to_dict()}

    def emit(self, result: DispatchResult) -> None:
        """Format and output a DispatchResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def _record_span(self, span: Span) -> None:
        self.last_span = span
