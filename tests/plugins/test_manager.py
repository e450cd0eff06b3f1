"""Tests for PluginManager: registration hooks, local discovery, failure policy."""

from __future__ import annotations

import logging
from pathlib import Path

import anyio
import pytest

from pymediator.dispatch.decorators import request_handler
from pymediator.dispatch.mediator import Mediator
from pymediator.dispatch.registry import HandlerRegistry
from pymediator.domain.messages import Request
from pymediator.errors import DuplicateHandlerError
from pymediator.features.users import CreateUserCommand
from pymediator.plugins import hookimpl
from pymediator.plugins.builtins.users_plugin import UsersPlugin
from pymediator.plugins.manager import PluginManager


class Echo(Request[str]):
    text: str


@request_handler(Echo)
class EchoHandler:
    async def handle_async(self, request: Echo) -> str:
        return request.text


class EchoPlugin:
    def __init__(self) -> None:
        self.ready: list[Mediator] = []

    @hookimpl
    def register_handlers(self, registry: HandlerRegistry) -> None:
        registry.register(EchoHandler())

    @hookimpl
    def mediator_ready(self, mediator: Mediator) -> None:
        self.ready.append(mediator)


class BrokenPlugin:
    @hookimpl
    def register_handlers(self, registry: HandlerRegistry) -> None:
        raise RuntimeError("plugin exploded")

    @hookimpl
    def mediator_ready(self, mediator: Mediator) -> None:
        raise RuntimeError("also exploded")


class HalfwayPlugin:
    @hookimpl
    def register_handlers(self, registry: HandlerRegistry) -> None:
        registry.register(EchoHandler())
        raise RuntimeError("failed after registering")


_LOCAL_PLUGIN_SRC = """\
import pluggy

from pymediator.dispatch.decorators import request_handler
from pymediator.domain.messages import Request

hookimpl = pluggy.HookimplMarker("pymediator")


class Shout(Request[str]):
    text: str


@request_handler(Shout)
class ShoutHandler:
    async def handle_async(self, request):
        return request.text.upper()


class ShoutPlugin:
    @hookimpl
    def register_handlers(self, registry):
        registry.register(ShoutHandler())
"""

_SYNTAX_ERROR_SRC = """\
def broken(
"""

_NO_HOOKS_SRC = """\
class PlainClass:
    def hello(self) -> str:
        return "world"
"""


class TestPopulate:
    def test_plugin_handlers_registered(self, registry: HandlerRegistry) -> None:
        pm = PluginManager()
        pm.register_plugin(EchoPlugin(), name="echo")
        assert pm.populate(registry) == ["echo"]
        assert isinstance(registry.resolve("Echo"), EchoHandler)

    def test_broken_plugin_is_a_warning(
        self, registry: HandlerRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(BrokenPlugin(), name="broken")
        pm.register_plugin(EchoPlugin(), name="echo")
        with caplog.at_level(logging.WARNING, logger="pymediator"):
            populated = pm.populate(registry)
        assert populated == ["echo"]
        assert "broken" in caplog.text

    def test_failed_plugin_registrations_are_rolled_back(
        self, registry: HandlerRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(HalfwayPlugin(), name="halfway")
        with caplog.at_level(logging.WARNING, logger="pymediator"):
            assert pm.populate(registry) == []
        assert registry.resolve("Echo") is None
        assert registry.resolve_message_type("Echo") is None
        assert "halfway" in caplog.text

    def test_rollback_leaves_room_for_a_later_plugin(self, registry: HandlerRegistry) -> None:
        pm = PluginManager()
        pm.register_plugin(HalfwayPlugin(), name="halfway")
        pm.register_plugin(EchoPlugin(), name="echo")
        assert pm.populate(registry) == ["echo"]
        assert isinstance(registry.resolve("Echo"), EchoHandler)

    def test_duplicate_registration_is_fatal(self, registry: HandlerRegistry) -> None:
        pm = PluginManager()
        pm.register_plugin(EchoPlugin(), name="echo-1")
        pm.register_plugin(EchoPlugin(), name="echo-2")
        with pytest.raises(DuplicateHandlerError):
            pm.populate(registry)

    def test_notify_ready(self, registry: HandlerRegistry) -> None:
        pm = PluginManager()
        plugin = EchoPlugin()
        pm.register_plugin(plugin, name="echo")
        pm.register_plugin(BrokenPlugin(), name="broken")
        pm.populate(registry)
        mediator = Mediator(registry)
        pm.notify_ready(mediator)
        assert plugin.ready == [mediator]

    def test_discover_without_entry_points(self) -> None:
        pm = PluginManager()
        assert pm.discover_and_load() == []
        assert pm.is_loaded


class TestLocalDiscovery:
    def test_loads_single_file_plugin(self, tmp_path: Path, registry: HandlerRegistry) -> None:
        (tmp_path / "shout.py").write_text(_LOCAL_PLUGIN_SRC)
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path)
        assert "pymediator_local_plugin_shout" in names
        pm.populate(registry)
        mediator = Mediator(registry)
        message_type = registry.resolve_message_type("Shout")
        assert message_type is not None
        assert anyio.run(mediator.send, message_type(text="hi")) == "HI"

    def test_broken_and_plain_files_are_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "broken.py").write_text(_SYNTAX_ERROR_SRC)
        (tmp_path / "plain.py").write_text(_NO_HOOKS_SRC)
        (tmp_path / "_private.py").write_text(_LOCAL_PLUGIN_SRC)
        pm = PluginManager()
        assert pm.discover_and_load(local_dir=tmp_path) == []

    def test_missing_directory(self, tmp_path: Path) -> None:
        pm = PluginManager()
        assert pm.discover_and_load(local_dir=tmp_path / "nope") == []


class TestUsersPlugin:
    def test_registers_users_feature(self, registry: HandlerRegistry) -> None:
        pm = PluginManager()
        pm.register_plugin(UsersPlugin(), name="users")
        pm.populate(registry)
        assert registry.summary() == {
            "requests": 5,
            "notifications": 3,
            "notification_handlers": 4,
            "validators": 5,
        }

    def test_binds_feature_on_ready(self, registry: HandlerRegistry) -> None:
        plugin = UsersPlugin()
        pm = PluginManager()
        pm.register_plugin(plugin, name="users")
        pm.populate(registry)
        mediator = Mediator(registry)
        pm.notify_ready(mediator)
        command = CreateUserCommand(email="ada@example.com", password="Passw0rdX")
        assert anyio.run(mediator.send, command) == 1
        assert plugin.feature.audit_log == ["created:1"]
