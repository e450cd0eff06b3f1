"""Plugin discovery, loading and handler population.

Sources, in registration order:

1. Built-ins registered directly (the users feature).
2. Distributions exposing the ``pymediator.plugins`` entry-point group.
3. Single-file plugins in a local directory (``[plugins] local_dir``).

Every plugin may implement ``register_handlers`` and ``mediator_ready``.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any

import pluggy

from pymediator.errors import MediatorError
from pymediator.plugins.hookspecs import PymediatorHookSpec

if TYPE_CHECKING:
    from pymediator.dispatch.mediator import Mediator
    from pymediator.dispatch.registry import HandlerRegistry

PROJECT_NAME = "pymediator"
ENTRY_POINT_GROUP = "pymediator.plugins"
LOCAL_MODULE_PREFIX = "pymediator_local_plugin_"

logger = logging.getLogger(__name__)


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` for handler plugins."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PymediatorHookSpec)
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        """Whether :meth:`discover_and_load` has run."""
        return self._loaded

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Registered plugin: %s", plugin_name)

    def list_plugin_names(self) -> list[str]:
        """Names of registered plugins in registration order."""
        return [name for name, _plugin in self._plugins()]

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then single-file plugins from *local_dir*.

        A plugin that fails to import or instantiate is logged and skipped.
        Returns the names of all registered plugins.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_class_plugins()
        if local_dir is not None:
            self._load_local_dir(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    # -- hook dispatch -------------------------------------------------

    def populate(self, registry: HandlerRegistry) -> list[str]:
        """Run every plugin's ``register_handlers`` against *registry*.

        :class:`~pymediator.errors.MediatorError` (duplicate handler, sealed
        registry) propagates. Any other exception skips that plugin with a
        warning, and whatever it registered before failing is rolled back.
        Returns the names of plugins that registered cleanly.
        """
        populated: list[str] = []
        for plugin_name, plugin in self._plugins():
            hook = getattr(plugin, "register_handlers", None)
            if hook is None:
                continue
            checkpoint = registry.snapshot()
            try:
                hook(registry=registry)
            except MediatorError:
                raise
            except Exception:
                registry.restore(checkpoint)
                logger.warning(
                    "Failed to register handlers from plugin %s", plugin_name, exc_info=True
                )
            else:
                populated.append(plugin_name)
        return populated

    def notify_ready(self, mediator: Mediator) -> None:
        """Hand the finished mediator to every ``mediator_ready`` hook."""
        for plugin_name, plugin in self._plugins():
            hook = getattr(plugin, "mediator_ready", None)
            if hook is None:
                continue
            try:
                hook(mediator=mediator)
            except Exception:
                logger.warning("Plugin %s failed in mediator_ready", plugin_name, exc_info=True)

    # -- discovery internals -------------------------------------------

    def _plugins(self) -> Iterator[tuple[str, Any]]:
        for name, plugin in self._pm.list_name_plugin():
            if plugin is not None:
                yield name, plugin

    def _instantiate_class_plugins(self) -> None:
        """Swap entry points that name a class for an instance of it."""
        for name, plugin in list(self._plugins()):
            if not (inspect.isclass(plugin) and _has_hook_impls(plugin)):
                continue
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Failed to instantiate entry-point plugin %s", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)

    def _load_local_dir(self, local_dir: Path) -> None:
        if not local_dir.is_dir():
            logger.debug("Local plugin directory %s does not exist", local_dir)
            return
        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module = _import_file(py_file, LOCAL_MODULE_PREFIX + py_file.stem)
            if module is None:
                continue
            for plugin_cls in _plugin_classes(module):
                try:
                    self.register_plugin(plugin_cls(), name=module.__name__)
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        plugin_cls.__name__,
                        py_file,
                        exc_info=True,
                    )


def _import_file(py_file: Path, module_name: str) -> ModuleType | None:
    """Execute *py_file* as module *module_name*; ``None`` on any failure."""
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        logger.warning("Could not create module spec for %s", py_file)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
        sys.modules.pop(module_name, None)
        return None
    return module


def _plugin_classes(module: ModuleType) -> Iterator[type]:
    """Classes defined in *module* (not imported into it) that carry hookimpls."""
    for _name, obj in inspect.getmembers(module, inspect.isclass):
        if obj.__module__ == module.__name__ and _has_hook_impls(obj):
            yield obj


def _has_hook_impls(cls: type) -> bool:
    # HookimplMarker("pymediator") tags decorated functions with ``pymediator_impl``.
    marker = f"{PROJECT_NAME}_impl"
    for name in dir(cls):
        if name.startswith("_"):
            continue
        member = getattr(cls, name, None)
        if callable(member) and getattr(member, marker, None) is not None:
            return True
    return False
