"""Extension layer — handler plugins via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file local plugins.
INVARIANT: Broken plugins are warnings; registration conflicts are errors.
"""

from pymediator.plugins.hookspecs import hookimpl, hookspec
from pymediator.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl", "hookspec"]
