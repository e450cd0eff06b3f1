"""Locate ``pymediator.toml``.

``PYMEDIATOR_CONFIG`` names the file outright; otherwise the search walks
from the start directory up to the filesystem root and the nearest match
wins. ``--config`` bypasses discovery entirely (see settings).
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "pymediator.toml"
CONFIG_ENV_VAR = "PYMEDIATOR_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), if any.

    A ``PYMEDIATOR_CONFIG`` value pointing at a missing file disables
    discovery instead of falling back to the walk.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
