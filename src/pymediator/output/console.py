"""Rich Console factory and theme for pymediator output.

Consoles render to a StringIO buffer so formatting stays a pure
``DispatchResult -> str`` function. In non-TTY environments (tests, pipes)
Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MEDIATOR_THEME = Theme(
    {
        "pm.ok": "bold green",
        "pm.error": "bold red",
        "pm.warning": "bold yellow",
        "pm.op": "bold cyan",
        "pm.key": "dim",
        "pm.identity": "bold blue",
        "pm.property": "bold",
        "pm.kind.request": "green",
        "pm.kind.notification": "magenta",
        "pm.kind.validator": "yellow",
    }
)

_KIND_STYLES: dict[str, str] = {
    "request": "pm.kind.request",
    "notification": "pm.kind.notification",
    "validator": "pm.kind.validator",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=MEDIATOR_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    return _KIND_STYLES.get(kind, "")
