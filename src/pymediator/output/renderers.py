"""Operation-specific Rich renderers for DispatchResult.

Each renderer writes to a StringIO-backed Console; renderers are picked by
``result.op`` in :func:`render_result`, with a generic key-value fallback.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from pymediator.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from pymediator.results import DispatchResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: DispatchResult, *, verbose: bool = False) -> str:
    """Render a DispatchResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console, verbose=verbose)

    if verbose:
        _render_meta(console, result)

    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: DispatchResult) -> None:
    label = Text("OK", style="pm.ok")
    op = Text(f"  {result.op}", style="pm.op")
    target = Text(f"  {result.message}", style="pm.identity") if result.message else Text("")
    console.print(label, op, target, sep="")


def _field(console: Console, key: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        value = json.dumps(value, separators=(",", ":"), default=str)
    k = Text(f"  {key}: ", style="pm.key")
    console.print(k, Text(str(value)), sep="")


def _duration_style(duration_ms: float) -> str:
    if duration_ms > 1000:
        return "bold red"
    if duration_ms > 100:
        return "yellow"
    return "dim"


def _span_label(span_data: dict[str, Any]) -> Text:
    duration = float(span_data.get("duration_ms", 0.0))
    label = Text(f"{duration:.2f}ms", style=_duration_style(duration))
    label.append(f"  {span_data.get('name', '?')}")
    if span_data.get("status") == "error":
        label.append("  error", style="pm.error")
    annotations = span_data.get("annotations") or {}
    if annotations:
        pairs = ", ".join(f"{k}={v}" for k, v in annotations.items())
        label.append(f"  ({pairs})", style="dim")
    return label


def _add_span(parent: Tree, span_data: dict[str, Any]) -> None:
    node = parent.add(_span_label(span_data))
    for child in span_data.get("children", []):
        _add_span(node, child)


def _render_meta(console: Console, result: DispatchResult) -> None:
    """Print the meta block; a telemetry entry becomes a span tree."""
    if not result.meta:
        return

    tree = Tree(Text("meta", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _add_span(tree, value)
        else:
            tree.add(Text(f"{key}: {value}"))
    console.print()
    console.print(tree)


def _failure_table(failures: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Property", style="pm.property", no_wrap=True)
    table.add_column("Message")
    table.add_column("Value", style="dim")
    for failure in failures:
        table.add_row(
            str(failure.get("property_name", "")),
            str(failure.get("message", "")),
            repr(failure.get("attempted_value")),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: DispatchResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pm.error")
    op = Text(f"  {result.op}", style="pm.op")
    console.print(label, op, Text(f"  {result.message}: "), Text(msg), sep="")

    if err is None:
        return
    failures = err.detail.get("failures")
    if failures:
        console.print(_failure_table(failures))
    elif verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_handlers(result: DispatchResult, console: Console) -> None:
    entries = result.data.get("entries", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Kind", no_wrap=True)
    table.add_column("Message", style="pm.identity", no_wrap=True)
    table.add_column("Handler")
    table.add_column("Validator", style="dim")
    for entry in entries:
        kind = str(entry.get("kind", ""))
        table.add_row(
            Text(kind, style=style_for_kind(kind)),
            str(entry.get("identity", "")),
            str(entry.get("handler", "")),
            str(entry.get("validator") or ""),
        )
    console.print(table)

    summary = result.data.get("summary", {})
    if summary:
        console.print(
            Text(
                f"{summary.get('requests', 0)} request type(s), "
                f"{summary.get('notification_handlers', 0)} notification handler(s), "
                f"{summary.get('validators', 0)} validator(s)",
                style="dim",
            )
        )


def _render_send(result: DispatchResult, console: Console) -> None:
    _status_line(console, result)
    response = result.data.get("response")
    if isinstance(response, dict):
        for key, value in response.items():
            _field(console, key, value)
    else:
        _field(console, "response", response)


def _render_publish(result: DispatchResult, console: Console) -> None:
    _status_line(console, result)
    _field(console, "handlers", result.data.get("handlers", 0))


def _render_validate(result: DispatchResult, console: Console) -> None:
    _status_line(console, result)
    console.print(Text("  valid", style="pm.ok"))


def _render_generic(result: DispatchResult, console: Console) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "handlers": _render_handlers,
    "send": _render_send,
    "publish": _render_publish,
    "validate": _render_validate,
}
