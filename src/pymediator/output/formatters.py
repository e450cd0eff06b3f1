"""Rich/JSON output helpers.

The CLI renders a DispatchResult for humans (Rich tables and colors) or
machines (--json).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pymediator.output.renderers import render_result

if TYPE_CHECKING:
    from pymediator.results import DispatchResult


def format_result(
    result: DispatchResult,
    *,
    json_output: bool = False,
    verbose: bool = False,
) -> str:
    """Format a DispatchResult for display.

    Args:
        result: The dispatch result to format.
        json_output: If True, return JSON; otherwise human-readable text.
        verbose: Include error detail and the telemetry span tree.
    """
    if json_output:
        return result.model_dump_json(indent=2)
    return render_result(result, verbose=verbose)
