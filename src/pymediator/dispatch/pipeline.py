"""PipelineBuilder — fold behaviors right-to-left around a terminal step.

For behaviors ``[A, B, C]`` and terminal ``h`` the built callable runs
``A(B(C(h)))``: A enters first and exits last.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pymediator.dispatch.contracts import NextStep, PipelineBehavior


class PipelineBuilder:
    """Composes an ordered, fixed list of behaviors into one callable."""

    def __init__(self, behaviors: Sequence[PipelineBehavior]) -> None:
        self._behaviors = tuple(behaviors)

    @property
    def behaviors(self) -> tuple[PipelineBehavior, ...]:
        return self._behaviors

    def build(self, request: Any, terminal: NextStep) -> NextStep:
        """Return the outermost step for one dispatch of *request*."""
        step = terminal
        for behavior in reversed(self._behaviors):
            step = _bind(behavior, request, step)
        return step


def _bind(behavior: PipelineBehavior, request: Any, next_: NextStep) -> NextStep:
    async def step() -> Any:
        return await behavior.handle(request, next_)

    return step
