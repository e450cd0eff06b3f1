"""Tests for PipelineBuilder composition order."""

from __future__ import annotations

from typing import Any

import anyio

from pymediator.dispatch.contracts import NextStep, PipelineBehavior
from pymediator.dispatch.pipeline import PipelineBuilder


class Recorder(PipelineBehavior):
    def __init__(self, name: str, log: list[str]) -> None:
        self.name = name
        self._log = log

    async def handle(self, request: Any, next_: NextStep) -> Any:
        self._log.append(f"{self.name}:enter")
        response = await next_()
        self._log.append(f"{self.name}:exit")
        return response


class ShortCircuit(PipelineBehavior):
    name = "short"

    async def handle(self, request: Any, next_: NextStep) -> Any:
        return "cached"


class TestPipelineBuilder:
    def test_first_behavior_is_outermost(self) -> None:
        log: list[str] = []
        builder = PipelineBuilder([Recorder("a", log), Recorder("b", log)])

        async def terminal() -> str:
            log.append("handler")
            return "done"

        result = anyio.run(builder.build("request", terminal))
        assert result == "done"
        assert log == ["a:enter", "b:enter", "handler", "b:exit", "a:exit"]

    def test_no_behaviors_runs_terminal(self) -> None:
        async def terminal() -> int:
            return 7

        assert anyio.run(PipelineBuilder([]).build("request", terminal)) == 7

    def test_behavior_may_skip_next(self) -> None:
        called = False

        async def terminal() -> str:
            nonlocal called
            called = True
            return "fresh"

        assert anyio.run(PipelineBuilder([ShortCircuit()]).build("r", terminal)) == "cached"
        assert called is False

    def test_behaviors_are_frozen_tuple(self) -> None:
        behaviors = [ShortCircuit()]
        builder = PipelineBuilder(behaviors)
        behaviors.append(ShortCircuit())
        assert len(builder.behaviors) == 1
