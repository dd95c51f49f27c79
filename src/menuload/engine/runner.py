"""Scenario runner: one sequential pass over a scenario's steps."""

from __future__ import annotations

from typing import TYPE_CHECKING

from menuload._internal.config import load_config
from menuload._internal.logging import get_logger
from menuload.engine.executor import RequestExecutor

if TYPE_CHECKING:
    import asyncio

    from menuload.dsl.scenario import Scenario
    from menuload.engine.result import ExecutionResult
    from menuload.engine.target import Target

logger = get_logger("engine.runner")


async def _run_steps(
    executor: RequestExecutor,
    target: Target,
    scenario: Scenario,
    stop_event: asyncio.Event | None,
    deadline: float | None,
) -> list[ExecutionResult]:
    results: list[ExecutionResult] = []
    for step in scenario.steps():
        result = await executor.execute(target, step, stop_event=stop_event, deadline=deadline)
        results.append(result)

    failures = sum(1 for r in results if not r.ok)
    logger.debug(
        "Iteration of %s finished: steps=%d, failures=%d",
        scenario.name,
        len(results),
        failures,
    )
    return results


async def run_iteration(
    target: Target,
    scenario: Scenario,
    *,
    executor: RequestExecutor | None = None,
    stop_event: asyncio.Event | None = None,
    deadline: float | None = None,
) -> list[ExecutionResult]:
    """Run every step of ``scenario`` once, strictly in order.

    A failed step never short-circuits the iteration: the result list
    always has exactly one entry per step, in step order.

    Args:
        target: Resolved base URL.
        scenario: The scenario to execute.
        executor: Shared executor. When omitted, a temporary executor is
            opened from the environment configuration for this call only.
        stop_event: Cancellation signal passed to every step.
        deadline: Absolute deadline on the executor's clock.

    Returns:
        One ExecutionResult per step, in step order.
    """
    if executor is not None:
        return await _run_steps(executor, target, scenario, stop_event, deadline)

    async with RequestExecutor.from_config(load_config()) as owned:
        return await _run_steps(owned, target, scenario, stop_event, deadline)


class IterationRunner:
    """Binds a target, scenario and shared executor for a run driver.

    A driver creates one instance per run and awaits ``run()`` once per
    virtual-user iteration, from as many tasks as it likes.

    Attributes:
        target: Resolved base URL.
        scenario: The scenario being executed.
    """

    def __init__(self, target: Target, scenario: Scenario, executor: RequestExecutor) -> None:
        self.target = target
        self.scenario = scenario
        self._executor = executor

    async def run(
        self,
        *,
        stop_event: asyncio.Event | None = None,
        deadline: float | None = None,
    ) -> list[ExecutionResult]:
        """Run one iteration. See ``run_iteration``."""
        return await run_iteration(
            self.target,
            self.scenario,
            executor=self._executor,
            stop_event=stop_event,
            deadline=deadline,
        )
