"""Minimal run driver built on asyncio tasks.

menuload leaves scheduling to the driver. This sketch keeps ``USERS``
virtual users looping over the paced menu scenario until the deadline,
sharing one executor. Run with:

    MENULOAD_BASE_URL=http://localhost:3000 python examples/asyncio_driver.py
"""

from __future__ import annotations

import asyncio
import time

from menuload import IterationRunner, RequestExecutor, get_scenario, load_config, resolve

USERS = 20
DURATION_SECONDS = 30.0


async def virtual_user(runner: IterationRunner, stop: asyncio.Event, deadline: float) -> list[bool]:
    outcomes: list[bool] = []
    while not stop.is_set() and time.monotonic() < deadline:
        results = await runner.run(stop_event=stop, deadline=deadline)
        outcomes.extend(r.ok for r in results if not r.cancelled)
    return outcomes


async def main() -> None:
    config = load_config()
    target = resolve(config)
    scenario = get_scenario("menu-browse-paced")
    stop = asyncio.Event()
    deadline = time.monotonic() + DURATION_SECONDS

    async with RequestExecutor.from_config(config) as executor:
        runner = IterationRunner(target, scenario, executor)
        users = [virtual_user(runner, stop, deadline) for _ in range(USERS)]
        per_user = await asyncio.gather(*users)

    outcomes = [ok for user in per_user for ok in user]
    failed = outcomes.count(False)
    print(f"{len(outcomes)} requests, {failed} failed")  # noqa: T201


if __name__ == "__main__":
    asyncio.run(main())
