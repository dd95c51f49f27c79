"""Request executor: one HTTP request per step, timed, never raising."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import aiohttp

from menuload._internal.config import DEFAULT_POOL_SIZE, DEFAULT_TIMEOUT
from menuload._internal.logging import get_logger
from menuload.engine.result import CANCELLED, ExecutionResult, ExecutionStatus

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from menuload._internal.config import HarnessConfig
    from menuload.dsl.step import Step
    from menuload.engine.target import Target

logger = get_logger("engine.executor")

_JSON_HEADERS = {"Content-Type": "application/json"}


def _noop_callback(result: ExecutionResult) -> None:
    """Default no-op result callback."""


def _describe(exc: BaseException) -> str:
    text = str(exc)
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


async def _cancel_pending(tasks: list[asyncio.Future[object]]) -> None:
    """Cancel unfinished helper tasks and wait for them to unwind."""
    pending = [t for t in tasks if not t.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


class RequestExecutor:
    """Issues step requests over one shared ``aiohttp.ClientSession``.

    The executor holds no per-iteration state, so a single instance can
    serve any number of concurrent iterations; its connection pool is
    shared by all of them.

    ``execute`` never raises for network problems. Connection errors,
    timeouts and cancellation all come back as FAILURE results so one bad
    step never aborts the rest of an iteration.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        pool_size: int = DEFAULT_POOL_SIZE,
        on_result: Callable[[ExecutionResult], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the executor.

        Args:
            timeout: Per-request timeout in seconds.
            pool_size: Maximum simultaneous pooled connections.
            on_result: Callback invoked with every ExecutionResult, before
                the step's post-request delay.
            clock: Monotonic clock used for latency, ``started_at`` and
                deadlines. A deadline is compared against this clock, and
                the time left before it is waited out on the event loop,
                so an injected clock must advance in seconds.
            sleep: Coroutine function used for post-step delays.
        """
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._pool_size = pool_size
        self._on_result = on_result or _noop_callback
        self._clock = clock
        self._sleep = sleep
        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_config(cls, config: HarnessConfig, **kwargs: object) -> RequestExecutor:
        """Build an executor using the timeout and pool size from ``config``."""
        return cls(
            timeout=config.request_timeout,
            pool_size=config.connection_pool_size,
            **kwargs,  # type: ignore[arg-type]
        )

    async def __aenter__(self) -> RequestExecutor:
        """Open the shared aiohttp session."""
        self._session = aiohttp.ClientSession(
            timeout=self._timeout,
            connector=aiohttp.TCPConnector(limit=self._pool_size),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Close the shared aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def execute(
        self,
        target: Target,
        step: Step,
        *,
        stop_event: asyncio.Event | None = None,
        deadline: float | None = None,
    ) -> ExecutionResult:
        """Send one step's request and report how it went.

        Args:
            target: Resolved base URL.
            step: The step to execute.
            stop_event: When set, an in-flight request is abandoned and the
                step reports ``error="cancelled"``.
            deadline: Absolute time on the executor's clock after which the
                request is abandoned the same way and the post-step delay
                ends early.

        Returns:
            The step's ExecutionResult. 4xx/5xx responses are SUCCESS.

        Raises:
            RuntimeError: If the executor is used outside of an async
                context manager.
        """
        if self._session is None:
            msg = "RequestExecutor must be used as an async context manager"
            raise RuntimeError(msg)

        url = target.url_for(step.path)
        started_at = self._clock()
        status_code: int | None = None
        error: str | None = None

        if self._stop_requested(stop_event, deadline):
            error = CANCELLED
        else:
            try:
                status_code = await self._send_until_stopped(step, url, stop_event, deadline)
                if status_code is None:
                    error = CANCELLED
            except Exception as exc:
                error = _describe(exc)

        latency = self._clock() - started_at
        result = ExecutionResult(
            step_name=step.name,
            method=step.method,
            url=url,
            status=ExecutionStatus.SUCCESS if error is None else ExecutionStatus.FAILURE,
            latency=latency,
            started_at=started_at,
            http_status_code=status_code,
            error=error,
        )
        if error is not None:
            logger.debug("Step %s to %s failed: %s", step.name, url, error)
        self._on_result(result)

        if step.delay_after > 0 and error != CANCELLED:
            await self._pause(step.delay_after, stop_event, deadline)

        return result

    def _stop_requested(self, stop_event: asyncio.Event | None, deadline: float | None) -> bool:
        if stop_event is not None and stop_event.is_set():
            return True
        return deadline is not None and self._clock() >= deadline

    async def _send(self, step: Step, url: str) -> int:
        assert self._session is not None
        headers = _JSON_HEADERS if step.body else None
        async with self._session.request(
            step.method,
            url,
            data=step.body or None,
            headers=headers,
        ) as resp:
            # Drain so the connection goes back to the pool; the body is not inspected.
            await resp.read()
            return resp.status

    async def _send_until_stopped(
        self,
        step: Step,
        url: str,
        stop_event: asyncio.Event | None,
        deadline: float | None,
    ) -> int | None:
        """Race the request against the stop signal and deadline.

        Returns:
            The HTTP status code, or None if the request was abandoned.
        """
        if stop_event is None and deadline is None:
            return await self._send(step, url)

        request = asyncio.ensure_future(self._send(step, url))
        waiters: list[asyncio.Future[object]] = [request]  # type: ignore[list-item]
        if stop_event is not None:
            waiters.append(asyncio.ensure_future(stop_event.wait()))
        timeout = self._remaining(deadline)

        try:
            await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        finally:
            await _cancel_pending(waiters)

        if request.cancelled():
            return None
        return request.result()

    def _remaining(self, deadline: float | None) -> float | None:
        """Seconds left before ``deadline`` on the executor's clock."""
        if deadline is None:
            return None
        return max(0.0, deadline - self._clock())

    async def _pause(
        self,
        seconds: float,
        stop_event: asyncio.Event | None,
        deadline: float | None,
    ) -> None:
        """Sleep after a step, cut short by the stop signal or the deadline."""
        if self._stop_requested(stop_event, deadline):
            return
        if stop_event is None and deadline is None:
            await self._sleep(seconds)
            return

        waiters: list[asyncio.Future[object]] = [asyncio.ensure_future(self._sleep(seconds))]
        if stop_event is not None:
            waiters.append(asyncio.ensure_future(stop_event.wait()))
        try:
            await asyncio.wait(
                waiters,
                timeout=self._remaining(deadline),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            await _cancel_pending(waiters)
