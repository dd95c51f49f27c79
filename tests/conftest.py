"""Shared test fixtures for the menuload test suite."""

from __future__ import annotations

import asyncio
import socket
import threading
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pytest
from aiohttp import web

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator


# =============================================================================
# Pytest configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    for item in items:
        test_path = str(item.fspath)
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path:
            item.add_marker(pytest.mark.e2e)


# =============================================================================
# Network utilities
# =============================================================================


def _get_free_port() -> int:
    """Find an available port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


@pytest.fixture
def refused_url() -> str:
    """Base URL of a port with nothing listening on it."""
    return f"http://127.0.0.1:{_get_free_port()}"


# =============================================================================
# Mock menu service
# =============================================================================


@dataclass
class RecordedRequest:
    """One request as seen by the mock menu service."""

    method: str
    path: str
    content_type: str | None
    body: bytes
    received_at: float


@dataclass
class MockMenuService:
    """Handle returned by the menu service fixtures."""

    base_url: str
    requests: list[RecordedRequest] = field(default_factory=list)


def _create_menu_app(requests: list[RecordedRequest]) -> web.Application:
    """Build a stand-in for the menu service that records every request."""

    @web.middleware
    async def record(request: web.Request, handler):  # type: ignore[no-untyped-def]
        body = await request.read()
        requests.append(
            RecordedRequest(
                method=request.method,
                path=request.path,
                content_type=request.headers.get("Content-Type"),
                body=body,
                received_at=time.monotonic(),
            )
        )
        return await handler(request)

    async def graphql(request: web.Request) -> web.Response:
        return web.json_response({"data": {"locations": []}})

    async def refresh(request: web.Request) -> web.Response:
        return web.Response(text="OK", status=201)

    async def echo(request: web.Request) -> web.Response:
        return web.json_response({"method": request.method, "path": request.path})

    async def error(request: web.Request) -> web.Response:
        status = int(request.query.get("status", "500"))
        return web.json_response({"error": True}, status=status)

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(float(request.query.get("delay", "5")))
        return web.json_response({"slow": True})

    app = web.Application(middlewares=[record])
    app.router.add_route("*", "/graphql", graphql)
    app.router.add_put("/request_refresh", refresh)
    app.router.add_route("*", "/echo{path:.*}", echo)
    app.router.add_route("*", "/error", error)
    app.router.add_route("*", "/slow", slow)
    return app


@pytest.fixture
async def menu_service() -> AsyncIterator[MockMenuService]:
    """Mock menu service running on the test's event loop."""
    service = MockMenuService(base_url="")
    runner = web.AppRunner(_create_menu_app(service.requests), handler_cancellation=True)
    await runner.setup()
    port = _get_free_port()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    service.base_url = f"http://127.0.0.1:{port}"
    yield service
    await runner.cleanup()


@pytest.fixture
def sync_menu_service() -> Iterator[MockMenuService]:
    """Mock menu service in a background thread, for code that calls asyncio.run."""
    service = MockMenuService(base_url="")
    port = _get_free_port()
    started = threading.Event()
    loop_holder: list[asyncio.AbstractEventLoop] = []

    def _thread_target() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        runner = web.AppRunner(_create_menu_app(service.requests), handler_cancellation=True)
        loop.run_until_complete(runner.setup())
        site = web.TCPSite(runner, "127.0.0.1", port)
        loop.run_until_complete(site.start())
        loop_holder.append(loop)
        started.set()
        loop.run_forever()
        loop.run_until_complete(runner.cleanup())
        loop.close()

    thread = threading.Thread(target=_thread_target, daemon=True)
    thread.start()
    started.wait(timeout=5.0)
    service.base_url = f"http://127.0.0.1:{port}"

    yield service

    if loop_holder:
        loop_holder[0].call_soon_threadsafe(loop_holder[0].stop)
    thread.join(timeout=5.0)


# =============================================================================
# Controllable time
# =============================================================================


class FakeClock:
    """Clock that only advances when ``sleep`` is awaited."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
