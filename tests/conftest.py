"""
Shared fixtures: a controllable clock and a fake Indodax upstream.
"""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from indodax_proxy.api.app import create_app
from indodax_proxy.config import Settings
from indodax_proxy.repositories import IndodaxClient, InMemoryCacheRepository
from indodax_proxy.services import MarketService

BASE_URL = "https://indodax.com"

DEPTH_BTC = {
    "buy": [[1_000_000_000, "0.5"], [999_000_000, "1.2"]],
    "sell": [[1_001_000_000, "0.3"]],
}

HISTORY_OK = {
    "s": "ok",
    "t": [1700000000, 1700000060],
    "o": [1.0, 2.0],
    "h": [1.5, 2.5],
    "l": [0.5, 1.5],
    "c": [1.2, 2.2],
    "v": [10, 20],
}

TICKER_ALL = {"tickers": {"btc_idr": {"last": "1000000000"}, "eth_idr": {"last": "50000000"}}}


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """Programmable Indodax API served through httpx.MockTransport.

    Each path holds a queue of replies; the last reply repeats once the
    queue is drained. A reply is one of:
        - a JSON-able body (served with 200)
        - a (status, body) tuple; str bodies are sent as text
        - an httpx exception class, raised for the request
    Unknown paths answer 404.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, list] = {}
        self.gate: asyncio.Event | None = None

    def add(self, path: str, *replies) -> "FakeUpstream":
        self.routes[path] = list(replies)
        return self

    def calls(self, path: str | None = None) -> int:
        if path is None:
            return len(self.requests)
        return sum(1 for request in self.requests if request.url.path == path)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()

        queue = self.routes.get(request.url.path)
        if not queue:
            return httpx.Response(404, json={"error": "invalid_pair"})
        reply = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(reply, type) and issubclass(reply, Exception):
            raise reply("simulated failure", request=request)
        status, body = reply if isinstance(reply, tuple) else (200, reply)
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def settings():
    return Settings(upstream_base_url=BASE_URL, upstream_domain="indodax.com")


@pytest.fixture
def cache(clock):
    return InMemoryCacheRepository.create(ttls={"ticker": 3, "history": 5, "depth": 2}, clock=clock)


@pytest.fixture
def indodax(upstream):
    return IndodaxClient(base_url=BASE_URL, verify_tls=False, transport=upstream.transport)


@pytest.fixture
def market(cache, indodax):
    return MarketService.create(cache=cache, client=indodax, single_flight=False, upstream_domain="indodax.com")


@pytest.fixture
def client(settings, upstream, clock):
    """Create a test client with the fake upstream and clock wired in."""
    app = create_app(settings, transport=upstream.transport, clock=clock)
    with TestClient(app) as test_client:
        yield test_client
