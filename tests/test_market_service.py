"""
Tests for the read-through orchestration in MarketService.
"""

import asyncio
import logging

import httpx
import pytest

from conftest import DEPTH_BTC, HISTORY_OK, TICKER_ALL
from indodax_proxy.exceptions import (
    BadRequest,
    ForbiddenTarget,
    InvalidUpstreamShape,
    UpstreamClientError,
    UpstreamServerError,
)
from indodax_proxy.services import MarketService, empty_history, empty_order_book

pytestmark = pytest.mark.anyio


async def _settle() -> None:
    """Let every scheduled task run up to the upstream gate."""
    for _ in range(10):
        await asyncio.sleep(0)


async def test_depth_normalizes_and_caches(market, upstream, cache, clock):
    upstream.add("/api/depth/btc_idr", DEPTH_BTC)

    first = await market.depth("BTCIDR")
    clock.advance(1.5)
    second = await market.depth("btcidr")

    assert first == second == DEPTH_BTC
    assert upstream.calls("/api/depth/btc_idr") == 1
    assert cache.keys() == ["depth_btc_idr"]


async def test_depth_refetches_after_ttl(market, upstream, clock):
    upstream.add("/api/depth/btc_idr", DEPTH_BTC)

    await market.depth("btc_idr")
    clock.advance(2)
    await market.depth("btc_idr")

    assert upstream.calls() == 2


async def test_depth_falls_back_to_empty_book(market, upstream, cache):
    upstream.add("/api/depth/btc_idr", (500, {"error": "down"}))

    assert await market.depth("btcidr") == empty_order_book()
    assert cache.size == 0


async def test_depth_rejects_malformed_book(market, upstream, cache):
    upstream.add("/api/depth/xyz_idr", {"error": "invalid_pair"})

    assert await market.depth("XYZIDR") == {"buy": [], "sell": []}
    assert cache.size == 0


async def test_history_requires_symbol_and_resolution(market, upstream):
    with pytest.raises(BadRequest, match="symbol and resolution"):
        await market.history(None, "1")
    with pytest.raises(BadRequest):
        await market.history("btcidr", "")

    assert upstream.calls() == 0


async def test_history_rejects_non_integer_bounds(market, upstream):
    with pytest.raises(BadRequest, match="from"):
        await market.history("btcidr", "1", "yesterday", "1700000600")

    assert upstream.calls() == 0


async def test_history_ok_is_cached(market, upstream, cache, clock):
    upstream.add("/api/tradingview/history", HISTORY_OK)

    data = await market.history("BTCIDR", "1", "1700000000", "1700000600")
    clock.advance(4.9)
    again = await market.history("btc_idr", "1", 1700000000, 1700000600)

    assert data == again == HISTORY_OK
    assert upstream.calls() == 1
    assert cache.keys() == ["history_btc_idr_1_1700000000_1700000600"]
    params = upstream.requests[0].url.params
    assert params["symbol"] == "btc_idr"
    assert params["resolution"] == "1"
    assert params["from"] == "1700000000"
    assert params["to"] == "1700000600"


async def test_history_not_ok_returns_no_data(market, upstream, cache):
    upstream.add("/api/tradingview/history", {"s": "error", "errmsg": "unknown symbol"})

    data = await market.history("FOOIDR", "15", "1", "2")

    assert data == empty_history()
    assert data["s"] == "no_data"
    assert cache.size == 0


async def test_history_hard_failure_propagates(market, upstream):
    upstream.add("/api/tradingview/history", (400, {"error": "bad"}))

    with pytest.raises(UpstreamClientError):
        await market.history("btcidr", "1")


async def test_ticker_all_retry_is_invisible(market, upstream, cache):
    upstream.add("/api/ticker_all", httpx.ReadTimeout, TICKER_ALL)

    assert await market.ticker_all() == TICKER_ALL
    assert await market.ticker_all() == TICKER_ALL
    assert upstream.calls() == 2
    assert cache.peek("ticker_all").payload == TICKER_ALL


async def test_ticker_all_rejects_non_object(market, upstream, cache):
    upstream.add("/api/ticker_all", ["not", "an", "object"])

    with pytest.raises(InvalidUpstreamShape):
        await market.ticker_all()
    assert cache.size == 0


async def test_summaries_share_ticker_ttl(market, upstream, clock):
    upstream.add("/api/summaries", {"tickers": {}, "prices_24h": {}})

    await market.summaries()
    clock.advance(2.5)
    await market.summaries()
    clock.advance(1.0)
    await market.summaries()

    assert upstream.calls() == 2


async def test_summaries_failure_propagates(market, upstream):
    upstream.add("/api/summaries", (503, {}))

    with pytest.raises(UpstreamServerError):
        await market.summaries()


async def test_single_ticker_is_never_cached(market, upstream, cache):
    upstream.add("/api/ticker/eth_idr", {"ticker": {"last": "50000000"}})

    await market.ticker("ETHIDR")
    await market.ticker("eth_idr")

    assert upstream.calls("/api/ticker/eth_idr") == 2
    assert cache.size == 0


async def test_proxy_requires_url(market):
    with pytest.raises(BadRequest, match="URL parameter required"):
        await market.proxy("")


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/api/ticker_all",
        "https://indodax.com.evil.example/api",
        "https://evil.example/?next=indodax.com",
        "ftp://indodax.com/api/ticker_all",
        "indodax.com/api/ticker_all",
    ],
)
async def test_proxy_rejects_foreign_targets(market, upstream, url):
    with pytest.raises(ForbiddenTarget):
        await market.proxy(url)

    assert upstream.calls() == 0


async def test_proxy_decodes_and_fetches(market, upstream):
    upstream.add("/api/pairs", [{"symbol": "BTCIDR"}])

    data = await market.proxy("https%3A%2F%2Findodax.com%2Fapi%2Fpairs")

    assert data == [{"symbol": "BTCIDR"}]
    assert str(upstream.requests[0].url) == "https://indodax.com/api/pairs"


async def test_proxy_allows_subdomains(market):
    assert market.is_upstream_url("https://api.indodax.com/api/ticker_all")
    assert market.is_upstream_url("http://INDODAX.com/api")


async def test_concurrent_misses_fetch_twice_by_default(market, upstream):
    upstream.add("/api/depth/btc_idr", DEPTH_BTC)
    upstream.gate = asyncio.Event()

    pending = [asyncio.ensure_future(market.depth("btcidr")) for _ in range(2)]
    await _settle()
    upstream.gate.set()
    results = await asyncio.gather(*pending)

    assert results == [DEPTH_BTC, DEPTH_BTC]
    assert upstream.calls() == 2


async def test_single_flight_coalesces_concurrent_misses(cache, indodax, upstream):
    market = MarketService.create(cache=cache, client=indodax, single_flight=True)
    upstream.add("/api/depth/btc_idr", DEPTH_BTC)
    upstream.gate = asyncio.Event()

    pending = [asyncio.ensure_future(market.depth("BTCIDR")) for _ in range(3)]
    await _settle()
    upstream.gate.set()
    results = await asyncio.gather(*pending)

    assert results == [DEPTH_BTC] * 3
    assert upstream.calls() == 1
    assert cache.size == 1


async def test_single_flight_shares_failures(cache, indodax, upstream):
    market = MarketService.create(cache=cache, client=indodax, single_flight=True)
    upstream.add("/api/ticker_all", (404, {}))
    upstream.gate = asyncio.Event()

    pending = [asyncio.ensure_future(market.ticker_all()) for _ in range(2)]
    await _settle()
    upstream.gate.set()
    results = await asyncio.gather(*pending, return_exceptions=True)

    assert all(isinstance(result, UpstreamClientError) for result in results)
    assert upstream.calls() == 1

    upstream.gate = None
    upstream.add("/api/ticker_all", TICKER_ALL)
    assert await market.ticker_all() == TICKER_ALL


async def test_single_flight_survives_cancelled_caller(cache, indodax, upstream):
    market = MarketService.create(cache=cache, client=indodax, single_flight=True)
    upstream.add("/api/depth/btc_idr", DEPTH_BTC)
    upstream.gate = asyncio.Event()

    waiter = asyncio.ensure_future(market.depth("btcidr"))
    await _settle()
    waiter.cancel()
    await _settle()
    upstream.gate.set()

    assert await market.depth("btcidr") == DEPTH_BTC
    assert waiter.cancelled()
    assert upstream.calls() == 1
    assert cache.size == 1


async def test_history_truncates_fractional_bounds(market, upstream, cache):
    upstream.add("/api/tradingview/history", HISTORY_OK)

    await market.history("btcidr", "1", "1700000000.5", "1700000600.9")

    params = upstream.requests[0].url.params
    assert params["from"] == "1700000000"
    assert params["to"] == "1700000600"
    assert cache.keys() == ["history_btc_idr_1_1700000000_1700000600"]


async def test_success_log_reports_sizes(market, upstream, caplog):
    upstream.add("/api/ticker_all", TICKER_ALL)
    upstream.add("/api/tradingview/history", HISTORY_OK)

    with caplog.at_level(logging.INFO, logger="indodax_proxy.services.market_service"):
        await market.ticker_all()
        await market.history("btcidr", "1")

    assert "[SUCCESS] ticker_all (2 pairs)" in caplog.text
    assert "[SUCCESS] history_btc_idr_1__ (2 candles)" in caplog.text
