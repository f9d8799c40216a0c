"""Market data service.

Orchestrates the cache repository and the upstream client for every market
resource exposed by the proxy.

Read-through resources (ticker_all, summaries, history, depth):
1. Validate parameters and normalize the pair
2. Build the cache key from resource name + normalized parameters
3. Serve a fresh cache entry without touching the upstream
4. Otherwise fetch, validate the payload shape, store, return

Passthrough resources (single ticker, generic proxy) always hit the upstream
and are never cached.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any
from urllib.parse import unquote, urlsplit

from indodax_proxy.config import settings
from indodax_proxy.dto import NoDataHistoryResponse, OrderBookResponse
from indodax_proxy.entities import TTLClass
from indodax_proxy.exceptions import BadRequest, ForbiddenTarget, InvalidUpstreamShape, ProxyError
from indodax_proxy.protocols import CacheStore, UpstreamClient
from indodax_proxy.utils import normalize_symbol

logger = logging.getLogger(__name__)

HISTORY_OK = "ok"


def empty_history() -> dict[str, Any]:
    """OHLCV body returned when the upstream has no candles for a request."""
    return NoDataHistoryResponse().model_dump()


def empty_order_book() -> dict[str, list]:
    """Two-sided order book with no levels."""
    return OrderBookResponse().model_dump()


def _require_object(resource: str, data: Any) -> None:
    if not isinstance(data, dict):
        raise InvalidUpstreamShape(f"Invalid {resource} data format")


def _validate_history(data: Any) -> None:
    status = data.get("s") if isinstance(data, dict) else None
    if status != HISTORY_OK:
        raise InvalidUpstreamShape(f"History status is {status!r}")


def _validate_order_book(data: Any) -> None:
    _require_object("depth", data)
    if not isinstance(data.get("buy"), list) or not isinstance(data.get("sell"), list):
        raise InvalidUpstreamShape("Depth data is missing buy/sell sides")


def _describe(payload: Any) -> str:
    """Short size note for the success log: pair count or candle count."""
    if not isinstance(payload, dict):
        return ""
    if isinstance(payload.get("tickers"), dict):
        return f" ({len(payload['tickers'])} pairs)"
    if isinstance(payload.get("t"), list):
        return f" ({len(payload['t'])} candles)"
    return ""


def _parse_timestamp(name: str, value: str | int | None) -> int | None:
    if value is None or value == "":
        return None
    try:
        # Fractional seconds are truncated toward zero
        return int(float(value))
    except (TypeError, ValueError, OverflowError) as e:
        raise BadRequest(f"Invalid '{name}' parameter: {value!r}") from e


class MarketService:
    """Read-through cache orchestration for Indodax market data.

    Depends on PROTOCOLS, not concrete implementations:
    - CacheStore: the shared TTL cache
    - UpstreamClient: the retrying HTTP client

    By default concurrent misses on the same key each fetch from the upstream
    and the last write wins. With ``single_flight`` enabled, concurrent misses
    share one in-flight fetch per key.

    Example:
        ```python
        service = MarketService.create(
            cache=InMemoryCacheRepository.create(),
            client=IndodaxClient.create(),
        )
        book = await service.depth("BTCIDR")
        ```
    """

    def __init__(
        self,
        cache: CacheStore,
        client: UpstreamClient,
        single_flight: bool | None = None,
        upstream_domain: str | None = None,
    ) -> None:
        """Initialize the market service.

        Args:
            cache: Cache store shared by all orchestrators (required).
            client: Upstream client (required).
            single_flight: Coalesce concurrent misses per key. Defaults to settings.
            upstream_domain: Domain the generic proxy may reach. Defaults to settings.
        """
        self._cache = cache
        self._client = client
        self._single_flight = settings.cache_single_flight if single_flight is None else single_flight
        self._upstream_domain = (upstream_domain or settings.upstream_domain).lower()
        self._inflight: dict[str, asyncio.Future] = {}

    @classmethod
    def create(
        cls,
        cache: CacheStore,
        client: UpstreamClient,
        single_flight: bool | None = None,
        upstream_domain: str | None = None,
    ) -> "MarketService":
        """Factory method to create MarketService with settings defaults."""
        return cls(
            cache=cache,
            client=client,
            single_flight=single_flight,
            upstream_domain=upstream_domain,
        )

    async def ticker_all(self) -> dict[str, Any]:
        """Get tickers for every pair.

        Raises:
            FetchError: Upstream failed
            InvalidUpstreamShape: Upstream returned something other than an object
        """
        loader = partial(self._fetch_validated, "/api/ticker_all", None, partial(_require_object, "ticker"))
        return await self._read_through("ticker_all", TTLClass.TICKER, loader)

    async def summaries(self) -> dict[str, Any]:
        """Get 24h summaries for every pair.

        Raises:
            FetchError: Upstream failed
            InvalidUpstreamShape: Upstream returned something other than an object
        """
        loader = partial(self._fetch_validated, "/api/summaries", None, partial(_require_object, "summaries"))
        return await self._read_through("summaries", TTLClass.TICKER, loader)

    async def history(
        self,
        symbol: str | None,
        resolution: str | None,
        start: str | int | None = None,
        end: str | int | None = None,
    ) -> dict[str, Any]:
        """Get TradingView-style OHLCV candles.

        A response whose status is not "ok" yields an empty no_data body
        instead of an error, and is not cached.

        Args:
            symbol: Pair in any casing (e.g. "BTCIDR", "btc_idr")
            resolution: Candle resolution (e.g. "1", "15", "1D")
            start: Range start, unix seconds
            end: Range end, unix seconds

        Raises:
            BadRequest: symbol or resolution missing, or a non-numeric range bound
            FetchError: Upstream failed
        """
        if not symbol or not resolution:
            raise BadRequest("Missing required parameters: symbol and resolution")

        pair = normalize_symbol(symbol)
        start_ts = _parse_timestamp("from", start)
        end_ts = _parse_timestamp("to", end)
        bounds = ["" if ts is None else str(ts) for ts in (start_ts, end_ts)]
        key = "_".join(["history", pair, resolution, *bounds])
        params = {"symbol": pair, "resolution": resolution, "from": start_ts, "to": end_ts}

        loader = partial(self._fetch_validated, "/api/tradingview/history", params, _validate_history)
        try:
            return await self._read_through(key, TTLClass.HISTORY, loader)
        except InvalidUpstreamShape as e:
            logger.warning("History data not ok for %s: %s", pair, e)
            return empty_history()

    async def depth(self, pair: str) -> dict[str, Any]:
        """Get the order book for a pair.

        Never raises for upstream problems: any failure yields an empty book.
        """
        pair = normalize_symbol(pair)
        loader = partial(self._fetch_validated, f"/api/depth/{pair}", None, _validate_order_book)
        try:
            return await self._read_through(f"depth_{pair}", TTLClass.DEPTH, loader)
        except ProxyError as e:
            logger.error("depth error for %s: %s", pair, e)
            return empty_order_book()

    async def ticker(self, pair: str) -> Any:
        """Get the ticker for one pair, bypassing the cache.

        Raises:
            FetchError: Upstream failed
        """
        return await self._client.fetch(f"/api/ticker/{normalize_symbol(pair)}")

    async def proxy(self, url: str | None) -> Any:
        """Fetch an arbitrary upstream URL, bypassing the cache.

        Args:
            url: URL-encoded absolute URL on the upstream domain

        Raises:
            BadRequest: url missing
            ForbiddenTarget: decoded url is not on the upstream domain
            FetchError: Upstream failed
        """
        if not url:
            raise BadRequest("URL parameter required")

        target = unquote(url)
        if not self.is_upstream_url(target):
            logger.warning("Rejected proxy target: %s", target)
            raise ForbiddenTarget("Only Indodax URLs allowed")

        return await self._client.fetch_url(target)

    def is_upstream_url(self, target: str) -> bool:
        """Check that ``target`` is an http(s) URL on the upstream domain or a subdomain."""
        try:
            parts = urlsplit(target)
            host = parts.hostname or ""
        except ValueError:
            return False

        if parts.scheme not in ("http", "https"):
            return False
        return host == self._upstream_domain or host.endswith(f".{self._upstream_domain}")

    async def _fetch_validated(
        self,
        path: str,
        params: dict[str, Any] | None,
        validate: Callable[[Any], None],
    ) -> Any:
        data = await self._client.fetch(path, params)
        validate(data)
        return data

    async def _read_through(
        self,
        key: str,
        ttl_class: TTLClass,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        entry = self._cache.get(key, ttl_class)
        if entry is not None:
            logger.info("[CACHE HIT] %s", key)
            return entry.payload

        if not self._single_flight:
            return await self._load(key, loader)

        pending = self._inflight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._load(key, loader))
            self._inflight[key] = pending
            pending.add_done_callback(partial(self._forget, key))
        # A cancelled caller must not cancel the shared fetch
        return await asyncio.shield(pending)

    async def _load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        payload = await loader()
        self._cache.put(key, payload)
        logger.info("[SUCCESS] %s%s", key, _describe(payload))
        return payload

    def _forget(self, key: str, future: asyncio.Future) -> None:
        if self._inflight.get(key) is future:
            del self._inflight[key]

    @property
    def single_flight(self) -> bool:
        return self._single_flight
