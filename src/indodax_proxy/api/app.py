from collections.abc import Callable
from typing import Any

import httpx
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from indodax_proxy.api.dependencies import AdminHandlerDep, MarketHandlerDep, lifespan
from indodax_proxy.config import Settings, configure_logging, settings
from indodax_proxy.dto import ClearCacheResponse, HealthResponse


def create_app(
    app_settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Callable[[], float] | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        app_settings: Settings override. Defaults to environment settings.
        transport: httpx transport for upstream calls (tests pass a MockTransport).
        clock: Cache time source in seconds (tests pass a fake clock).

    Returns:
        The configured FastAPI app; services are created on startup.
    """
    app = FastAPI(
        title="Indodax Proxy",
        description="Caching reverse proxy for the Indodax public API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings or settings
    app.state.upstream_transport = transport
    app.state.clock = clock

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/ticker_all")
    async def ticker_all(handler: MarketHandlerDep) -> Any:
        """Tickers for every pair (cached, ticker TTL)."""
        return await handler.ticker_all()

    @app.get("/api/tradingview/history")
    async def history(
        handler: MarketHandlerDep,
        symbol: str | None = None,
        resolution: str | None = None,
        start: str | None = Query(None, alias="from"),
        end: str | None = Query(None, alias="to"),
    ) -> Any:
        """OHLCV candles (cached, history TTL)."""
        return await handler.history(symbol, resolution, start, end)

    @app.get("/api/depth/{pair}")
    async def depth(pair: str, handler: MarketHandlerDep) -> Any:
        """Order book (cached, depth TTL); empty book on any failure."""
        return await handler.depth(pair)

    @app.get("/api/ticker/{pair}")
    async def ticker(pair: str, handler: MarketHandlerDep) -> Any:
        """Single-pair ticker (not cached)."""
        return await handler.ticker(pair)

    @app.get("/api/summaries")
    async def summaries(handler: MarketHandlerDep) -> Any:
        """24h summaries (cached, ticker TTL)."""
        return await handler.summaries()

    @app.get("/proxy")
    async def proxy(handler: MarketHandlerDep, url: str | None = None) -> Any:
        """Fetch an arbitrary Indodax URL (not cached)."""
        return await handler.proxy(url)

    @app.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
    async def health(handler: AdminHandlerDep) -> HealthResponse:
        """Process status, cache contents and upstream connectivity."""
        return await handler.health_check()

    @app.get("/clear-cache", response_model=ClearCacheResponse)
    async def clear_cache(handler: AdminHandlerDep) -> ClearCacheResponse:
        """Drop every cache entry."""
        return await handler.clear_cache()

    return app


app = create_app()


def main() -> None:
    """Run the proxy with uvicorn."""
    import uvicorn

    configure_logging()
    uvicorn.run(
        "indodax_proxy.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
