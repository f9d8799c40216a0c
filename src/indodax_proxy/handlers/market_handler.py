"""HTTP handlers for market data endpoints.

Handlers delegate to MarketService and turn propagated errors into the JSON
error bodies clients expect. Successful upstream payloads are returned as-is.
"""

import logging
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from indodax_proxy.dto import ErrorResponse
from indodax_proxy.exceptions import BadRequest, ForbiddenTarget, ProxyError
from indodax_proxy.services import MarketService
from indodax_proxy.utils import utc_now_iso

logger = logging.getLogger(__name__)


def error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    """Render an ErrorResponse, omitting unset fields."""
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


class MarketHandler:
    """HTTP handlers for market data.

    Example:
        ```python
        handler = MarketHandler(market_service=MarketService.create(cache=cache, client=client))

        @app.get("/api/depth/{pair}")
        async def depth(pair: str):
            return await handler.depth(pair)
        ```
    """

    def __init__(self, market_service: MarketService) -> None:
        """Initialize the market handler.

        Args:
            market_service: The market service for business logic (required).
        """
        self._market = market_service

    async def ticker_all(self) -> Any:
        """Handle GET /api/ticker_all."""
        try:
            return await self._market.ticker_all()
        except ProxyError as e:
            logger.error("ticker_all error: %s", e)
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                ErrorResponse(error="Failed to fetch ticker data", message=str(e), timestamp=utc_now_iso()),
            )

    async def history(
        self,
        symbol: str | None,
        resolution: str | None,
        start: str | None,
        end: str | None,
    ) -> Any:
        """Handle GET /api/tradingview/history.

        Returns:
            Upstream OHLCV body, the no_data fallback, or an error response
        """
        try:
            return await self._market.history(symbol, resolution, start, end)
        except BadRequest as e:
            return error_response(status.HTTP_400_BAD_REQUEST, ErrorResponse(error=str(e)))
        except ProxyError as e:
            logger.error("history error: %s", e)
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                ErrorResponse(error="Failed to fetch history data", message=str(e), symbol=symbol),
            )

    async def depth(self, pair: str) -> dict[str, Any]:
        """Handle GET /api/depth/{pair}. Always succeeds."""
        return await self._market.depth(pair)

    async def ticker(self, pair: str) -> Any:
        """Handle GET /api/ticker/{pair}."""
        try:
            return await self._market.ticker(pair)
        except ProxyError as e:
            logger.error("ticker error for %s: %s", pair, e)
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorResponse(error=str(e)))

    async def summaries(self) -> Any:
        """Handle GET /api/summaries."""
        try:
            return await self._market.summaries()
        except ProxyError as e:
            logger.error("summaries error: %s", e)
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorResponse(error=str(e)))

    async def proxy(self, url: str | None) -> Any:
        """Handle GET /proxy?url=...

        Returns:
            Raw upstream JSON, or 400 (no url), 403 (foreign domain),
            500 (upstream failure)
        """
        try:
            return await self._market.proxy(url)
        except BadRequest as e:
            return error_response(status.HTTP_400_BAD_REQUEST, ErrorResponse(error=str(e)))
        except ForbiddenTarget as e:
            return error_response(status.HTTP_403_FORBIDDEN, ErrorResponse(error=str(e)))
        except ProxyError as e:
            logger.error("Proxy error: %s", e)
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                ErrorResponse(error="Proxy request failed", message=str(e)),
            )
