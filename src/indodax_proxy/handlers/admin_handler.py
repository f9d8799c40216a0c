"""HTTP handlers for health and cache administration."""

from indodax_proxy.dto import ClearCacheResponse, HealthResponse
from indodax_proxy.services import AdminService
from indodax_proxy.utils import utc_now_iso

SERVICE_NAME = "Indodax Proxy Server"

ENDPOINTS = [
    "/api/ticker_all",
    "/api/tradingview/history",
    "/api/depth/:pair",
    "/api/ticker/:pair",
    "/api/summaries",
    "/proxy",
    "/health",
    "/clear-cache",
]


class AdminHandler:
    """HTTP handlers for administrative endpoints."""

    def __init__(self, admin_service: AdminService) -> None:
        self._admin = admin_service

    async def health_check(self) -> HealthResponse:
        """Handle GET /health requests.

        Always answers; a failed upstream probe only flips indodaxStatus.
        """
        snapshot = await self._admin.health()
        upstream = snapshot.upstream

        return HealthResponse(
            status="OK",
            service=SERVICE_NAME,
            timestamp=utc_now_iso(),
            cache_size=snapshot.cache_size,
            cache_entries=snapshot.cache_keys,
            endpoints=ENDPOINTS,
            indodax_status="CONNECTED" if upstream.connected else "DISCONNECTED",
            indodax_response_time=upstream.response_time,
            indodax_error=upstream.error,
        )

    async def clear_cache(self) -> ClearCacheResponse:
        """Handle GET /clear-cache requests."""
        previous_size, current_size = self._admin.clear_cache()
        return ClearCacheResponse(
            message="Cache cleared",
            previous_size=previous_size,
            current_size=current_size,
        )
