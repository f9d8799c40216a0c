"""Service layer for business logic.

This layer contains the orchestration between the cache and the upstream.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Cache / Upstream)

Usage:
    ```python
    from indodax_proxy.services import MarketService

    market = MarketService.create(cache=repository, client=client)
    ```
"""

from .admin_service import AdminService
from .market_service import MarketService, empty_history, empty_order_book

__all__ = [
    "AdminService",
    "MarketService",
    "empty_history",
    "empty_order_book",
]
