"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Cache / Upstream)
"""

from .admin_handler import AdminHandler
from .market_handler import MarketHandler

__all__ = [
    "AdminHandler",
    "MarketHandler",
]
