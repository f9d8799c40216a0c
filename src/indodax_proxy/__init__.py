"""Indodax Proxy - caching reverse proxy for the Indodax public API.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (CacheStore, UpstreamClient)
    - repositories: In-memory TTL cache and the retrying Indodax client
    - services: Read-through orchestration and administration
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from indodax_proxy.repositories import IndodaxClient, InMemoryCacheRepository
    from indodax_proxy.services import MarketService

    market = MarketService.create(
        cache=InMemoryCacheRepository.create(),
        client=IndodaxClient.create(),
    )
    book = await market.depth("BTCIDR")
    ```

For HTTP API:
    ```python
    from indodax_proxy.api.app import app, create_app
    ```
"""

from indodax_proxy.config import Settings, get_settings, settings
from indodax_proxy.entities import CacheEntryEntity, HealthSnapshot, ProbeResult, TTLClass
from indodax_proxy.exceptions import (
    BadRequest,
    FetchError,
    ForbiddenTarget,
    InvalidUpstreamShape,
    ProxyError,
    UpstreamClientError,
    UpstreamServerError,
    UpstreamTimeout,
)
from indodax_proxy.handlers import AdminHandler, MarketHandler
from indodax_proxy.protocols import CacheStore, UpstreamClient
from indodax_proxy.repositories import IndodaxClient, InMemoryCacheRepository
from indodax_proxy.services import AdminService, MarketService
from indodax_proxy.utils import normalize_symbol

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "settings",
    # Protocols (interfaces)
    "CacheStore",
    "UpstreamClient",
    # Services (business logic)
    "AdminService",
    "MarketService",
    # Handlers (HTTP)
    "AdminHandler",
    "MarketHandler",
    # Repositories
    "IndodaxClient",
    "InMemoryCacheRepository",
    # Entities (domain models)
    "CacheEntryEntity",
    "HealthSnapshot",
    "ProbeResult",
    "TTLClass",
    # Errors
    "ProxyError",
    "BadRequest",
    "ForbiddenTarget",
    "InvalidUpstreamShape",
    "FetchError",
    "UpstreamTimeout",
    "UpstreamServerError",
    "UpstreamClientError",
    # Utils
    "normalize_symbol",
]
