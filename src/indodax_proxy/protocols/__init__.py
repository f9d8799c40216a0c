"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the in-memory store or the HTTP client for fakes in tests
- Clear separation of concerns

Usage:
    ```python
    from indodax_proxy.protocols import CacheStore, UpstreamClient

    store: CacheStore = InMemoryCacheRepository.create()
    client: UpstreamClient = IndodaxClient.create()
    ```
"""

from .cache_store import CacheStore
from .upstream_client import UpstreamClient

__all__ = [
    "CacheStore",
    "UpstreamClient",
]
