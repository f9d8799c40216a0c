"""Repository layer for data access.

This layer holds the concrete implementations behind the protocols:
- InMemoryCacheRepository: the process-wide TTL cache (CacheStore)
- IndodaxClient: the upstream HTTP client (UpstreamClient)

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from indodax_proxy.protocols import CacheStore, UpstreamClient

from .indodax_client import IndodaxClient
from .memory_cache_repository import InMemoryCacheRepository

__all__ = [
    "CacheStore",
    "UpstreamClient",
    "IndodaxClient",
    "InMemoryCacheRepository",
]
