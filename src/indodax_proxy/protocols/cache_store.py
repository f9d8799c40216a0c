"""Cache storage protocol.

Defines the interface for the keyed store shared by every orchestrator.
Freshness is decided at read time against a TTL class; nothing is evicted
in the background.
"""

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from indodax_proxy.entities import CacheEntryEntity, TTLClass


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.
    """

    def get(self, key: str, ttl_class: TTLClass) -> CacheEntryEntity | None:
        """Return the entry for ``key`` if it is fresh for ``ttl_class``.

        Args:
            key: The cache key
            ttl_class: Freshness policy to evaluate the entry against

        Returns:
            The fresh entry, or None on a miss (absent or stale)
        """
        ...

    def peek(self, key: str) -> CacheEntryEntity | None:
        """Return the stored entry regardless of freshness."""
        ...

    def put(self, key: str, payload: Any) -> CacheEntryEntity:
        """Store ``payload`` under ``key``, overwriting any existing entry.

        Returns:
            The entry that was written
        """
        ...

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries before clearing
        """
        ...

    def keys(self) -> Iterable[str]:
        """Return the keys currently stored (fresh or stale)."""
        ...

    @property
    def size(self) -> int:
        """Number of entries currently stored (fresh or stale)."""
        ...
