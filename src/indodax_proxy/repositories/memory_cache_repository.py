"""In-memory implementation of CacheStore.

A plain dict keyed by request fingerprint. Entries are never evicted in the
background: staleness is checked on read against the caller's TTL class, and
stale entries stay in place until overwritten or cleared.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from indodax_proxy.config import settings
from indodax_proxy.entities import CacheEntryEntity, TTLClass

logger = logging.getLogger(__name__)


class InMemoryCacheRepository:
    """Process-local TTL cache.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    No locking is done: the service runs on a single event loop and every
    method completes without awaiting, so writes are last-write-wins.

    Example:
        ```python
        cache = InMemoryCacheRepository.create()
        cache.put("depth_btc_idr", {"buy": [], "sell": []})
        entry = cache.get("depth_btc_idr", TTLClass.DEPTH)
        ```
    """

    def __init__(
        self,
        ttls: dict[str, float] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the cache repository.

        Args:
            ttls: Seconds per TTL class name. Defaults to settings.
            clock: Monotonic time source in seconds. Defaults to time.monotonic.
        """
        self._ttls = dict(ttls or settings.cache_ttls)
        self._clock = clock or time.monotonic
        self._entries: dict[str, CacheEntryEntity] = {}

        missing = {ttl_class.value for ttl_class in TTLClass} - self._ttls.keys()
        if missing:
            raise ValueError(f"Missing TTL for classes: {sorted(missing)}")

    @classmethod
    def create(
        cls,
        ttls: dict[str, float] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> "InMemoryCacheRepository":
        """Factory method to create InMemoryCacheRepository with defaults.

        Args:
            ttls: TTL seconds per class. If None, uses settings.
            clock: Time source. If None, uses time.monotonic.

        Returns:
            Configured InMemoryCacheRepository
        """
        return cls(ttls=ttls, clock=clock)

    def ttl_for(self, ttl_class: TTLClass) -> float:
        """Get the TTL in seconds for a class."""
        return self._ttls[TTLClass(ttl_class).value]

    def get(self, key: str, ttl_class: TTLClass) -> CacheEntryEntity | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        ttl = self.ttl_for(ttl_class)
        now = self._clock()
        if not entry.is_fresh(now, ttl):
            logger.debug("Cache stale: %s (age=%.2fs, ttl=%ss)", key, entry.age(now), ttl)
            return None

        return entry

    def peek(self, key: str) -> CacheEntryEntity | None:
        return self._entries.get(key)

    def put(self, key: str, payload: Any) -> CacheEntryEntity:
        entry = CacheEntryEntity(key=key, stored_at=self._clock(), payload=payload)
        self._entries[key] = entry
        return entry

    def clear(self) -> int:
        previous_size = len(self._entries)
        self._entries.clear()
        logger.info("Cache cleared: %d entries removed", previous_size)
        return previous_size

    def keys(self) -> list[str]:
        return list(self._entries)

    @property
    def size(self) -> int:
        return len(self._entries)
