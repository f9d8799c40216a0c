"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached upstream response.

    Attributes:
        key: Fingerprint of the normalized request (resource + parameters)
        stored_at: Clock reading when the entry was written (seconds)
        payload: Response body replayed verbatim on a cache hit
    """

    key: str
    stored_at: float
    payload: Any

    def age(self, now: float) -> float:
        """Seconds elapsed since the entry was stored."""
        return now - self.stored_at

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Whether the entry is still within ``ttl`` seconds of being stored."""
        return self.age(now) < ttl
