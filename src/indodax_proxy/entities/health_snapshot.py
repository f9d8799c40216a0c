"""Health snapshot domain entity."""

from dataclasses import dataclass, field

from .probe_result import ProbeResult


@dataclass(frozen=True)
class HealthSnapshot:
    """Point-in-time view of the cache and upstream connectivity.

    Attributes:
        cache_size: Number of cache entries (fresh or stale)
        upstream: Result of the live upstream probe
        cache_keys: Keys currently stored
    """

    cache_size: int
    upstream: ProbeResult
    cache_keys: list[str] = field(default_factory=list)
