"""Administrative operations: health reporting and cache clearing.

Only introspects the cache (size and keys) and clears it; never reads or
writes entries on behalf of the market orchestrators.
"""

from indodax_proxy.entities import HealthSnapshot
from indodax_proxy.protocols import CacheStore, UpstreamClient


class AdminService:
    """Health and cache maintenance."""

    def __init__(self, cache: CacheStore, client: UpstreamClient) -> None:
        self._cache = cache
        self._client = client

    @classmethod
    def create(cls, cache: CacheStore, client: UpstreamClient) -> "AdminService":
        return cls(cache=cache, client=client)

    async def health(self) -> HealthSnapshot:
        """Snapshot the cache and probe the upstream.

        The probe is bounded by the client's probe timeout and never raises,
        so a dead upstream degrades the snapshot instead of failing it.
        """
        probe = await self._client.probe()
        return HealthSnapshot(
            cache_size=self._cache.size,
            cache_keys=list(self._cache.keys()),
            upstream=probe,
        )

    def clear_cache(self) -> tuple[int, int]:
        """Clear the cache.

        Returns:
            (previous_size, current_size)
        """
        previous_size = self._cache.clear()
        return previous_size, self._cache.size
