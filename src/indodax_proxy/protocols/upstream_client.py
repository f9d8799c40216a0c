"""Upstream client protocol.

Defines the interface for the HTTP client talking to the exchange API.
"""

from typing import Any, Protocol, runtime_checkable

from indodax_proxy.entities import ProbeResult


@runtime_checkable
class UpstreamClient(Protocol):
    """Protocol for upstream API clients."""

    async def fetch(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``path`` on the upstream, retrying once on transient failures.

        Args:
            path: Path appended to the upstream base URL
            params: Optional query parameters

        Returns:
            The decoded JSON body

        Raises:
            FetchError: If the request (and its retry, if any) failed
        """
        ...

    async def fetch_url(self, url: str) -> Any:
        """GET an absolute upstream URL once, without retry."""
        ...

    async def probe(self, path: str | None = None) -> ProbeResult:
        """Check upstream connectivity. Never raises."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
