"""Indodax HTTP client.

Async client for the public Indodax REST API. Every call is bounded by its
own timeout; transient failures (timeouts and 5xx responses) get exactly one
retry with a longer timeout and a reduced header set. There is no backoff,
no circuit breaker and no retry budget shared between requests.

Endpoints used:
- /api/ticker_all
- /api/summaries
- /api/ticker/{pair}
- /api/depth/{pair}
- /api/tradingview/history
"""

import logging
import time
from typing import Any

import httpx

from indodax_proxy.config import Settings, settings
from indodax_proxy.exceptions import (
    FetchError,
    UpstreamClientError,
    UpstreamServerError,
    UpstreamTimeout,
)
from indodax_proxy.entities import ProbeResult

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

BROWSER_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json",
    "Accept-Language": "id-ID,id;q=0.9,en-US;q=0.8,en;q=0.7",
}

RETRY_HEADERS = {
    "User-Agent": USER_AGENT,
}


class IndodaxClient:
    """httpx-based implementation of the UpstreamClient protocol.

    This class satisfies the UpstreamClient protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        client = IndodaxClient.create()
        depth = await client.fetch("/api/depth/btc_idr")
        await client.close()
        ```
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        retry_timeout: float | None = None,
        probe_timeout: float | None = None,
        proxy_timeout: float | None = None,
        probe_path: str | None = None,
        verify_tls: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Indodax client.

        Args:
            base_url: Upstream base URL. Defaults to settings.upstream_base_url.
            timeout: Primary attempt timeout in seconds.
            retry_timeout: Retry attempt timeout in seconds.
            probe_timeout: Health probe timeout in seconds.
            proxy_timeout: Generic proxy request timeout in seconds.
            probe_path: Path requested by probe(). Defaults to settings.
            verify_tls: Verify upstream certificates. Defaults to settings.
            transport: Custom httpx transport (tests use httpx.MockTransport).
        """
        self._base_url = (base_url or settings.upstream_base_url).rstrip("/")
        self._timeout = timeout or settings.upstream_timeout
        self._retry_timeout = retry_timeout or settings.upstream_retry_timeout
        self._probe_timeout = probe_timeout or settings.upstream_probe_timeout
        self._proxy_timeout = proxy_timeout or settings.proxy_timeout
        self._probe_path = probe_path or settings.upstream_probe_path
        self._verify_tls = settings.upstream_verify_tls if verify_tls is None else verify_tls
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if not self._verify_tls:
            logger.warning("TLS certificate verification is disabled for %s", self._base_url)

    @classmethod
    def create(
        cls,
        app_settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "IndodaxClient":
        """Factory method to create IndodaxClient from settings.

        Args:
            app_settings: Settings to read upstream options from. If None, uses settings.
            transport: Optional httpx transport override.

        Returns:
            Configured IndodaxClient
        """
        app_settings = app_settings or settings
        return cls(
            base_url=app_settings.upstream_base_url,
            timeout=app_settings.upstream_timeout,
            retry_timeout=app_settings.upstream_retry_timeout,
            probe_timeout=app_settings.upstream_probe_timeout,
            proxy_timeout=app_settings.proxy_timeout,
            probe_path=app_settings.upstream_probe_path,
            verify_tls=app_settings.upstream_verify_tls,
            transport=transport,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=self._verify_tls,
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                transport=self._transport,
            )
        return self._client

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``path`` on the upstream with one retry on transient failure.

        Args:
            path: Path appended to the base URL (e.g. "/api/depth/btc_idr")
            params: Optional query parameters; None values are dropped

        Returns:
            The decoded JSON body

        Raises:
            UpstreamTimeout: Timed out on the primary attempt and the retry
            UpstreamServerError: 5xx on the primary attempt and the retry
            UpstreamClientError: 4xx, network failure or non-JSON body
        """
        url = f"{self._base_url}{path}"
        query = {k: v for k, v in (params or {}).items() if v is not None}

        logger.info("[FETCH] %s", path)
        try:
            return await self._get(url, query, BROWSER_HEADERS, self._timeout)
        except FetchError as e:
            logger.error("[ERROR] %s: %s", path, e)
            if not e.retryable:
                raise

        logger.info("[RETRY] %s", path)
        try:
            return await self._get(url, query, RETRY_HEADERS, self._retry_timeout)
        except FetchError as retry_error:
            raise type(retry_error)(
                f"Retry failed: {retry_error}",
                url=url,
                status_code=retry_error.status_code,
            ) from retry_error

    async def fetch_url(self, url: str) -> Any:
        """GET an absolute URL once, without retry.

        Raises:
            FetchError: If the request failed
        """
        logger.info("[FETCH] %s", url)
        return await self._get(url, None, RETRY_HEADERS, self._proxy_timeout)

    async def probe(self, path: str | None = None) -> ProbeResult:
        """Check that the upstream answers within the probe timeout.

        Returns:
            ProbeResult with the upstream ``x-response-time`` header when
            present, otherwise the measured round trip.
        """
        url = f"{self._base_url}{path or self._probe_path}"
        started = time.perf_counter()
        try:
            response = await self.client.get(url, headers=RETRY_HEADERS, timeout=self._probe_timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Upstream probe failed: %r", e)
            return ProbeResult(connected=False, error=str(e) or type(e).__name__)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response_time = response.headers.get("x-response-time") or f"{elapsed_ms:.0f}ms"
        return ProbeResult(connected=True, response_time=response_time)

    async def _get(
        self,
        url: str,
        params: dict[str, Any] | None,
        headers: dict[str, str],
        timeout: float,
    ) -> Any:
        """Single GET attempt mapped onto the FetchError taxonomy."""
        try:
            response = await self.client.get(url, params=params, headers=headers, timeout=timeout)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise UpstreamTimeout(f"Timeout of {timeout:g}s exceeded", url=url) from e
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            error_cls = UpstreamServerError if code >= 500 else UpstreamClientError
            raise error_cls(f"Request failed with status code {code}", url=url, status_code=code) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UpstreamClientError(f"Request failed: {e}", url=url) from e
        except (UnicodeError, ValueError) as e:
            # Malformed host labels fail while httpx builds the request
            raise UpstreamClientError(f"Invalid URL: {e}", url=url) from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamClientError(
                "Upstream returned a non-JSON body",
                url=url,
                status_code=response.status_code,
            ) from e

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
