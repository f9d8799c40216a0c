"""Error taxonomy for the proxy.

Validation and access-control errors are raised before any network call.
Upstream errors are raised by the client after at most one retry; services
either turn them into fallback payloads or let them propagate to handlers,
which render them as JSON error bodies.
"""


class ProxyError(Exception):
    """Base class for all proxy errors."""


class BadRequest(ProxyError):
    """Caller supplied missing or invalid parameters."""


class ForbiddenTarget(ProxyError):
    """Generic proxy target is not on the upstream domain."""


class InvalidUpstreamShape(ProxyError):
    """Upstream payload failed resource-specific validation."""


class FetchError(ProxyError):
    """An upstream request failed.

    Attributes:
        url: The URL that was requested
        status_code: Upstream HTTP status, if a response was received
    """

    retryable = False

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class UpstreamTimeout(FetchError):
    """Upstream did not answer within the timeout."""

    retryable = True


class UpstreamServerError(FetchError):
    """Upstream answered with a 5xx status."""

    retryable = True


class UpstreamClientError(FetchError):
    """Upstream rejected the request (4xx), was unreachable, or sent a non-JSON body."""
