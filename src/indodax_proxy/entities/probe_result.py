"""Upstream probe result domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a connectivity probe against the upstream.

    Attributes:
        connected: Whether the probe got a successful response
        response_time: Upstream-reported or measured response time
        error: Failure message when not connected
    """

    connected: bool
    response_time: str | None = None
    error: str | None = None
