"""TTL class names."""

from enum import Enum


class TTLClass(str, Enum):
    """Freshness policy a cached resource is evaluated against.

    Durations live in settings (``Settings.cache_ttls``); each orchestrator
    is bound to exactly one class.
    """

    TICKER = "ticker"
    HISTORY = "history"
    DEPTH = "depth"
