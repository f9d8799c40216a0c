"""Domain entities for internal representation.

These are pure dataclasses and enums used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntryEntity
from .health_snapshot import HealthSnapshot
from .probe_result import ProbeResult
from .ttl_class import TTLClass

__all__ = ["CacheEntryEntity", "HealthSnapshot", "ProbeResult", "TTLClass"]
