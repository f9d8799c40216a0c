"""Utility modules for the Indodax proxy."""

from .symbols import normalize_symbol
from .timestamps import utc_now_iso

__all__ = [
    "normalize_symbol",
    "utc_now_iso",
]
