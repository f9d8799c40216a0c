"""Data Transfer Objects for API contracts.

These Pydantic models define the bodies the proxy itself produces.
Upstream payloads are passed through untouched and have no DTO.

Internal domain logic should use entities from the entities package.
"""

from .responses import (
    ClearCacheResponse,
    ErrorResponse,
    HealthResponse,
    NoDataHistoryResponse,
    OrderBookResponse,
)

__all__ = [
    "ClearCacheResponse",
    "ErrorResponse",
    "HealthResponse",
    "NoDataHistoryResponse",
    "OrderBookResponse",
]
