"""Response DTOs for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error body. Unset fields are omitted when rendered."""

    error: str = Field(..., description="Short error description")
    message: str | None = Field(None, description="Underlying failure reason")
    timestamp: str | None = Field(None, description="ISO-8601 UTC time of the failure")
    symbol: str | None = Field(None, description="Symbol as supplied by the caller")


class HealthResponse(BaseModel):
    """Response DTO for health check."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(..., description="Process status, always 'OK' when answering")
    service: str = Field(..., description="Service name")
    timestamp: str = Field(..., description="ISO-8601 UTC time of the check")
    cache_size: int = Field(..., alias="cacheSize", ge=0)
    cache_entries: list[str] = Field(default_factory=list, alias="cacheEntries")
    endpoints: list[str] = Field(default_factory=list)
    indodax_status: str = Field(..., alias="indodaxStatus", description="'CONNECTED' or 'DISCONNECTED'")
    indodax_response_time: str | None = Field(None, alias="indodaxResponseTime")
    indodax_error: str | None = Field(None, alias="indodaxError")


class ClearCacheResponse(BaseModel):
    """Response DTO for cache clear."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    previous_size: int = Field(..., alias="previousSize", ge=0)
    current_size: int = Field(..., alias="currentSize", ge=0)


class OrderBookResponse(BaseModel):
    """Order book body. Levels are ``[price, amount]`` pairs as sent upstream."""

    buy: list[list] = Field(default_factory=list)
    sell: list[list] = Field(default_factory=list)


class NoDataHistoryResponse(BaseModel):
    """TradingView history body for a range without candles."""

    s: str = "no_data"
    t: list[int] = Field(default_factory=list)
    o: list[float] = Field(default_factory=list)
    h: list[float] = Field(default_factory=list)
    l: list[float] = Field(default_factory=list)  # noqa: E741
    c: list[float] = Field(default_factory=list)
    v: list[float] = Field(default_factory=list)
