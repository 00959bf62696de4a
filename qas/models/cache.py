"""Cache-related data models."""

from typing import Any

from pydantic import BaseModel


class CachedBatch(BaseModel):
    """Model for one cached upstream batch."""

    page: int
    page_size: int
    tag: str | None = None
    data: list[dict[str, Any]]  # Raw quote data from the API
    fetched_at: float


class CachedAggregate(BaseModel):
    """Model for a cached deduplicated, count-capped quote list."""

    count: int
    page_size: int
    tag: str | None = None
    data: list[dict[str, Any]]
    cached_at: float


class CacheStatusInfo(BaseModel):
    """Model for cache status information."""

    total_entries: int = 0
    cache_path: str | None = None
    batch_ttl_seconds: float
    aggregate_ttl_seconds: float
