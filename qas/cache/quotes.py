"""Two-tier quote caching: long-lived batches and shorter-lived aggregates."""

import logging
import time
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from qas.cache.base import CacheStore
from qas.core.constants import CacheLimits
from qas.core.keys import AggregateKey, BatchKey
from qas.exceptions import CacheError
from qas.models.cache import CachedAggregate, CachedBatch, CacheStatusInfo
from qas.models.quote import Quote

logger = logging.getLogger(__name__)


class QuoteCache:
    """Typed access to cached batches and aggregates.

    Every backend failure degrades to a miss (reads) or a dropped write, since
    the cache only saves upstream calls and never decides a result.
    """

    def __init__(
        self,
        store: CacheStore,
        batch_ttl: float = CacheLimits.BATCH_TTL_SECONDS,
        aggregate_ttl: float = CacheLimits.AGGREGATE_TTL_SECONDS,
    ) -> None:
        """Initialize quote cache.

        Args:
            store: Backing key-value store
            batch_ttl: Lifetime of a batch entry in seconds
            aggregate_ttl: Lifetime of an aggregate entry in seconds, capped at batch_ttl
        """
        self.store = store
        self.batch_ttl = batch_ttl
        self.aggregate_ttl = min(aggregate_ttl, batch_ttl)

    def _load(self, key: str) -> Any | None:
        try:
            return self.store.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed, treating as miss: {e}")
            return None

    def _save(self, key: str, data: Any, ttl: float) -> None:
        try:
            self.store.set(key, data, ttl)
            logger.debug(f"Cached data with key: {key} (ttl={ttl}s)")
        except Exception as e:
            logger.warning(f"Cache write dropped: {e}")

    def get_batch(self, key: BatchKey) -> list[Quote] | None:
        """Get a cached batch.

        Args:
            key: Batch key

        Returns:
            Quotes in response order, or None on miss
        """
        cached_data = self._load(key.render())
        if cached_data is None:
            return None

        try:
            batch = CachedBatch.model_validate(cached_data)
            return [Quote.model_validate(item) for item in batch.data]
        except ValidationError as e:
            logger.debug(f"Discarding unreadable batch entry {key}: {e}")
            return None

    def save_batch(self, key: BatchKey, quotes: Sequence[Quote]) -> None:
        """Save an upstream batch with the batch TTL."""
        entry = CachedBatch(
            page=key.upstream_page,
            page_size=key.page_size,
            tag=key.tag,
            data=[quote.model_dump() for quote in quotes],
            fetched_at=time.time(),
        )
        self._save(key.render(), entry.model_dump(), self.batch_ttl)

    def get_aggregate(self, key: AggregateKey) -> list[Quote] | None:
        """Get a cached aggregate.

        Args:
            key: Aggregate key

        Returns:
            Deduplicated quotes, or None on miss
        """
        cached_data = self._load(key.render())
        if cached_data is None:
            return None

        try:
            aggregate = CachedAggregate.model_validate(cached_data)
            return [Quote.model_validate(item) for item in aggregate.data]
        except ValidationError as e:
            logger.debug(f"Discarding unreadable aggregate entry {key}: {e}")
            return None

    def save_aggregate(self, key: AggregateKey, quotes: Sequence[Quote]) -> None:
        """Save a deduplicated aggregate with the aggregate TTL."""
        entry = CachedAggregate(
            count=key.count,
            page_size=key.page_size,
            tag=key.tag,
            data=[quote.model_dump() for quote in quotes],
            cached_at=time.time(),
        )
        self._save(key.render(), entry.model_dump(), self.aggregate_ttl)

    def clear_cache(self) -> None:
        """Clear all cached data."""
        try:
            self.store.clear()
            logger.info("Cleared quote cache")
        except CacheError as e:
            logger.error(f"Error clearing cache: {e}")

    def stats(self) -> CacheStatusInfo:
        """Get cache statistics."""
        try:
            total_entries = len(self.store)
        except Exception as e:
            logger.debug(f"Could not count cache entries: {e}")
            total_entries = 0

        return CacheStatusInfo(
            total_entries=total_entries,
            cache_path=self.store.location,
            batch_ttl_seconds=self.batch_ttl,
            aggregate_ttl_seconds=self.aggregate_ttl,
        )
