"""TTL key-value stores backing the quote cache."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from diskcache import Cache

from qas.core.constants import CacheLimits
from qas.exceptions import CacheError

logger = logging.getLogger(__name__)


class CacheStore(ABC):
    """Abstract TTL key-value store.

    Expired entries behave as absent. Callers must always tolerate a miss.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Load a value.

        Args:
            key: Cache key

        Returns:
            Cached value or None if absent or expired

        Raises:
            CacheError: If the backend fails
        """

    @abstractmethod
    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store a value.

        Args:
            key: Cache key
            value: Picklable value
            ttl: Time to live in seconds, None for no expiry

        Raises:
            CacheError: If the backend fails
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key, returning whether it was present."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry."""

    @abstractmethod
    def __len__(self) -> int: ...

    @property
    def location(self) -> str | None:
        """Human-readable location of the backing storage, if any."""
        return None

    def close(self) -> None:
        """Release backend resources."""


class DiskCacheStore(CacheStore):
    """CacheStore backed by DiskCache with least-recently-used eviction.

    DiskCache is safe for concurrent use from threads and processes, and
    enforces expiry on read.
    """

    def __init__(self, directory: Path, size_limit: int = CacheLimits.SIZE_LIMIT_BYTES) -> None:
        """Initialize disk cache store.

        Args:
            directory: Directory holding the cache database
            size_limit: Byte budget before LRU eviction kicks in
        """
        directory.mkdir(parents=True, exist_ok=True)
        self.cache_path = directory
        self.cache = Cache(
            str(directory),
            size_limit=int(size_limit),
            eviction_policy="least-recently-used",
        )
        logger.debug(f"Initialized cache at {directory}")

    def get(self, key: str) -> Any | None:
        try:
            return self.cache.get(key)
        except Exception as e:
            raise CacheError(f"Error loading cache key {key}: {e}") from e

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        try:
            self.cache.set(key, value, expire=ttl)
        except Exception as e:
            raise CacheError(f"Error caching data with key {key}: {e}") from e

    def delete(self, key: str) -> bool:
        try:
            return bool(self.cache.delete(key))
        except Exception as e:
            raise CacheError(f"Error deleting cache item {key}: {e}") from e

    def clear(self) -> None:
        try:
            self.cache.clear()
        except Exception as e:
            raise CacheError(f"Error clearing cache: {e}") from e

    def __len__(self) -> int:
        return len(self.cache)

    @property
    def location(self) -> str | None:
        return str(self.cache_path)

    def close(self) -> None:
        self.cache.close()
