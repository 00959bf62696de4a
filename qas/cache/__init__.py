"""Cache module for the quotes aggregation service."""

from qas.cache.base import CacheStore, DiskCacheStore
from qas.cache.quotes import QuoteCache

__all__ = [
    "CacheStore",
    "DiskCacheStore",
    "QuoteCache",
]
