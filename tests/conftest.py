from collections.abc import Iterator
from pathlib import Path

import pytest
from factories import RecordingPause

from qas.cache.base import DiskCacheStore
from qas.cache.quotes import QuoteCache


@pytest.fixture
def store(tmp_path: Path) -> Iterator[DiskCacheStore]:
    disk_store = DiskCacheStore(tmp_path / "cache")
    yield disk_store
    disk_store.close()


@pytest.fixture
def quote_cache(store: DiskCacheStore) -> QuoteCache:
    return QuoteCache(store, batch_ttl=3600, aggregate_ttl=1800)


@pytest.fixture
def recording_pause() -> RecordingPause:
    return RecordingPause()
