"""Quote aggregation service: fan-out batch fetches, deduplicate, paginate."""

import logging
import math
import threading
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from qas.cache.quotes import QuoteCache
from qas.core.constants import BatchMargin, FetchConstants, RequestLimits
from qas.core.inflight import InFlightGuard
from qas.core.keys import AggregateKey, BatchKey
from qas.models.quote import PaginatedResponse, Quote, QuotesRequest
from qas.services.pagination import paginate

logger = logging.getLogger(__name__)


class BatchFetcher(Protocol):
    """Anything that can fetch one upstream batch."""

    def fetch_batch(self, page: int, page_size: int, tag: str | None = None) -> list[Quote]: ...


def batches_needed(count: int, page_size: int, tagged: bool) -> int:
    """Number of upstream batches to request for ``count`` unique quotes.

    Random sampling repeats itself, so one batch of margin is added. Tag
    streams are smaller and run dry sooner, so they get two.
    """
    margin = BatchMargin.TAG if tagged else BatchMargin.RANDOM
    return math.ceil(count / page_size) + margin


def deduplicate(batches: Iterable[Sequence[Quote]], count: int) -> list[Quote]:
    """Keep the first occurrence of each quote id, stopping at ``count``.

    Batches must already be in ascending index order.
    """
    seen: set[str] = set()
    unique: list[Quote] = []

    for batch in batches:
        for quote in batch:
            if quote.id in seen:
                continue
            seen.add(quote.id)
            unique.append(quote)
            if len(unique) >= count:
                return unique

    return unique


class FetchSkipped(Exception):
    """A scheduled fetch was dropped because a sibling batch already failed."""


def wait_or_stop(stop: threading.Event, seconds: float) -> bool:
    """Wait up to ``seconds``, returning True as soon as ``stop`` is set."""
    return stop.wait(seconds)


class QuoteAggregator:
    """Serves exactly ``count`` unique quotes out of fixed-size upstream batches."""

    def __init__(
        self,
        cache: QuoteCache,
        client: BatchFetcher,
        stagger_seconds: float = FetchConstants.STAGGER_MS / 1000,
        guard: InFlightGuard | None = None,
        max_workers: int = FetchConstants.MAX_WORKERS,
        clock: Callable[[], float] = time.monotonic,
        pause: Callable[[threading.Event, float], bool] = wait_or_stop,
    ) -> None:
        """Initialize quote aggregator.

        Args:
            cache: Shared two-tier quote cache
            client: Upstream batch fetcher
            stagger_seconds: Offset between the scheduled starts of consecutive batches
            guard: In-flight guard shared by every request of this process
            max_workers: Upper bound on concurrent batch fetches per request
            clock: Monotonic clock, replaceable in tests
            pause: Interruptible wait, replaceable in tests
        """
        self.cache = cache
        self.client = client
        self.stagger_seconds = stagger_seconds
        self.guard = guard or InFlightGuard()
        self.max_workers = max(1, max_workers)
        self._clock = clock
        self._pause = pause

    def get_quotes(
        self,
        count: int,
        page: int = RequestLimits.DEFAULT_PAGE,
        page_size: int = RequestLimits.DEFAULT_PAGE_SIZE,
        tag: str | None = None,
    ) -> PaginatedResponse[Quote]:
        """Get one page of ``count`` unique quotes.

        Args:
            count: Total unique quotes requested
            page: 1-based page to return
            page_size: Quotes per page, also the upstream batch size
            tag: Optional tag filter

        Returns:
            Page of quotes with pagination info

        Raises:
            InvalidRequest: If the arguments violate their constraints
            UpstreamError: If any batch fetch fails
        """
        request = QuotesRequest.create(count=count, page=page, page_size=page_size, tag=tag)
        key = AggregateKey(count=request.count, page_size=request.page_size, tag=request.tag)

        quotes = self._cached_aggregate(key)
        if quotes is None:
            quotes = self.guard.run(key.render(), lambda: self._build_aggregate(request, key))

        return paginate(quotes, request.page, request.page_size, request.count)

    def _cached_aggregate(self, key: AggregateKey) -> list[Quote] | None:
        quotes = self.cache.get_aggregate(key)
        if quotes is not None and len(quotes) >= key.count:
            logger.debug(f"Aggregate cache hit for {key}")
            return quotes
        return None

    def _build_aggregate(self, request: QuotesRequest, key: AggregateKey) -> list[Quote]:
        # Another caller may have finished the same aggregate while this one waited
        cached = self._cached_aggregate(key)
        if cached is not None:
            return cached

        total = batches_needed(request.count, request.page_size, request.is_tagged)
        batch_keys = [BatchKey.for_index(i, request.page_size, request.tag) for i in range(total)]
        workers = min(total, self.max_workers)
        logger.info(f"Building {key}: {total} batches on {workers} workers")

        stop = threading.Event()
        start = self._clock()
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="qas-batch") as executor:
            futures = [
                executor.submit(self._load_batch, index, batch_key, start, stop)
                for index, batch_key in enumerate(batch_keys)
            ]
            try:
                # Collected by index, never by completion order
                batches = [future.result() for future in futures]
            except Exception:
                stop.set()
                for future in futures:
                    future.cancel()
                raise self._first_failure(futures) from None

        quotes = deduplicate(batches, request.count)
        if len(quotes) < request.count:
            logger.info(f"Upstream exhausted: {len(quotes)} of {request.count} unique quotes for {key}")

        self.cache.save_aggregate(key, quotes)
        return quotes

    @staticmethod
    def _first_failure(futures: list[Future[list[Quote]]]) -> BaseException:
        """Lowest-index real error, ignoring batches skipped because of it."""
        skipped: BaseException | None = None
        for future in futures:
            if future.cancelled():
                continue
            error = future.exception()
            if error is None:
                continue
            if not isinstance(error, FetchSkipped):
                return error
            skipped = skipped or error
        return skipped or RuntimeError("Batch fan-out failed without an error")

    def _load_batch(self, index: int, key: BatchKey, start: float, stop: threading.Event) -> list[Quote]:
        cached = self.cache.get_batch(key)
        if cached is not None:
            logger.debug(f"Batch cache hit for {key}")
            return cached

        # Scheduled against the request start, so time spent queued for a worker counts
        delay = start + index * self.stagger_seconds - self._clock()
        if delay > 0 and self._pause(stop, delay):
            raise FetchSkipped(f"Skipped {key}")
        if stop.is_set():
            raise FetchSkipped(f"Skipped {key}")

        try:
            return self.guard.run(key.render(), lambda: self._fetch_batch(key))
        except Exception:
            stop.set()
            raise

    def _fetch_batch(self, key: BatchKey) -> list[Quote]:
        cached = self.cache.get_batch(key)
        if cached is not None:
            return cached

        quotes = self.client.fetch_batch(key.upstream_page, key.page_size, key.tag)
        self.cache.save_batch(key, quotes)
        return quotes
