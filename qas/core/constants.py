"""
Constants and configuration values for the quotes aggregation service.
"""

from enum import IntEnum, StrEnum

# API Base URL
API_BASE_URL = "https://favqs.com/api"

PACKAGE_VERSION = "0.1.0"


class APIConstants(IntEnum):
    """Upstream API limits and constants."""

    REQUEST_TIMEOUT = 30
    MAX_RETRIES = 3
    BACKOFF_INITIAL_SECONDS = 1
    BACKOFF_BASE = 2
    RANDOM_PAGE = 1


class RetryableStatus(IntEnum):
    """HTTP statuses that are worth another attempt."""

    TOO_MANY_REQUESTS = 429
    SERVICE_UNAVAILABLE = 503


class QuoteFilter(StrEnum):
    """Values of the upstream ``filter``/``type`` query parameters."""

    RANDOM = "random"
    TAG = "tag"


class RequestLimits(IntEnum):
    """Bounds on a quotes request."""

    MIN_COUNT = 1
    MIN_PAGE = 1
    DEFAULT_PAGE = 1
    MIN_PAGE_SIZE = 1
    MAX_PAGE_SIZE = 50
    DEFAULT_PAGE_SIZE = 25


class BatchMargin(IntEnum):
    """Extra batches fetched on top of ceil(count / page_size)."""

    RANDOM = 1
    TAG = 2


class FetchConstants(IntEnum):
    """Fan-out settings for batch fetches."""

    STAGGER_MS = 300
    MAX_WORKERS = 8


class CacheLimits(IntEnum):
    """Cache-related limits."""

    BATCH_TTL_SECONDS = 3600
    AGGREGATE_TTL_SECONDS = 1800
    SIZE_LIMIT_BYTES = 64 * 1024 * 1024


class FormattingConstants(IntEnum):
    """Formatting constants."""

    JSON_INDENT = 2
    MAX_BODY_LENGTH = 120
    MAX_TAGS_TO_SHOW = 3
