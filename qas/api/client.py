"""FavQs API client implementation."""

import logging
from typing import Any

import backoff
import requests
from pydantic import BaseModel, ConfigDict, ValidationError

from qas.config import Config
from qas.core.constants import APIConstants, QuoteFilter, RetryableStatus
from qas.exceptions import ConfigurationError, UpstreamError, UpstreamRetryExhausted
from qas.models.quote import Quote

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset(status.value for status in RetryableStatus)


class FetchAttempt(BaseModel):
    """Outcome of one HTTP attempt: a batch of quotes or an error."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    quotes: list[Quote] | None = None
    error: UpstreamError | None = None

    @property
    def retryable(self) -> bool:
        return self.error is not None and self.error.status in RETRYABLE_STATUSES


def _log_backoff(details: dict[str, Any]) -> None:
    attempt: FetchAttempt = details["value"]
    status = attempt.error.status if attempt.error else None
    logger.warning(f"Upstream returned {status}, retrying in {details['wait']:.1f}s (attempt {details['tries']})")


def _log_giveup(details: dict[str, Any]) -> None:
    logger.error(f"Upstream still failing after {details['tries']} attempts, giving up")


class FavQsClient:
    """Client for fetching quote batches from the FavQs API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        config: Config | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            api_key: FavQs API token (defaults to QAS_FAVQS_API_KEY)
            base_url: API base URL (defaults to QAS_FAVQS_API_URL)
            timeout: Request timeout in seconds
            session: Optional pre-built session, mostly for tests
            config: Application config (falls back to defaults)

        Raises:
            ConfigurationError: If no API key is available
        """
        self.config = config or Config()

        self.api_key = api_key
        if not self.api_key and self.config.api_key:
            self.api_key = self.config.api_key.get_secret_value()

        if not self.api_key:
            logger.error("API key not provided")
            raise ConfigurationError("FavQs API key must be provided either as parameter or via QAS_FAVQS_API_KEY")

        self.base_url = (base_url or self.config.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else self.config.request_timeout
        self.session = session
        self._owns_session = False

        logger.info(f"Initialized FavQs client: base_url={self.base_url}")

    def __enter__(self) -> "FavQsClient":
        """Enter context."""
        self._ensure_session()
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context."""
        self.close()

    def _ensure_session(self) -> requests.Session:
        if self.session is None:
            logger.debug("Opening client session")
            self.session = requests.Session()
            self._owns_session = True
        return self.session

    def close(self) -> None:
        if self.session is not None and self._owns_session:
            logger.debug("Closing client session")
            self.session.close()
            self.session = None
            self._owns_session = False

    @property
    def headers(self) -> dict[str, str]:
        """Get request headers."""
        return {
            "Authorization": f"Token token={self.api_key}",
            "Accept": "application/json",
        }

    @staticmethod
    def build_params(page: int, page_size: int, tag: str | None = None) -> dict[str, Any]:
        """Query parameters for one batch.

        Random batches always ask for page 1, the provider does not paginate them.
        """
        if tag is None:
            return {"page": APIConstants.RANDOM_PAGE.value, "per_page": page_size, "filter": QuoteFilter.RANDOM.value}
        return {"page": page, "per_page": page_size, "filter": tag, "type": QuoteFilter.TAG.value}

    def _attempt(self, params: dict[str, Any]) -> FetchAttempt:
        """Make one request and fold the outcome into a FetchAttempt."""
        session = self._ensure_session()
        url = f"{self.base_url}/quotes"

        logger.debug(f"GET {url} params={params}")

        try:
            response = session.get(url, headers=self.headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            return FetchAttempt(error=UpstreamError(None, f"Request to quote provider failed: {e}"))

        if not 200 <= response.status_code < 300:
            return FetchAttempt(
                error=UpstreamError(
                    response.status_code,
                    f"Quote provider responded with status {response.status_code}",
                    response.text,
                )
            )

        try:
            payload = response.json()
            quotes = [Quote.model_validate(item) for item in payload.get("quotes") or []]
        except (ValueError, AttributeError, ValidationError) as e:
            return FetchAttempt(
                error=UpstreamError(response.status_code, f"Malformed quote provider response: {e}", response.text)
            )

        return FetchAttempt(quotes=quotes)

    @backoff.on_predicate(
        backoff.expo,
        lambda attempt: attempt.retryable,
        max_tries=APIConstants.MAX_RETRIES + 1,
        factor=APIConstants.BACKOFF_INITIAL_SECONDS,
        base=APIConstants.BACKOFF_BASE,
        jitter=None,
        on_backoff=_log_backoff,
        on_giveup=_log_giveup,
    )
    def _attempt_with_retry(self, params: dict[str, Any]) -> FetchAttempt:
        return self._attempt(params)

    def fetch_batch(self, page: int, page_size: int, tag: str | None = None) -> list[Quote]:
        """Fetch one batch of quotes.

        Args:
            page: Upstream page for tagged requests, ignored for random ones
            page_size: Quotes per batch
            tag: Optional tag filter

        Returns:
            Quotes in response order

        Raises:
            UpstreamError: On a non-retryable failure
            UpstreamRetryExhausted: When 429/503 persists through every retry
        """
        params = self.build_params(page, page_size, tag)
        attempt = self._attempt_with_retry(params)

        if attempt.error is None:
            quotes = attempt.quotes or []
            logger.debug(f"Fetched {len(quotes)} quotes (page={params['page']}, filter={params['filter']})")
            return quotes

        error = attempt.error
        if attempt.retryable:
            raise UpstreamRetryExhausted(
                error.status,
                f"{error.message} after {APIConstants.MAX_RETRIES} retries",
                attempts=APIConstants.MAX_RETRIES + 1,
                response_text=error.response_text,
            )

        logger.error(f"Upstream request failed: {error.message}")
        raise error
