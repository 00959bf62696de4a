"""Custom exceptions for the quotes aggregation service."""

from typing import Any


class QASError(Exception):
    """Base exception for all service errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize service error.

        Args:
            message: Error message
            details: Additional error details

        """
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(QASError):
    """Raised when configuration is invalid or missing."""


class InvalidRequest(QASError):
    """Raised when a quotes request violates its constraints."""

    def __init__(self, field: str, value: Any, message: str) -> None:
        super().__init__(message, {"field": field, "value": value})
        self.field = field
        self.value = value


class UpstreamError(QASError):
    """Raised when the quote provider fails a request.

    ``status`` is ``None`` for network failures that never produced a response.
    """

    def __init__(
        self,
        status: int | None,
        message: str,
        response_text: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize upstream error.

        Args:
            status: HTTP status code, or None when no response was received
            message: Error message
            response_text: Raw response text from the provider
            details: Additional error details

        """
        super().__init__(message, details)
        self.status = status
        self.message = message
        self.response_text = response_text


class UpstreamRetryExhausted(UpstreamError):
    """Raised when a retryable failure persists after every retry."""

    def __init__(self, status: int | None, message: str, attempts: int, response_text: str | None = None) -> None:
        super().__init__(status, message, response_text, {"attempts": attempts})
        self.attempts = attempts


class CacheError(QASError):
    """Raised when cache operations fail."""
