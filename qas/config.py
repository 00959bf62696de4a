"""Configuration management for the quotes aggregation service."""

from pathlib import Path

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from qas.core.constants import API_BASE_URL, APIConstants, CacheLimits, FetchConstants


class Config(BaseSettings):
    """Application configuration."""

    api_url: str = Field(default=API_BASE_URL, alias="QAS_FAVQS_API_URL", description="FavQs API base URL")
    api_key: SecretStr | None = Field(default=None, alias="QAS_FAVQS_API_KEY", description="FavQs API token")
    request_timeout: float = Field(
        default=APIConstants.REQUEST_TIMEOUT,
        alias="QAS_REQUEST_TIMEOUT",
        description="Upstream request timeout in seconds",
    )

    # Cache Configuration
    cache_dir: Path = Field(
        default_factory=lambda: Path.home() / ".qas" / "cache",
        alias="QAS_CACHE_DIR",
        description="Directory backing the disk cache",
    )
    cache_size_limit: int = Field(
        default=CacheLimits.SIZE_LIMIT_BYTES,
        alias="QAS_CACHE_SIZE_LIMIT",
        description="Cache size budget in bytes before LRU eviction",
    )
    batch_ttl_seconds: float = Field(
        default=CacheLimits.BATCH_TTL_SECONDS,
        alias="QAS_BATCH_TTL_SECONDS",
        description="Lifetime of a cached upstream batch",
    )
    aggregate_ttl_seconds: float = Field(
        default=CacheLimits.AGGREGATE_TTL_SECONDS,
        alias="QAS_AGGREGATE_TTL_SECONDS",
        description="Lifetime of a cached aggregate (never longer than the batch TTL)",
    )

    stagger_ms: int = Field(
        default=FetchConstants.STAGGER_MS,
        alias="QAS_STAGGER_MS",
        description="Delay between the starts of consecutive batch fetches",
    )
    max_fetch_workers: int = Field(
        default=FetchConstants.MAX_WORKERS,
        ge=1,
        alias="QAS_MAX_FETCH_WORKERS",
        description="Upper bound on concurrent batch fetches per request",
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def clamp_aggregate_ttl(self) -> "Config":
        """Aggregates are derived from batches and must not outlive them."""
        if self.aggregate_ttl_seconds > self.batch_ttl_seconds:
            self.aggregate_ttl_seconds = self.batch_ttl_seconds
        return self


def load_config() -> Config:
    """Load configuration from environment and .env file."""
    return Config()
