"""Service wiring for CLI commands."""

import typer

from qas.api.client import FavQsClient
from qas.cache.base import DiskCacheStore
from qas.cache.quotes import QuoteCache
from qas.config import Config, load_config
from qas.services.aggregator import QuoteAggregator


def get_api_key(api_key: str | None, config: Config) -> str:
    """Get the API token from the parameter, environment or a prompt.

    Note:
        The token is never written to disk.
    """
    final_api_key = api_key
    if not final_api_key and config.api_key:
        final_api_key = config.api_key.get_secret_value()
    if not final_api_key:
        final_api_key = typer.prompt("FavQs API Token", hide_input=True, confirmation_prompt=False)
    return final_api_key


def build_quote_cache(config: Config | None = None) -> QuoteCache:
    """Open the process-wide quote cache described by the config."""
    config = config or load_config()
    store = DiskCacheStore(config.cache_dir, size_limit=config.cache_size_limit)
    return QuoteCache(store, batch_ttl=config.batch_ttl_seconds, aggregate_ttl=config.aggregate_ttl_seconds)


def build_aggregator(api_key: str | None = None, config: Config | None = None) -> tuple[QuoteAggregator, FavQsClient]:
    """Build an aggregator and the client it owns.

    Returns:
        Tuple of (aggregator, client); use the client as a context manager
    """
    config = config or load_config()
    client = FavQsClient(get_api_key(api_key, config), config=config)
    aggregator = QuoteAggregator(
        build_quote_cache(config),
        client,
        stagger_seconds=config.stagger_ms / 1000,
        max_workers=config.max_fetch_workers,
    )
    return aggregator, client
