"""Quotes command implementation."""

import logging

import typer
from rich.console import Console

from qas.cli.utils.options import (
    API_KEY_OPTION,
    COUNT_OPTION,
    OUTPUT_FORMAT_OPTION,
    OUTPUT_PATH_OPTION,
    PAGE_OPTION,
    PAGE_SIZE_OPTION,
    TAG_OPTION,
    OutputFormat,
)
from qas.cli.utils.output import handle_json_output, handle_table_output
from qas.cli.utils.service import build_aggregator
from qas.core.constants import RequestLimits
from qas.exceptions import ConfigurationError, InvalidRequest, UpstreamError, UpstreamRetryExhausted

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def get_quotes(
    count: COUNT_OPTION = 10,
    page: PAGE_OPTION = RequestLimits.DEFAULT_PAGE,
    page_size: PAGE_SIZE_OPTION = RequestLimits.DEFAULT_PAGE_SIZE,
    tag: TAG_OPTION = None,
    api_key: API_KEY_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
    output_path: OUTPUT_PATH_OPTION = None,
) -> None:
    """Collect unique quotes from FavQs and show one page of them.

    Batches and the collected list are cached, so paging through the same
    request only hits the API once.
    """
    try:
        aggregator, client = build_aggregator(api_key)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1) from e

    try:
        with client, console.status("[bold blue]Collecting quotes...[/bold blue]", spinner="dots"):
            response = aggregator.get_quotes(int(count), int(page), int(page_size), tag)
    except InvalidRequest as e:
        console.print(f"[red]Invalid request:[/red] {e}")
        raise typer.Exit(2) from e
    except UpstreamRetryExhausted as e:
        console.print(f"[red]Quote provider is rate limiting or unavailable:[/red] {e}")
        raise typer.Exit(1) from e
    except UpstreamError as e:
        console.print(f"[red]Quote provider error:[/red] {e}")
        raise typer.Exit(1) from e
    finally:
        aggregator.cache.store.close()

    if output_format == OutputFormat.JSON:
        handle_json_output(response, output_path)
        return

    title = f"Quotes tagged '{tag}'" if tag else "Random quotes"
    handle_table_output(response, title)
