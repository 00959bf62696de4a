"""Main CLI entry point for the quotes aggregation service."""

import logging

import typer
from rich.logging import RichHandler

from qas.cli.commands.cache import cache_clear, cache_info
from qas.cli.commands.quotes import get_quotes

app = typer.Typer(
    name="qas",
    help="Quotes Aggregation Service - Collect unique quotes from FavQs",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log cache and upstream activity"),
) -> None:
    """
    Quotes Aggregation Service CLI
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        )


app.command("quotes", help="Collect unique quotes and show one page of them")(get_quotes)
app.command("cache-info", help="Show cache location, size and lifetimes")(cache_info)
app.command("cache-clear", help="Clear cached batches and aggregates")(cache_clear)


if __name__ == "__main__":
    app()
