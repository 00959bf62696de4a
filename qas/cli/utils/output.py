"""Shared output handlers for CLI commands."""

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from qas.core.constants import FormattingConstants
from qas.models.quote import PaginatedResponse, Quote

console = Console()


def handle_json_output(response: PaginatedResponse[Quote], output_path: Path | None) -> None:
    """Write one page of quotes as the client-facing JSON envelope.

    Args:
        response: Page returned by the aggregator
        output_path: Optional file to write instead of stdout
    """
    json_content = json.dumps(response.to_dict(), indent=FormattingConstants.JSON_INDENT, ensure_ascii=False)

    if output_path is None:
        print(json_content)
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json_content, encoding="utf-8")
    console.print(f"[bold green]✓ Saved {len(response.items)} quotes to:[/bold green] {output_path}")


def truncate(text: str, limit: int = FormattingConstants.MAX_BODY_LENGTH) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def format_tags(tags: list[str]) -> str:
    shown = tags[: FormattingConstants.MAX_TAGS_TO_SHOW]
    extra = len(tags) - len(shown)
    return ", ".join(shown) + (f" +{extra}" if extra > 0 else "")


def handle_table_output(response: PaginatedResponse[Quote], title: str) -> None:
    """Render one page of quotes as a rich table."""
    table = Table(title=title, show_lines=True, expand=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Quote", ratio=3)
    table.add_column("Author", style="cyan")
    table.add_column("Tags", style="magenta")
    table.add_column("♥", justify="right")

    for quote in response.items:
        table.add_row(
            quote.id,
            truncate(quote.body),
            quote.author or "Unknown",
            format_tags(quote.tags),
            str(quote.favorites_count),
        )

    console.print(table)

    pagination = response.pagination
    more = "[green]more pages available[/green]" if pagination.has_more else "[dim]last page[/dim]"
    console.print(
        f"Page {pagination.page} | {len(response.items)} quotes | "
        f"{pagination.total_requested} requested | {more}"
    )
