"""Shared CLI options and enums for commands."""

from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer

from qas.core.constants import RequestLimits


class OutputFormat(StrEnum):
    """Supported output formats across commands."""

    TABLE = "table"
    JSON = "json"


# Common typer options
API_KEY_OPTION = Annotated[
    str | None,
    typer.Option(
        "--api-key",
        "-k",
        help="FavQs API token (auto-detected from QAS_FAVQS_API_KEY env var)",
        hide_input=True,
    ),
]

COUNT_OPTION = Annotated[
    int,
    typer.Option(
        "--count",
        "-n",
        min=RequestLimits.MIN_COUNT,
        help="Total number of unique quotes to collect",
    ),
]

PAGE_OPTION = Annotated[
    int,
    typer.Option(
        "--page",
        "-p",
        min=RequestLimits.MIN_PAGE,
        help="Page of the collected quotes to show",
    ),
]

PAGE_SIZE_OPTION = Annotated[
    int,
    typer.Option(
        "--page-size",
        "-s",
        min=RequestLimits.MIN_PAGE_SIZE,
        max=RequestLimits.MAX_PAGE_SIZE,
        help=f"Quotes per page (max {RequestLimits.MAX_PAGE_SIZE.value})",
    ),
]

TAG_OPTION = Annotated[
    str | None,
    typer.Option(
        "--tag",
        "-t",
        help="Only collect quotes with this tag",
    ),
]

OUTPUT_PATH_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Output file path for json format (prints to stdout when omitted)",
    ),
]

OUTPUT_FORMAT_OPTION = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
        case_sensitive=False,
    ),
]
