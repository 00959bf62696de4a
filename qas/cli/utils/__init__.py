"""CLI utilities module."""

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
from qas.cli.utils.service import build_aggregator, build_quote_cache, get_api_key

__all__ = [
    "API_KEY_OPTION",
    "COUNT_OPTION",
    "OUTPUT_FORMAT_OPTION",
    "OUTPUT_PATH_OPTION",
    "PAGE_OPTION",
    "PAGE_SIZE_OPTION",
    "TAG_OPTION",
    "OutputFormat",
    "build_aggregator",
    "build_quote_cache",
    "get_api_key",
    "handle_json_output",
    "handle_table_output",
]
