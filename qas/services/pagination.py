"""Slicing of an aggregated list into client pages."""

import math
from collections.abc import Sequence
from typing import TypeVar

from qas.models.quote import PaginatedResponse, PaginationInfo

T = TypeVar("T")


def paginate(items: Sequence[T], page: int, page_size: int, count: int) -> PaginatedResponse[T]:
    """Return the requested page of ``items`` capped at ``count``.

    ``has_more`` only looks inside the current list: a later page exists
    when ``page < total_pages`` and the entries before the next page do not
    already cover the effective total.

    Args:
        items: Aggregated list, already deduplicated
        page: 1-based page number
        page_size: Items per page
        count: Total the client asked for

    Returns:
        Envelope holding the page slice and pagination info
    """
    effective_total = min(count, len(items))
    total_pages = math.ceil(effective_total / page_size)

    if page > total_pages:
        return PaginatedResponse(
            items=[],
            pagination=PaginationInfo(page=page, page_size=page_size, total_requested=count, has_more=False),
        )

    start_index = (page - 1) * page_size
    end_index = min(start_index + page_size, count, len(items))
    has_more = page < total_pages and page * page_size < effective_total

    return PaginatedResponse(
        items=list(items[start_index:end_index]),
        pagination=PaginationInfo(page=page, page_size=page_size, total_requested=count, has_more=has_more),
    )
