"""
Offset pagination helpers.
"""

import math
from typing import Any, Sequence

from core.config import settings
from core.exceptions import InvalidArgument
from schemas.common import Page


def validate_page_params(page: int, page_size: int) -> tuple[int, int]:
    """Reject non-positive pages and page sizes above the configured maximum."""
    if page < 1:
        raise InvalidArgument("page must be at least 1")
    if page_size < 1 or page_size > settings.MAX_PAGE_SIZE:
        raise InvalidArgument(f"page_size must be between 1 and {settings.MAX_PAGE_SIZE}")
    return page, page_size


def build_page(items: Sequence[Any], total: int, page: int, page_size: int) -> Page:
    """
    Wrap one page of items with navigation metadata.

    total_pages is ceil(total / page_size); has_next and has_prev are
    derived from it, so a page past the end reports has_next=False.
    """
    total_pages = math.ceil(total / page_size) if page_size > 0 else 0
    return Page(
        items=list(items),
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        total=total,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
