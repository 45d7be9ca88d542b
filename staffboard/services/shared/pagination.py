"""
staffboard.services.shared.pagination - Pagination Helpers

Pure helpers shared by every list action.
"""

from collections.abc import Sequence
from typing import Generic, TypeVar

from pydantic import BaseModel

from staffboard.schemas.shared import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


class PaginationMeta(BaseModel):
    page: int
    page_size: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class PaginatedResult(BaseModel, Generic[T]):
    """One page of items plus pagination metadata."""

    data: list[T]
    pagination: PaginationMeta


def calculate_offset(page: int, page_size: int) -> int:
    """
    Row offset for a 1-indexed page.

    Example:
        >>> calculate_offset(3, 10)
        20
        >>> calculate_offset(0, 20)  # page < 1 treated as 1
        0
    """
    return (max(1, page) - 1) * page_size


def calculate_total_pages(total_items: int, page_size: int) -> int:
    """Number of pages needed for total_items (0 when there are none)."""
    if total_items <= 0:
        return 0
    return (total_items + page_size - 1) // page_size


def create_pagination_meta(page: int, page_size: int, total_items: int) -> PaginationMeta:
    page = max(1, page)
    total_pages = calculate_total_pages(total_items, page_size)
    return PaginationMeta(
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )


def paginate_result(
    data: Sequence[T], total_items: int, page: int, page_size: int
) -> PaginatedResult[T]:
    """Wrap a page of items with computed pagination metadata."""
    return PaginatedResult(
        data=list(data),
        pagination=create_pagination_meta(page, page_size, total_items),
    )


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "PaginatedResult",
    "PaginationMeta",
    "calculate_offset",
    "calculate_total_pages",
    "create_pagination_meta",
    "paginate_result",
]
