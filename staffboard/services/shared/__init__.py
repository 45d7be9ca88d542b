"""
staffboard.services.shared - Helpers Shared by the Domain Services
"""

from staffboard.services.shared.pagination import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    PaginatedResult,
    PaginationMeta,
    calculate_offset,
    calculate_total_pages,
    create_pagination_meta,
    paginate_result,
)
from staffboard.services.shared.query_helpers import (
    apply_pagination,
    apply_search_filter,
    apply_soft_delete_filter,
    apply_sort,
    build_search_filter,
    count_rows,
    escape_like,
    get_scoped,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "PaginatedResult",
    "PaginationMeta",
    "apply_pagination",
    "apply_search_filter",
    "apply_soft_delete_filter",
    "apply_sort",
    "build_search_filter",
    "calculate_offset",
    "calculate_total_pages",
    "count_rows",
    "create_pagination_meta",
    "escape_like",
    "get_scoped",
    "paginate_result",
]
