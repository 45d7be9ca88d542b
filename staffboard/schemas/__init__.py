"""
staffboard.schemas - Pydantic Schemas

Input schemas of the server actions and the response views they return,
one module per domain plus shared field types.
"""

from staffboard.schemas.shared import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    DateOnlyRangeInput,
    DateRangeInput,
    FilterInput,
    InputModel,
    PaginationInput,
    Phone,
    SortOrder,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "DateOnlyRangeInput",
    "DateRangeInput",
    "FilterInput",
    "InputModel",
    "PaginationInput",
    "Phone",
    "SortOrder",
]
