"""
staffboard.services.shared.query_helpers - List Query Helpers

Composable filters over SQLAlchemy ``Select`` statements used by the list
actions: soft delete, free-text search, sorting and pagination.

Example:
    >>> query = select(Client).where(Client.organization_id == org_id)
    >>> query = apply_soft_delete_filter(query, Client, include_deleted=False)
    >>> query = apply_search_filter(query, build_search_filter("acme", [Client.name]))
    >>> query = apply_sort(query, Client.name, "asc")
    >>> query = apply_pagination(query, page=1, page_size=20)
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffboard.actions.errors import ActionException
from staffboard.actions.result import ErrorCode
from staffboard.services.shared.pagination import calculate_offset


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_search_filter(
    term: str | None, columns: Sequence[Any]
) -> ColumnElement[bool] | None:
    """
    Case-insensitive OR match of ``term`` against several columns.

    Args:
        term: Search term; blank or None disables the filter
        columns: Mapped columns to search in

    Returns:
        OR of ``column ILIKE %term%`` clauses, or None
    """
    if term is None or not term.strip() or not columns:
        return None

    pattern = f"%{escape_like(term.strip())}%"
    return or_(*(column.ilike(pattern, escape="\\") for column in columns))


def apply_soft_delete_filter(query: Select, model: Any, include_deleted: bool = False) -> Select:
    """Exclude soft-deleted rows unless include_deleted is set."""
    if include_deleted:
        return query
    return query.where(model.deleted_at.is_(None))


def apply_search_filter(query: Select, search_filter: ColumnElement[bool] | None) -> Select:
    if search_filter is None:
        return query
    return query.where(search_filter)


def apply_sort(query: Select, column: Any, order: str = "asc") -> Select:
    return query.order_by(column.desc() if order == "desc" else column.asc())


def apply_pagination(query: Select, page: int, page_size: int) -> Select:
    return query.offset(calculate_offset(page, page_size)).limit(page_size)


async def count_rows(db: AsyncSession, query: Select) -> int:
    """Count the rows a (filtered, unpaginated) query would return."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    result = await db.execute(count_query)
    return result.scalar() or 0


async def get_scoped(
    db: AsyncSession,
    model: Any,
    record_id: UUID,
    organization_id: UUID,
    label: str,
    include_deleted: bool = False,
    for_update: bool = False,
) -> Any:
    """
    Load one organization-scoped record.

    Raises:
        ActionException: NOT_FOUND if the record does not exist, belongs to
            another organization or is soft-deleted
    """
    query = select(model).where(model.id == record_id, model.organization_id == organization_id)
    if hasattr(model, "deleted_at"):
        query = apply_soft_delete_filter(query, model, include_deleted)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    record = result.scalar_one_or_none()
    if record is None:
        raise ActionException(ErrorCode.NOT_FOUND, f"{label} not found")
    return record


__all__ = [
    "apply_pagination",
    "apply_search_filter",
    "apply_soft_delete_filter",
    "apply_sort",
    "build_search_filter",
    "count_rows",
    "escape_like",
    "get_scoped",
]
