"""
staffboard.services.assignments - Assignment Actions

Placing workers on positions and moving assignments through their
lifecycle:

    scheduled --> active --> completed
        |
        +--> cancelled

Every state change writes an AssignmentAuditLog entry in the same
transaction.
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffboard.actions.context import ActionContext
from staffboard.actions.errors import ActionException
from staffboard.actions.result import ErrorCode
from staffboard.actions.wrapper import action
from staffboard.models.assignment import (
    OPEN_STATUSES,
    Assignment,
    AssignmentAuditLog,
    AssignmentStatus,
)
from staffboard.models.base import utcnow
from staffboard.models.position import Position
from staffboard.models.worker import TemporaryWorker
from staffboard.schemas.assignments import (
    AssignmentFilter,
    AssignmentIdInput,
    AssignmentResponse,
    AuditLogEntryResponse,
    AuditLogFilter,
    CancelAssignmentInput,
    CreateAssignmentInput,
    EndAssignmentInput,
)
from staffboard.services.shared.pagination import PaginatedResult, paginate_result
from staffboard.services.shared.query_helpers import (
    apply_pagination,
    apply_search_filter,
    apply_sort,
    build_search_filter,
    count_rows,
    get_scoped,
)

logger = logging.getLogger(__name__)

END_BEFORE_START_MESSAGE = "End datetime must be after start datetime"


def overlaps(worker_id: UUID, start_at: datetime, end_at: datetime | None):
    """Condition: a non-cancelled assignment of the worker intersects [start_at, end_at)."""
    conditions = [
        Assignment.worker_id == worker_id,
        Assignment.status != AssignmentStatus.CANCELLED.value,
        or_(Assignment.end_at.is_(None), Assignment.end_at > start_at),
    ]
    if end_at is not None:
        conditions.append(Assignment.start_at < end_at)
    return exists().where(*conditions)


def initial_status(start_at: datetime, now: datetime | None = None) -> str:
    now = now or utcnow()
    if start_at <= now:
        return AssignmentStatus.ACTIVE.value
    return AssignmentStatus.SCHEDULED.value


def _audit(
    db: AsyncSession,
    assignment: Assignment,
    action_name: str,
    performed_by: UUID,
    old_values: dict[str, Any] | None = None,
) -> None:
    db.add(
        AssignmentAuditLog(
            organization_id=assignment.organization_id,
            assignment_id=assignment.id,
            action=action_name,
            old_values=old_values,
            new_values=assignment.snapshot(),
            performed_by=performed_by,
        )
    )


@action(schema=CreateAssignmentInput)
async def create_assignment(ctx: ActionContext, data: CreateAssignmentInput) -> AssignmentResponse:
    """
    Place a worker on a position.

    Raises:
        ActionException: NOT_FOUND for an unknown worker or position,
            VALIDATION_ERROR for an inactive position, CONFLICT when the
            worker already has an overlapping assignment
    """
    # Row lock serializes concurrent placements of the same worker
    await get_scoped(
        ctx.db, TemporaryWorker, data.worker_id, ctx.organization_id, "Worker", for_update=True
    )
    position = await get_scoped(
        ctx.db, Position, data.position_id, ctx.organization_id, "Position"
    )
    if not position.is_active:
        raise ActionException(
            ErrorCode.VALIDATION_ERROR,
            "Position is not active",
            field_errors={"position_id": ["Position is not active"]},
        )

    if await ctx.db.scalar(select(overlaps(data.worker_id, data.start_at, data.end_at))):
        raise ActionException(
            ErrorCode.CONFLICT,
            "Worker already has an assignment in this time range",
            details={"worker_id": str(data.worker_id)},
        )

    assignment = Assignment(
        organization_id=ctx.organization_id,
        worker_id=data.worker_id,
        position_id=data.position_id,
        start_at=data.start_at,
        end_at=data.end_at,
        status=initial_status(data.start_at),
        created_by=ctx.user_id,
    )
    ctx.db.add(assignment)
    await ctx.db.flush()
    _audit(ctx.db, assignment, "created", ctx.user_id)
    await ctx.db.commit()
    await ctx.db.refresh(assignment)

    logger.info(
        f"Created assignment {assignment.id}",
        extra={
            "assignment_id": str(assignment.id),
            "worker_id": str(data.worker_id),
            "position_id": str(data.position_id),
        },
    )
    return AssignmentResponse.model_validate(assignment)


@action(schema=EndAssignmentInput)
async def end_assignment(ctx: ActionContext, data: EndAssignmentInput) -> AssignmentResponse:
    """Complete a scheduled or active assignment (end time defaults to now)."""
    assignment = await get_scoped(
        ctx.db, Assignment, data.assignment_id, ctx.organization_id, "Assignment", for_update=True
    )
    if assignment.status not in OPEN_STATUSES:
        raise ActionException(
            ErrorCode.CONFLICT,
            f"Cannot end an assignment with status {assignment.status}",
            details={"status": assignment.status},
        )

    end_at = data.end_at or utcnow()
    if end_at <= assignment.start_at:
        raise ActionException(
            ErrorCode.VALIDATION_ERROR,
            END_BEFORE_START_MESSAGE,
            field_errors={"end_at": [END_BEFORE_START_MESSAGE]},
        )

    old_values = assignment.snapshot()
    assignment.end_at = end_at
    assignment.status = AssignmentStatus.COMPLETED.value
    assignment.ended_by = ctx.user_id
    _audit(ctx.db, assignment, "ended", ctx.user_id, old_values)
    await ctx.db.commit()
    await ctx.db.refresh(assignment)

    logger.info(f"Ended assignment {assignment.id}", extra={"assignment_id": str(assignment.id)})
    return AssignmentResponse.model_validate(assignment)


@action(schema=CancelAssignmentInput)
async def cancel_assignment(ctx: ActionContext, data: CancelAssignmentInput) -> AssignmentResponse:
    """Cancel an assignment that has not started yet."""
    assignment = await get_scoped(
        ctx.db, Assignment, data.assignment_id, ctx.organization_id, "Assignment", for_update=True
    )
    if assignment.status != AssignmentStatus.SCHEDULED.value:
        raise ActionException(
            ErrorCode.CONFLICT,
            "Only scheduled assignments can be cancelled",
            details={"status": assignment.status},
        )

    old_values = assignment.snapshot()
    assignment.status = AssignmentStatus.CANCELLED.value
    assignment.cancelled_by = ctx.user_id
    _audit(ctx.db, assignment, "cancelled", ctx.user_id, old_values)
    await ctx.db.commit()
    await ctx.db.refresh(assignment)

    logger.info(
        f"Cancelled assignment {assignment.id}", extra={"assignment_id": str(assignment.id)}
    )
    return AssignmentResponse.model_validate(assignment)


@action(schema=AssignmentIdInput)
async def get_assignment(ctx: ActionContext, data: AssignmentIdInput) -> AssignmentResponse:
    assignment = await get_scoped(ctx.db, Assignment, data.id, ctx.organization_id, "Assignment")
    return AssignmentResponse.model_validate(assignment)


@action(schema=AssignmentFilter)
async def get_assignments(
    ctx: ActionContext, data: AssignmentFilter
) -> PaginatedResult[AssignmentResponse]:
    """
    List assignments.

    Date filters select assignments that intersect [date_from, date_to];
    search matches the worker's name.
    """
    query = select(Assignment).where(Assignment.organization_id == ctx.organization_id)
    if data.worker_id is not None:
        query = query.where(Assignment.worker_id == data.worker_id)
    if data.position_id is not None:
        query = query.where(Assignment.position_id == data.position_id)
    if data.status:
        query = query.where(Assignment.status.in_(data.status))
    if data.date_from is not None:
        query = query.where(or_(Assignment.end_at.is_(None), Assignment.end_at >= data.date_from))
    if data.date_to is not None:
        query = query.where(Assignment.start_at <= data.date_to)

    search_filter = build_search_filter(
        data.search, [TemporaryWorker.first_name, TemporaryWorker.last_name]
    )
    if search_filter is not None:
        query = query.join(TemporaryWorker, Assignment.worker_id == TemporaryWorker.id)
        query = apply_search_filter(query, search_filter)

    total = await count_rows(ctx.db, query)

    query = apply_sort(query, getattr(Assignment, data.sort_by), data.sort_order)
    query = apply_pagination(query, data.page, data.page_size)
    result = await ctx.db.execute(query)

    return paginate_result(
        [AssignmentResponse.model_validate(row) for row in result.scalars().all()],
        total,
        data.page,
        data.page_size,
    )


@action(schema=AuditLogFilter)
async def get_assignment_audit_log(
    ctx: ActionContext, data: AuditLogFilter
) -> PaginatedResult[AuditLogEntryResponse]:
    """Audit entries of one assignment, newest first."""
    await get_scoped(ctx.db, Assignment, data.assignment_id, ctx.organization_id, "Assignment")

    query = select(AssignmentAuditLog).where(
        AssignmentAuditLog.assignment_id == data.assignment_id,
        AssignmentAuditLog.organization_id == ctx.organization_id,
    )
    total = await count_rows(ctx.db, query)

    query = apply_sort(query, AssignmentAuditLog.created_at, "desc")
    query = apply_pagination(query, data.page, data.page_size)
    result = await ctx.db.execute(query)

    return paginate_result(
        [AuditLogEntryResponse.model_validate(row) for row in result.scalars().all()],
        total,
        data.page,
        data.page_size,
    )


__all__ = [
    "cancel_assignment",
    "create_assignment",
    "end_assignment",
    "get_assignment",
    "get_assignment_audit_log",
    "get_assignments",
    "initial_status",
    "overlaps",
]
