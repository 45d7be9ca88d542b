"""
staffboard.services.workers - Temporary Worker Actions

CRUD for temporary workers plus the board queries: the worker list with
accumulated hours and an availability filter, single-worker availability
checks and the expanded worker view with assignments.
"""

import logging
from datetime import datetime

from sqlalchemy import and_, exists, extract, func, or_, select

from staffboard.actions.context import ActionContext
from staffboard.actions.errors import ActionException
from staffboard.actions.result import ErrorCode
from staffboard.actions.wrapper import action
from staffboard.models.assignment import OPEN_STATUSES, Assignment, AssignmentStatus
from staffboard.models.worker import TemporaryWorker
from staffboard.schemas.assignments import AssignmentResponse, WorkerAssignmentsFilter
from staffboard.schemas.workers import (
    WORKER_SEARCHABLE_COLUMNS,
    CheckWorkerAvailabilityInput,
    CreateWorkerInput,
    UpdateWorkerInput,
    WorkerFilter,
    WorkerIdInput,
    WorkerListItem,
    WorkerResponse,
    WorkerWithAssignments,
)
from staffboard.services.shared.pagination import PaginatedResult, paginate_result
from staffboard.services.shared.query_helpers import (
    apply_pagination,
    apply_search_filter,
    apply_soft_delete_filter,
    apply_sort,
    build_search_filter,
    count_rows,
    get_scoped,
)

logger = logging.getLogger(__name__)

CANCELLED = AssignmentStatus.CANCELLED.value


def occupied_at(instant: datetime):
    """Condition: a non-cancelled assignment covers the instant (open end = forever)."""
    return and_(
        Assignment.status != CANCELLED,
        Assignment.start_at <= instant,
        or_(Assignment.end_at.is_(None), Assignment.end_at > instant),
    )


def total_hours_column():
    """
    Correlated subquery summing a worker's assignment hours.

    Cancelled assignments are ignored; open assignments count up to now and
    assignments that have not started yet count as zero.
    """
    seconds = func.greatest(
        extract("epoch", func.coalesce(Assignment.end_at, func.now()) - Assignment.start_at),
        0,
    )
    return (
        select(func.coalesce(func.sum(seconds), 0) / 3600.0)
        .where(Assignment.worker_id == TemporaryWorker.id, Assignment.status != CANCELLED)
        .correlate(TemporaryWorker)
        .scalar_subquery()
        .label("total_hours")
    )


@action(schema=CreateWorkerInput)
async def create_worker(ctx: ActionContext, data: CreateWorkerInput) -> WorkerResponse:
    worker = TemporaryWorker(organization_id=ctx.organization_id, **data.model_dump())
    ctx.db.add(worker)
    await ctx.db.commit()
    await ctx.db.refresh(worker)

    logger.info(
        f"Created worker {worker.id}",
        extra={"worker_id": str(worker.id), "organization_id": str(ctx.organization_id)},
    )
    return WorkerResponse.model_validate(worker)


@action(schema=WorkerIdInput)
async def get_worker(ctx: ActionContext, data: WorkerIdInput) -> WorkerResponse:
    worker = await get_scoped(ctx.db, TemporaryWorker, data.id, ctx.organization_id, "Worker")
    return WorkerResponse.model_validate(worker)


@action(schema=WorkerFilter)
async def get_workers(ctx: ActionContext, data: WorkerFilter) -> PaginatedResult[WorkerListItem]:
    """
    Main board list.

    Each item carries ``total_hours``. With ``available_at`` only workers
    without an assignment covering that instant are returned.
    """
    query = select(TemporaryWorker).where(TemporaryWorker.organization_id == ctx.organization_id)
    query = apply_soft_delete_filter(query, TemporaryWorker, data.include_deleted)
    query = apply_search_filter(
        query,
        build_search_filter(
            data.search,
            [getattr(TemporaryWorker, name) for name in WORKER_SEARCHABLE_COLUMNS],
        ),
    )
    if data.available_at is not None:
        query = query.where(
            ~exists().where(
                Assignment.worker_id == TemporaryWorker.id,
                occupied_at(data.available_at),
            )
        )

    total = await count_rows(ctx.db, query)

    hours = total_hours_column()
    query = query.add_columns(hours)
    if data.sort_by == "name":
        query = apply_sort(query, TemporaryWorker.last_name, data.sort_order)
        query = apply_sort(query, TemporaryWorker.first_name, data.sort_order)
    elif data.sort_by == "total_hours":
        query = apply_sort(query, hours, data.sort_order)
    else:
        query = apply_sort(query, TemporaryWorker.created_at, data.sort_order)
    query = apply_pagination(query, data.page, data.page_size)

    result = await ctx.db.execute(query)
    items = [
        WorkerListItem(
            **WorkerResponse.model_validate(worker).model_dump(),
            total_hours=round(float(worker_hours or 0), 2),
        )
        for worker, worker_hours in result.all()
    ]
    return paginate_result(items, total, data.page, data.page_size)


@action(schema=UpdateWorkerInput)
async def update_worker(ctx: ActionContext, data: UpdateWorkerInput) -> WorkerResponse:
    worker = await get_scoped(ctx.db, TemporaryWorker, data.id, ctx.organization_id, "Worker")

    for field, value in data.model_dump(exclude_unset=True, exclude={"id"}).items():
        if value is not None:
            setattr(worker, field, value)

    await ctx.db.commit()
    await ctx.db.refresh(worker)
    return WorkerResponse.model_validate(worker)


@action(schema=WorkerIdInput)
async def delete_worker(ctx: ActionContext, data: WorkerIdInput) -> WorkerResponse:
    worker = await get_scoped(ctx.db, TemporaryWorker, data.id, ctx.organization_id, "Worker")

    has_open_assignments = await ctx.db.scalar(
        select(
            exists().where(
                Assignment.worker_id == worker.id,
                Assignment.status.in_(OPEN_STATUSES),
            )
        )
    )
    if has_open_assignments:
        raise ActionException(
            ErrorCode.HAS_DEPENDENCIES,
            "This worker cannot be deleted because they have scheduled or active assignments",
        )

    worker.soft_delete()
    await ctx.db.commit()
    await ctx.db.refresh(worker)

    logger.info(f"Deleted worker {worker.id}", extra={"worker_id": str(worker.id)})
    return WorkerResponse.model_validate(worker)


@action(schema=CheckWorkerAvailabilityInput)
async def check_worker_availability(
    ctx: ActionContext, data: CheckWorkerAvailabilityInput
) -> bool:
    """True if no non-cancelled assignment of the worker covers check_datetime."""
    await get_scoped(ctx.db, TemporaryWorker, data.worker_id, ctx.organization_id, "Worker")

    busy = await ctx.db.scalar(
        select(
            exists().where(
                Assignment.worker_id == data.worker_id,
                occupied_at(data.check_datetime),
            )
        )
    )
    return not busy


@action(schema=WorkerAssignmentsFilter)
async def get_worker_with_assignments(
    ctx: ActionContext, data: WorkerAssignmentsFilter
) -> WorkerWithAssignments:
    worker = await get_scoped(ctx.db, TemporaryWorker, data.id, ctx.organization_id, "Worker")

    query = select(Assignment).where(
        Assignment.worker_id == worker.id,
        Assignment.organization_id == ctx.organization_id,
    )
    if data.assignment_status:
        query = query.where(Assignment.status.in_(data.assignment_status))
    if data.date_from is not None:
        query = query.where(or_(Assignment.end_at.is_(None), Assignment.end_at >= data.date_from))
    if data.date_to is not None:
        query = query.where(Assignment.start_at <= data.date_to)
    query = query.order_by(Assignment.start_at.desc())

    result = await ctx.db.execute(query)
    assignments = [AssignmentResponse.model_validate(row) for row in result.scalars().all()]

    return WorkerWithAssignments(
        **WorkerResponse.model_validate(worker).model_dump(),
        assignments=assignments,
    )


__all__ = [
    "check_worker_availability",
    "create_worker",
    "delete_worker",
    "get_worker",
    "get_worker_with_assignments",
    "get_workers",
    "occupied_at",
    "total_hours_column",
    "update_worker",
]
