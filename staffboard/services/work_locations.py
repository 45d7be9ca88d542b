"""
staffboard.services.work_locations - Work Location Actions

CRUD for client work sites. A location can only be created for a live
client of the caller's organization, and cannot be deleted while it has
live positions.
"""

import logging

from sqlalchemy import exists, select

from staffboard.actions.context import ActionContext
from staffboard.actions.errors import ActionException
from staffboard.actions.result import ErrorCode
from staffboard.actions.wrapper import action
from staffboard.models.client import Client, WorkLocation
from staffboard.models.position import Position
from staffboard.schemas.work_locations import (
    WORK_LOCATION_SEARCHABLE_COLUMNS,
    CreateWorkLocationInput,
    UpdateWorkLocationInput,
    WorkLocationFilter,
    WorkLocationIdInput,
    WorkLocationResponse,
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

# Columns that may be cleared by an update
NULLABLE_FIELDS = frozenset({"email", "phone"})


@action(schema=CreateWorkLocationInput)
async def create_work_location(
    ctx: ActionContext, data: CreateWorkLocationInput
) -> WorkLocationResponse:
    await get_scoped(ctx.db, Client, data.client_id, ctx.organization_id, "Client")

    location = WorkLocation(organization_id=ctx.organization_id, **data.model_dump())
    ctx.db.add(location)
    await ctx.db.commit()
    await ctx.db.refresh(location)

    logger.info(
        f"Created work location {location.id}",
        extra={"work_location_id": str(location.id), "client_id": str(data.client_id)},
    )
    return WorkLocationResponse.model_validate(location)


@action(schema=WorkLocationIdInput)
async def get_work_location(ctx: ActionContext, data: WorkLocationIdInput) -> WorkLocationResponse:
    location = await get_scoped(
        ctx.db, WorkLocation, data.id, ctx.organization_id, "Work location"
    )
    return WorkLocationResponse.model_validate(location)


@action(schema=WorkLocationFilter)
async def get_work_locations(
    ctx: ActionContext, data: WorkLocationFilter
) -> PaginatedResult[WorkLocationResponse]:
    query = select(WorkLocation).where(WorkLocation.organization_id == ctx.organization_id)
    if data.client_id is not None:
        query = query.where(WorkLocation.client_id == data.client_id)
    query = apply_soft_delete_filter(query, WorkLocation, data.include_deleted)
    query = apply_search_filter(
        query,
        build_search_filter(
            data.search,
            [getattr(WorkLocation, name) for name in WORK_LOCATION_SEARCHABLE_COLUMNS],
        ),
    )

    total = await count_rows(ctx.db, query)

    query = apply_sort(query, getattr(WorkLocation, data.sort_by), data.sort_order)
    query = apply_pagination(query, data.page, data.page_size)
    result = await ctx.db.execute(query)

    return paginate_result(
        [WorkLocationResponse.model_validate(row) for row in result.scalars().all()],
        total,
        data.page,
        data.page_size,
    )


@action(schema=UpdateWorkLocationInput)
async def update_work_location(
    ctx: ActionContext, data: UpdateWorkLocationInput
) -> WorkLocationResponse:
    location = await get_scoped(
        ctx.db, WorkLocation, data.id, ctx.organization_id, "Work location"
    )

    for field, value in data.model_dump(exclude_unset=True, exclude={"id"}).items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(location, field, value)

    await ctx.db.commit()
    await ctx.db.refresh(location)
    return WorkLocationResponse.model_validate(location)


@action(schema=WorkLocationIdInput)
async def delete_work_location(
    ctx: ActionContext, data: WorkLocationIdInput
) -> WorkLocationResponse:
    location = await get_scoped(
        ctx.db, WorkLocation, data.id, ctx.organization_id, "Work location"
    )

    has_positions = await ctx.db.scalar(
        select(
            exists().where(
                Position.work_location_id == location.id,
                Position.deleted_at.is_(None),
            )
        )
    )
    if has_positions:
        raise ActionException(
            ErrorCode.HAS_DEPENDENCIES,
            "This work location cannot be deleted because it has positions. "
            "Please remove them first.",
        )

    location.soft_delete()
    await ctx.db.commit()
    await ctx.db.refresh(location)

    logger.info(
        f"Deleted work location {location.id}",
        extra={"work_location_id": str(location.id)},
    )
    return WorkLocationResponse.model_validate(location)


__all__ = [
    "create_work_location",
    "delete_work_location",
    "get_work_location",
    "get_work_locations",
    "update_work_location",
]
