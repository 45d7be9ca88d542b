"""
staffboard.services.positions - Position Actions
"""

import logging

from sqlalchemy import exists, select

from staffboard.actions.context import ActionContext
from staffboard.actions.errors import ActionException
from staffboard.actions.result import ErrorCode
from staffboard.actions.wrapper import action
from staffboard.models.assignment import OPEN_STATUSES, Assignment
from staffboard.models.client import WorkLocation
from staffboard.models.position import Position
from staffboard.schemas.positions import (
    CreatePositionInput,
    PositionFilter,
    PositionIdInput,
    PositionResponse,
    UpdatePositionInput,
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


@action(schema=CreatePositionInput)
async def create_position(ctx: ActionContext, data: CreatePositionInput) -> PositionResponse:
    await get_scoped(
        ctx.db, WorkLocation, data.work_location_id, ctx.organization_id, "Work location"
    )

    position = Position(organization_id=ctx.organization_id, **data.model_dump())
    ctx.db.add(position)
    await ctx.db.commit()
    await ctx.db.refresh(position)

    logger.info(
        f"Created position {position.id}",
        extra={"position_id": str(position.id), "work_location_id": str(data.work_location_id)},
    )
    return PositionResponse.model_validate(position)


@action(schema=PositionIdInput)
async def get_position(ctx: ActionContext, data: PositionIdInput) -> PositionResponse:
    position = await get_scoped(ctx.db, Position, data.id, ctx.organization_id, "Position")
    return PositionResponse.model_validate(position)


@action(schema=PositionFilter)
async def get_positions(
    ctx: ActionContext, data: PositionFilter
) -> PaginatedResult[PositionResponse]:
    query = select(Position).where(Position.organization_id == ctx.organization_id)
    if data.work_location_id is not None:
        query = query.where(Position.work_location_id == data.work_location_id)
    if data.is_active is not None:
        query = query.where(Position.is_active.is_(data.is_active))
    query = apply_soft_delete_filter(query, Position, data.include_deleted)
    query = apply_search_filter(query, build_search_filter(data.search, [Position.name]))

    total = await count_rows(ctx.db, query)

    query = apply_sort(query, getattr(Position, data.sort_by), data.sort_order)
    query = apply_pagination(query, data.page, data.page_size)
    result = await ctx.db.execute(query)

    return paginate_result(
        [PositionResponse.model_validate(row) for row in result.scalars().all()],
        total,
        data.page,
        data.page_size,
    )


@action(schema=UpdatePositionInput)
async def update_position(ctx: ActionContext, data: UpdatePositionInput) -> PositionResponse:
    position = await get_scoped(ctx.db, Position, data.id, ctx.organization_id, "Position")

    if data.name is not None:
        position.name = data.name
    if data.is_active is not None:
        position.is_active = data.is_active

    await ctx.db.commit()
    await ctx.db.refresh(position)
    return PositionResponse.model_validate(position)


@action(schema=PositionIdInput)
async def delete_position(ctx: ActionContext, data: PositionIdInput) -> PositionResponse:
    position = await get_scoped(ctx.db, Position, data.id, ctx.organization_id, "Position")

    has_open_assignments = await ctx.db.scalar(
        select(
            exists().where(
                Assignment.position_id == position.id,
                Assignment.status.in_(OPEN_STATUSES),
            )
        )
    )
    if has_open_assignments:
        raise ActionException(
            ErrorCode.HAS_DEPENDENCIES,
            "This position cannot be deleted because it has scheduled or active assignments",
        )

    position.soft_delete()
    await ctx.db.commit()
    await ctx.db.refresh(position)

    logger.info(f"Deleted position {position.id}", extra={"position_id": str(position.id)})
    return PositionResponse.model_validate(position)


__all__ = [
    "create_position",
    "delete_position",
    "get_position",
    "get_positions",
    "update_position",
]
