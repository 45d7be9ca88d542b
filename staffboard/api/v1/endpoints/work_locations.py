"""
staffboard.api.v1.endpoints.work_locations - Work Location Endpoints
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status
from fastapi.responses import JSONResponse

from staffboard.api.deps import Ctx, query_payload, to_response
from staffboard.services import work_locations as location_actions

router = APIRouter()

Payload = Annotated[dict[str, Any] | None, Body()]


@router.get("")
async def list_work_locations(ctx: Ctx, request: Request) -> JSONResponse:
    result = await location_actions.get_work_locations(ctx, query_payload(request))
    return to_response(result)


@router.post("")
async def create_work_location(ctx: Ctx, payload: Payload = None) -> JSONResponse:
    result = await location_actions.create_work_location(ctx, payload)
    return to_response(result, status.HTTP_201_CREATED)


@router.get("/{location_id}")
async def get_work_location(ctx: Ctx, location_id: str) -> JSONResponse:
    return to_response(await location_actions.get_work_location(ctx, {"id": location_id}))


@router.patch("/{location_id}")
async def update_work_location(
    ctx: Ctx, location_id: str, payload: Payload = None
) -> JSONResponse:
    result = await location_actions.update_work_location(
        ctx, {**(payload or {}), "id": location_id}
    )
    return to_response(result)


@router.delete("/{location_id}")
async def delete_work_location(ctx: Ctx, location_id: str) -> JSONResponse:
    return to_response(await location_actions.delete_work_location(ctx, {"id": location_id}))
