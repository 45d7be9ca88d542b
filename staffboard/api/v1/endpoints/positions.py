"""
staffboard.api.v1.endpoints.positions - Position Endpoints
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status
from fastapi.responses import JSONResponse

from staffboard.api.deps import Ctx, query_payload, to_response
from staffboard.services import positions as position_actions

router = APIRouter()

Payload = Annotated[dict[str, Any] | None, Body()]


@router.get("")
async def list_positions(ctx: Ctx, request: Request) -> JSONResponse:
    return to_response(await position_actions.get_positions(ctx, query_payload(request)))


@router.post("")
async def create_position(ctx: Ctx, payload: Payload = None) -> JSONResponse:
    result = await position_actions.create_position(ctx, payload)
    return to_response(result, status.HTTP_201_CREATED)


@router.get("/{position_id}")
async def get_position(ctx: Ctx, position_id: str) -> JSONResponse:
    return to_response(await position_actions.get_position(ctx, {"id": position_id}))


@router.patch("/{position_id}")
async def update_position(ctx: Ctx, position_id: str, payload: Payload = None) -> JSONResponse:
    result = await position_actions.update_position(ctx, {**(payload or {}), "id": position_id})
    return to_response(result)


@router.delete("/{position_id}")
async def delete_position(ctx: Ctx, position_id: str) -> JSONResponse:
    return to_response(await position_actions.delete_position(ctx, {"id": position_id}))
