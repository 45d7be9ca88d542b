"""
staffboard.api.v1.endpoints.clients - Client Endpoints
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status
from fastapi.responses import JSONResponse

from staffboard.api.deps import Ctx, query_payload, to_response
from staffboard.services import clients as client_actions

router = APIRouter()

Payload = Annotated[dict[str, Any] | None, Body()]


@router.get("")
async def list_clients(ctx: Ctx, request: Request) -> JSONResponse:
    """
    List clients.

    Query parameters: page, page_size, search, sort_by (name, created_at),
    sort_order (asc, desc), include_deleted.
    """
    return to_response(await client_actions.get_clients(ctx, query_payload(request)))


@router.post("")
async def create_client(ctx: Ctx, payload: Payload = None) -> JSONResponse:
    result = await client_actions.create_client(ctx, payload)
    return to_response(result, status.HTTP_201_CREATED)


@router.get("/{client_id}")
async def get_client(ctx: Ctx, client_id: str) -> JSONResponse:
    return to_response(await client_actions.get_client(ctx, {"id": client_id}))


@router.patch("/{client_id}")
async def update_client(ctx: Ctx, client_id: str, payload: Payload = None) -> JSONResponse:
    """Partial update; fields absent from the body are left unchanged."""
    result = await client_actions.update_client(ctx, {**(payload or {}), "id": client_id})
    return to_response(result)


@router.delete("/{client_id}")
async def delete_client(ctx: Ctx, client_id: str) -> JSONResponse:
    return to_response(await client_actions.delete_client(ctx, {"id": client_id}))
