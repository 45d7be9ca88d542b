"""
staffboard.api.v1.endpoints.workers - Temporary Worker Endpoints

Besides CRUD:
- GET /workers/{id}/availability?at=<datetime>
- GET /workers/{id}/assignments (expanded board row)
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status
from fastapi.responses import JSONResponse

from staffboard.api.deps import Ctx, query_payload, to_response
from staffboard.services import workers as worker_actions

router = APIRouter()

Payload = Annotated[dict[str, Any] | None, Body()]


@router.get("")
async def list_workers(ctx: Ctx, request: Request) -> JSONResponse:
    """
    Main board list with ``total_hours`` per worker.

    Query parameters: page, page_size, search, available_at, sort_by
    (name, total_hours, created_at), sort_order, include_deleted.
    """
    return to_response(await worker_actions.get_workers(ctx, query_payload(request)))


@router.post("")
async def create_worker(ctx: Ctx, payload: Payload = None) -> JSONResponse:
    result = await worker_actions.create_worker(ctx, payload)
    return to_response(result, status.HTTP_201_CREATED)


@router.get("/{worker_id}")
async def get_worker(ctx: Ctx, worker_id: str) -> JSONResponse:
    return to_response(await worker_actions.get_worker(ctx, {"id": worker_id}))


@router.patch("/{worker_id}")
async def update_worker(ctx: Ctx, worker_id: str, payload: Payload = None) -> JSONResponse:
    result = await worker_actions.update_worker(ctx, {**(payload or {}), "id": worker_id})
    return to_response(result)


@router.delete("/{worker_id}")
async def delete_worker(ctx: Ctx, worker_id: str) -> JSONResponse:
    return to_response(await worker_actions.delete_worker(ctx, {"id": worker_id}))


@router.get("/{worker_id}/availability")
async def check_availability(ctx: Ctx, worker_id: str, at: str | None = None) -> JSONResponse:
    result = await worker_actions.check_worker_availability(
        ctx, {"worker_id": worker_id, "check_datetime": at}
    )
    return to_response(result)


@router.get("/{worker_id}/assignments")
async def get_worker_assignments(ctx: Ctx, worker_id: str, request: Request) -> JSONResponse:
    payload = query_payload(request, list_fields=("assignment_status",))
    result = await worker_actions.get_worker_with_assignments(ctx, {**payload, "id": worker_id})
    return to_response(result)
