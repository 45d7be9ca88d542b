"""
staffboard.api.v1.endpoints.assignments - Assignment Endpoints
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status
from fastapi.responses import JSONResponse

from staffboard.api.deps import Ctx, query_payload, to_response
from staffboard.services import assignments as assignment_actions

router = APIRouter()

Payload = Annotated[dict[str, Any] | None, Body()]


@router.get("")
async def list_assignments(ctx: Ctx, request: Request) -> JSONResponse:
    """
    List assignments.

    Query parameters: worker_id, position_id, status (repeatable),
    date_from, date_to, search, sort_by (start_at, created_at), sort_order,
    page, page_size.
    """
    payload = query_payload(request, list_fields=("status",))
    return to_response(await assignment_actions.get_assignments(ctx, payload))


@router.post("")
async def create_assignment(ctx: Ctx, payload: Payload = None) -> JSONResponse:
    result = await assignment_actions.create_assignment(ctx, payload)
    return to_response(result, status.HTTP_201_CREATED)


@router.get("/{assignment_id}")
async def get_assignment(ctx: Ctx, assignment_id: str) -> JSONResponse:
    return to_response(await assignment_actions.get_assignment(ctx, {"id": assignment_id}))


@router.post("/{assignment_id}/end")
async def end_assignment(ctx: Ctx, assignment_id: str, payload: Payload = None) -> JSONResponse:
    result = await assignment_actions.end_assignment(
        ctx, {**(payload or {}), "assignment_id": assignment_id}
    )
    return to_response(result)


@router.post("/{assignment_id}/cancel")
async def cancel_assignment(ctx: Ctx, assignment_id: str) -> JSONResponse:
    result = await assignment_actions.cancel_assignment(ctx, {"assignment_id": assignment_id})
    return to_response(result)


@router.get("/{assignment_id}/audit-log")
async def get_audit_log(ctx: Ctx, assignment_id: str, request: Request) -> JSONResponse:
    result = await assignment_actions.get_assignment_audit_log(
        ctx, {**query_payload(request), "assignment_id": assignment_id}
    )
    return to_response(result)
