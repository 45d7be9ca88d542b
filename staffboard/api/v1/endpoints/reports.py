"""
staffboard.api.v1.endpoints.reports - Report Endpoints
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from staffboard.actions.result import is_success
from staffboard.api.deps import Ctx, query_payload, to_response
from staffboard.services import reports as report_actions

router = APIRouter()


@router.get("/hours")
async def hours_report(ctx: Ctx, request: Request) -> JSONResponse:
    """Query parameters: start_date, end_date (YYYY-MM-DD), client_id."""
    return to_response(await report_actions.get_hours_report(ctx, query_payload(request)))


@router.get("/hours/export")
async def export_hours_report(ctx: Ctx, request: Request) -> Response:
    """CSV download on success, the failure envelope otherwise."""
    payload = query_payload(request)
    result = await report_actions.export_hours_report_csv(ctx, payload)
    if not is_success(result):
        return to_response(result)

    filename = f"hours-{payload.get('start_date')}-{payload.get('end_date')}.csv"
    return Response(
        content=result.data,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
