"""
staffboard.services.reports - Hours Report

Worked hours per worker and work location for a date range, as data or
as CSV text. Assignment time is clipped to the range; cancelled
assignments are ignored and open ones count up to now.
"""

import csv
import io
import logging
from datetime import UTC, date, datetime, time, timedelta

from sqlalchemy import extract, func, select

from staffboard.actions.context import ActionContext
from staffboard.actions.wrapper import action
from staffboard.models.assignment import Assignment, AssignmentStatus
from staffboard.models.client import Client, WorkLocation
from staffboard.models.position import Position
from staffboard.models.worker import TemporaryWorker
from staffboard.schemas.reports import HoursReport, HoursReportFilter, HoursReportRow

logger = logging.getLogger(__name__)

CSV_HEADER = ("Worker ID", "Worker", "Client", "Work location", "Hours")


def range_bounds(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """UTC instants bounding the inclusive date range."""
    start = datetime.combine(start_date, time.min, tzinfo=UTC)
    end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=UTC)
    return start, end


async def build_hours_report(ctx: ActionContext, data: HoursReportFilter) -> HoursReport:
    range_start, range_end = range_bounds(data.start_date, data.end_date)

    clipped_start = func.greatest(Assignment.start_at, range_start)
    clipped_end = func.least(func.coalesce(Assignment.end_at, func.now()), range_end)
    seconds = func.greatest(extract("epoch", clipped_end - clipped_start), 0)
    hours = (func.sum(seconds) / 3600.0).label("total_hours")

    query = (
        select(
            TemporaryWorker.id,
            TemporaryWorker.first_name,
            TemporaryWorker.last_name,
            Client.name,
            WorkLocation.name,
            hours,
        )
        .join(TemporaryWorker, Assignment.worker_id == TemporaryWorker.id)
        .join(Position, Assignment.position_id == Position.id)
        .join(WorkLocation, Position.work_location_id == WorkLocation.id)
        .join(Client, WorkLocation.client_id == Client.id)
        .where(
            Assignment.organization_id == ctx.organization_id,
            Assignment.status != AssignmentStatus.CANCELLED.value,
            Assignment.start_at < range_end,
            func.coalesce(Assignment.end_at, func.now()) > range_start,
        )
        .group_by(
            TemporaryWorker.id,
            TemporaryWorker.first_name,
            TemporaryWorker.last_name,
            Client.name,
            WorkLocation.name,
        )
        .order_by(TemporaryWorker.last_name, TemporaryWorker.first_name, Client.name)
    )
    if data.client_id is not None:
        query = query.where(Client.id == data.client_id)

    result = await ctx.db.execute(query)
    rows = [
        HoursReportRow(
            worker_id=worker_id,
            worker_name=f"{first_name} {last_name}",
            client_name=client_name,
            work_location_name=location_name,
            total_hours=round(float(row_hours or 0), 2),
        )
        for worker_id, first_name, last_name, client_name, location_name, row_hours in result.all()
    ]

    return HoursReport(
        start_date=data.start_date,
        end_date=data.end_date,
        rows=rows,
        total_hours=round(sum(row.total_hours for row in rows), 2),
    )


def render_csv(report: HoursReport) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for row in report.rows:
        writer.writerow(
            (
                str(row.worker_id),
                row.worker_name,
                row.client_name,
                row.work_location_name,
                f"{row.total_hours:.2f}",
            )
        )
    return buffer.getvalue()


@action(schema=HoursReportFilter)
async def get_hours_report(ctx: ActionContext, data: HoursReportFilter) -> HoursReport:
    return await build_hours_report(ctx, data)


@action(schema=HoursReportFilter)
async def export_hours_report_csv(ctx: ActionContext, data: HoursReportFilter) -> str:
    """Hours report as CSV text with a header row."""
    report = await build_hours_report(ctx, data)
    logger.info(
        "Exported hours report",
        extra={
            "organization_id": str(ctx.organization_id),
            "start_date": data.start_date.isoformat(),
            "end_date": data.end_date.isoformat(),
            "rows": len(report.rows),
        },
    )
    return render_csv(report)


__all__ = [
    "CSV_HEADER",
    "export_hours_report_csv",
    "get_hours_report",
    "range_bounds",
    "render_csv",
]
