"""
staffboard.schemas.reports - Report Schemas
"""

from datetime import date
from uuid import UUID

from pydantic import BaseModel

from staffboard.schemas.shared import DateOnlyRangeInput


class HoursReportFilter(DateOnlyRangeInput):
    client_id: UUID | None = None


class HoursReportRow(BaseModel):
    worker_id: UUID
    worker_name: str
    client_name: str
    work_location_name: str
    total_hours: float


class HoursReport(BaseModel):
    start_date: date
    end_date: date
    rows: list[HoursReportRow]
    total_hours: float


__all__ = ["HoursReport", "HoursReportFilter", "HoursReportRow"]
