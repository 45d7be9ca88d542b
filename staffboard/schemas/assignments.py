"""
staffboard.schemas.assignments - Assignment Schemas

Inputs for creating, ending and cancelling assignments, list filters and
the audit log view.
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, ValidationInfo, field_validator

from staffboard.schemas.shared import (
    DateRangeInput,
    FilterInput,
    InputModel,
    PaginationInput,
    SortOrder,
)

AssignmentStatusName = Literal["scheduled", "active", "completed", "cancelled"]
AssignmentSortBy = Literal["start_at", "created_at"]


class CreateAssignmentInput(InputModel):
    worker_id: UUID
    position_id: UUID
    start_at: AwareDatetime
    end_at: AwareDatetime | None = None

    @field_validator("end_at")
    @classmethod
    def _end_after_start(cls, value: datetime | None, info: ValidationInfo) -> datetime | None:
        start = info.data.get("start_at")
        if value is not None and start is not None and value <= start:
            raise ValueError("End datetime must be after start datetime")
        return value


class EndAssignmentInput(InputModel):
    assignment_id: UUID
    end_at: AwareDatetime | None = None


class CancelAssignmentInput(InputModel):
    assignment_id: UUID


class AssignmentIdInput(InputModel):
    id: UUID


class AssignmentFilter(FilterInput, DateRangeInput):
    worker_id: UUID | None = None
    position_id: UUID | None = None
    status: list[AssignmentStatusName] | None = None
    sort_by: AssignmentSortBy = "start_at"
    sort_order: SortOrder = "asc"


class WorkerAssignmentsFilter(DateRangeInput):
    """Expanded worker row: one worker and their assignments."""

    id: UUID
    assignment_status: list[AssignmentStatusName] | None = None


class AuditLogFilter(PaginationInput):
    assignment_id: UUID


class AssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    worker_id: UUID
    position_id: UUID
    start_at: datetime
    end_at: datetime | None = None
    status: AssignmentStatusName
    created_by: UUID
    ended_by: UUID | None = None
    cancelled_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class AuditLogEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    assignment_id: UUID
    action: str
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    performed_by: UUID
    created_at: datetime


__all__ = [
    "AssignmentFilter",
    "AssignmentIdInput",
    "AssignmentResponse",
    "AssignmentSortBy",
    "AssignmentStatusName",
    "AuditLogEntryResponse",
    "AuditLogFilter",
    "CancelAssignmentInput",
    "CreateAssignmentInput",
    "EndAssignmentInput",
    "WorkerAssignmentsFilter",
]
