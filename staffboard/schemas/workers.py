"""
staffboard.schemas.workers - Temporary Worker Schemas
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict

from staffboard.schemas.assignments import AssignmentResponse
from staffboard.schemas.shared import FilterInput, InputModel, Phone, SortOrder, required_text

FirstName = required_text("First name", 100)
LastName = required_text("Last name", 100)

WorkerSortBy = Literal["name", "total_hours", "created_at"]

WORKER_SEARCHABLE_COLUMNS = ("first_name", "last_name", "phone")


class CreateWorkerInput(InputModel):
    first_name: FirstName
    last_name: LastName
    phone: Phone


class UpdateWorkerInput(InputModel):
    id: UUID
    first_name: FirstName | None = None
    last_name: LastName | None = None
    phone: Phone | None = None


class WorkerIdInput(InputModel):
    id: UUID


class CheckWorkerAvailabilityInput(InputModel):
    worker_id: UUID
    check_datetime: AwareDatetime


class WorkerFilter(FilterInput):
    """Main board view: workers, optionally only those free at an instant."""

    available_at: AwareDatetime | None = None
    sort_by: WorkerSortBy = "name"
    sort_order: SortOrder = "asc"
    include_deleted: bool = False


class WorkerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    first_name: str
    last_name: str
    phone: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class WorkerListItem(WorkerResponse):
    # Hours of non-cancelled assignments, open ones counted up to now
    total_hours: float = 0.0


class WorkerWithAssignments(WorkerResponse):
    assignments: list[AssignmentResponse] = []


__all__ = [
    "WORKER_SEARCHABLE_COLUMNS",
    "CheckWorkerAvailabilityInput",
    "CreateWorkerInput",
    "UpdateWorkerInput",
    "WorkerFilter",
    "WorkerIdInput",
    "WorkerListItem",
    "WorkerResponse",
    "WorkerSortBy",
    "WorkerWithAssignments",
]
