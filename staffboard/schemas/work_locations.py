"""
staffboard.schemas.work_locations - Work Location Schemas
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from staffboard.schemas.shared import (
    FilterInput,
    InputModel,
    OptionalEmail,
    OptionalPhone,
    SortOrder,
    required_text,
)

LocationName = required_text("Name", 255)
Address = required_text("Address", 500)

WorkLocationSortBy = Literal["name", "created_at"]

WORK_LOCATION_SEARCHABLE_COLUMNS = ("name", "address", "email")


class CreateWorkLocationInput(InputModel):
    client_id: UUID
    name: LocationName
    address: Address
    email: OptionalEmail = None
    phone: OptionalPhone = None


class UpdateWorkLocationInput(InputModel):
    id: UUID
    name: LocationName | None = None
    address: Address | None = None
    email: OptionalEmail = None
    phone: OptionalPhone = None


class WorkLocationIdInput(InputModel):
    id: UUID


class WorkLocationFilter(FilterInput):
    client_id: UUID | None = None
    sort_by: WorkLocationSortBy = "name"
    sort_order: SortOrder = "asc"
    include_deleted: bool = False


class WorkLocationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    client_id: UUID
    name: str
    address: str
    email: str | None = None
    phone: str | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


__all__ = [
    "WORK_LOCATION_SEARCHABLE_COLUMNS",
    "CreateWorkLocationInput",
    "UpdateWorkLocationInput",
    "WorkLocationFilter",
    "WorkLocationIdInput",
    "WorkLocationResponse",
]
