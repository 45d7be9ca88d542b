"""
staffboard.schemas.positions - Position Schemas
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from staffboard.schemas.shared import FilterInput, InputModel, SortOrder, required_text

PositionName = required_text("Name", 255)

PositionSortBy = Literal["name", "created_at"]


class CreatePositionInput(InputModel):
    work_location_id: UUID
    name: PositionName


class UpdatePositionInput(InputModel):
    id: UUID
    name: PositionName | None = None
    is_active: bool | None = None


class PositionIdInput(InputModel):
    id: UUID


class PositionFilter(FilterInput):
    work_location_id: UUID | None = None
    is_active: bool | None = None
    sort_by: PositionSortBy = "name"
    sort_order: SortOrder = "asc"
    include_deleted: bool = False


class PositionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    work_location_id: UUID
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


__all__ = [
    "CreatePositionInput",
    "PositionFilter",
    "PositionIdInput",
    "PositionResponse",
    "UpdatePositionInput",
]
