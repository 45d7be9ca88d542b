"""
staffboard.schemas.clients - Client Schemas
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr

from staffboard.schemas.shared import FilterInput, InputModel, Phone, SortOrder, required_text

ClientName = required_text("Name", 255)
Address = required_text("Address", 500)

ClientSortBy = Literal["name", "created_at"]

# Columns matched by the free-text search of the clients list
CLIENT_SEARCHABLE_COLUMNS = ("name", "email", "phone", "address")
CLIENT_SORTABLE_COLUMNS = ("name", "created_at")


class CreateClientInput(InputModel):
    name: ClientName
    email: EmailStr
    phone: Phone
    address: Address


class UpdateClientInput(InputModel):
    """Partial update; only fields that are present are written."""

    id: UUID
    name: ClientName | None = None
    email: EmailStr | None = None
    phone: Phone | None = None
    address: Address | None = None


class ClientIdInput(InputModel):
    id: UUID


class ClientFilter(FilterInput):
    sort_by: ClientSortBy = "created_at"
    sort_order: SortOrder = "asc"
    include_deleted: bool = False


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    name: str
    email: str
    phone: str
    address: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


__all__ = [
    "CLIENT_SEARCHABLE_COLUMNS",
    "CLIENT_SORTABLE_COLUMNS",
    "ClientFilter",
    "ClientIdInput",
    "ClientResponse",
    "ClientSortBy",
    "CreateClientInput",
    "UpdateClientInput",
]
