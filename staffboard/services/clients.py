"""
staffboard.services.clients - Client Actions

CRUD for client companies, scoped to the caller's organization. Deletion
is a soft delete and is blocked while the client still has live work
locations.

Example:
    >>> result = await create_client(ctx, {
    ...     "name": "Acme Corp",
    ...     "email": "contact@acme.com",
    ...     "phone": "+48 123 456 789",
    ...     "address": "ul. Glowna 1, 00-001 Warszawa",
    ... })
"""

import logging

from sqlalchemy import exists, select

from staffboard.actions.context import ActionContext
from staffboard.actions.errors import ActionException
from staffboard.actions.result import ActionError, ErrorCode
from staffboard.actions.wrapper import action
from staffboard.models.client import Client, WorkLocation
from staffboard.schemas.clients import (
    CLIENT_SEARCHABLE_COLUMNS,
    ClientFilter,
    ClientIdInput,
    ClientResponse,
    CreateClientInput,
    UpdateClientInput,
)
from staffboard.services.shared.pagination import PaginatedResult, paginate_result
from staffboard.services.shared.query_helpers import (
    apply_pagination,
    apply_search_filter,
    apply_soft_delete_filter,
    apply_sort,
    build_search_filter,
    count_rows,
    get_scoped,
)

logger = logging.getLogger(__name__)


@action(schema=CreateClientInput)
async def create_client(ctx: ActionContext, data: CreateClientInput) -> ClientResponse:
    client = Client(organization_id=ctx.organization_id, **data.model_dump())
    ctx.db.add(client)
    await ctx.db.commit()
    await ctx.db.refresh(client)

    logger.info(
        f"Created client {client.id}",
        extra={"client_id": str(client.id), "organization_id": str(ctx.organization_id)},
    )
    return ClientResponse.model_validate(client)


@action(schema=ClientIdInput)
async def get_client(ctx: ActionContext, data: ClientIdInput) -> ClientResponse:
    client = await get_scoped(ctx.db, Client, data.id, ctx.organization_id, "Client")
    return ClientResponse.model_validate(client)


@action(schema=ClientFilter)
async def get_clients(ctx: ActionContext, data: ClientFilter) -> PaginatedResult[ClientResponse]:
    """
    List clients with search, sorting and pagination.

    Search matches name, email, phone and address (case-insensitive).
    """
    query = select(Client).where(Client.organization_id == ctx.organization_id)
    query = apply_soft_delete_filter(query, Client, data.include_deleted)
    query = apply_search_filter(
        query,
        build_search_filter(
            data.search, [getattr(Client, name) for name in CLIENT_SEARCHABLE_COLUMNS]
        ),
    )

    total = await count_rows(ctx.db, query)

    query = apply_sort(query, getattr(Client, data.sort_by), data.sort_order)
    query = apply_pagination(query, data.page, data.page_size)
    result = await ctx.db.execute(query)
    clients = result.scalars().all()

    return paginate_result(
        [ClientResponse.model_validate(client) for client in clients],
        total,
        data.page,
        data.page_size,
    )


@action(schema=UpdateClientInput)
async def update_client(ctx: ActionContext, data: UpdateClientInput) -> ClientResponse:
    """Partial update: only fields present in the input are written."""
    client = await get_scoped(ctx.db, Client, data.id, ctx.organization_id, "Client")

    for field, value in data.model_dump(exclude_unset=True, exclude={"id"}).items():
        if value is not None:
            setattr(client, field, value)

    await ctx.db.commit()
    await ctx.db.refresh(client)
    return ClientResponse.model_validate(client)


@action(schema=ClientIdInput)
async def delete_client(ctx: ActionContext, data: ClientIdInput) -> ClientResponse:
    """
    Soft delete a client.

    Raises:
        ActionException: HAS_DEPENDENCIES while live work locations remain
    """
    client = await get_scoped(ctx.db, Client, data.id, ctx.organization_id, "Client")

    has_locations = await ctx.db.scalar(
        select(
            exists().where(
                WorkLocation.client_id == client.id,
                WorkLocation.deleted_at.is_(None),
            )
        )
    )
    if has_locations:
        raise ActionException(
            ErrorCode.HAS_DEPENDENCIES,
            CLIENT_ERROR_MESSAGES[ErrorCode.HAS_DEPENDENCIES],
        )

    client.soft_delete()
    await ctx.db.commit()
    await ctx.db.refresh(client)

    logger.info(
        f"Deleted client {client.id}",
        extra={"client_id": str(client.id), "organization_id": str(ctx.organization_id)},
    )
    return ClientResponse.model_validate(client)


# ============================================================================
# Error presentation
# ============================================================================

CLIENT_ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.CONFLICT: "A client with this email already exists",
    ErrorCode.HAS_DEPENDENCIES: (
        "This client cannot be deleted because it has associated work locations. "
        "Please remove or reassign them first."
    ),
    ErrorCode.NOT_FOUND: "Client not found. It may have already been deleted.",
    ErrorCode.FORBIDDEN: "You do not have permission to delete this client.",
    ErrorCode.VALIDATION_ERROR: "Please check the form for errors.",
    ErrorCode.DATABASE_ERROR: "A database error occurred. Please try again.",
    ErrorCode.UNKNOWN: "An unexpected error occurred. Please try again.",
}

# Errors shown inline in the delete dialog instead of closing it
BLOCKING_ERROR_CODES = frozenset({ErrorCode.HAS_DEPENDENCIES})


def is_blocking_error(code: ErrorCode | str) -> bool:
    return code in BLOCKING_ERROR_CODES


def get_client_error_message(error: ActionError) -> str:
    """User-facing message for a client action error, falling back to its own."""
    return CLIENT_ERROR_MESSAGES.get(error.code, error.message)


def get_duplicate_field(error: ActionError) -> str:
    """Field named by a CONFLICT error, ``email`` when unknown."""
    if error.details and error.details.get("field"):
        return str(error.details["field"])
    return "email"


__all__ = [
    "CLIENT_ERROR_MESSAGES",
    "create_client",
    "delete_client",
    "get_client",
    "get_client_error_message",
    "get_clients",
    "get_duplicate_field",
    "is_blocking_error",
    "update_client",
]
