"""
Unit tests for staffboard.services.clients - Client Actions

Actions run against a mocked AsyncSession; SQL is not executed.
"""

from datetime import UTC, datetime
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from staffboard.actions.result import ActionError, ErrorCode, is_failure, is_success
from staffboard.models.client import Client
from staffboard.services.clients import (
    CLIENT_ERROR_MESSAGES,
    create_client,
    delete_client,
    get_client,
    get_client_error_message,
    get_clients,
    get_duplicate_field,
    is_blocking_error,
    update_client,
)

CLIENT_INPUT = {
    "name": "Acme Corp",
    "email": "contact@acme.com",
    "phone": "+48 123 456 789",
    "address": "ul. Glowna 1, 00-001 Warszawa",
}


def make_client(organization_id, **overrides) -> Client:
    values = {
        "id": uuid4(),
        "organization_id": organization_id,
        "created_at": datetime(2026, 1, 5, tzinfo=UTC),
        "updated_at": datetime(2026, 1, 5, tzinfo=UTC),
        **CLIENT_INPUT,
    }
    values.update(overrides)
    return Client(**values)


class _UniqueViolation(Exception):
    sqlstate = "23505"
    detail = "Key (organization_id, email)=(..., contact@acme.com) already exists."
    constraint_name = "uq_clients_email"


@pytest.mark.asyncio
async def test_create_client(ctx, db, organization_id):
    result = await create_client(ctx, CLIENT_INPUT)

    assert is_success(result)
    assert result.data.name == "Acme Corp"
    assert result.data.organization_id == organization_id
    added = db.add.call_args.args[0]
    assert isinstance(added, Client)
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_client_duplicate_email(ctx, db):
    db.commit.side_effect = IntegrityError("INSERT INTO clients", {}, _UniqueViolation())

    result = await create_client(ctx, CLIENT_INPUT)

    assert result.error.code == ErrorCode.CONFLICT
    assert get_duplicate_field(result.error) == "email"
    assert get_client_error_message(result.error) == "A client with this email already exists"
    db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_client_invalid_input_touches_nothing(ctx, db):
    result = await create_client(ctx, {**CLIENT_INPUT, "phone": "abc"})

    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert result.error.field_errors == {"phone": ["Invalid phone format"]}
    db.add.assert_not_called()


@pytest.mark.asyncio
async def test_create_client_requires_session(anonymous_ctx):
    result = await create_client(anonymous_ctx, CLIENT_INPUT)
    assert result.error.code == ErrorCode.UNAUTHORIZED


@pytest.mark.asyncio
async def test_get_client_not_found(ctx, db, make_result):
    db.execute.return_value = make_result(None)

    result = await get_client(ctx, {"id": str(uuid4())})

    assert result.error.code == ErrorCode.NOT_FOUND
    assert result.error.message == "Client not found"


@pytest.mark.asyncio
async def test_get_client_rejects_malformed_id(ctx):
    result = await get_client(ctx, {"id": "not-a-uuid"})
    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert "id" in result.error.field_errors


@pytest.mark.asyncio
async def test_get_clients_paginates(ctx, db, organization_id, make_result):
    clients = [make_client(organization_id, name="Acme"), make_client(organization_id, name="Beta")]
    db.execute.side_effect = [make_result(12), make_result(clients)]

    result = await get_clients(ctx, {"page": 2, "page_size": 2, "search": "a"})

    assert is_success(result)
    assert [item.name for item in result.data.data] == ["Acme", "Beta"]
    assert result.data.pagination.total_items == 12
    assert result.data.pagination.total_pages == 6
    assert result.data.pagination.has_previous_page is True


@pytest.mark.asyncio
async def test_update_client_writes_only_given_fields(ctx, db, organization_id, make_result):
    client = make_client(organization_id)
    db.execute.return_value = make_result(client)

    result = await update_client(ctx, {"id": str(client.id), "address": "ul. Nowa 5"})

    assert result.data.address == "ul. Nowa 5"
    assert result.data.name == "Acme Corp"
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_client_soft_deletes(ctx, db, organization_id, make_result):
    client = make_client(organization_id)
    db.execute.return_value = make_result(client)
    db.scalar.return_value = False

    result = await delete_client(ctx, {"id": str(client.id)})

    assert is_success(result)
    assert result.data.deleted_at is not None
    assert client.is_deleted


@pytest.mark.asyncio
async def test_delete_client_with_locations_is_blocked(ctx, db, organization_id, make_result):
    client = make_client(organization_id)
    db.execute.return_value = make_result(client)
    db.scalar.return_value = True

    result = await delete_client(ctx, {"id": str(client.id)})

    assert is_failure(result)
    assert result.error.code == ErrorCode.HAS_DEPENDENCIES
    assert is_blocking_error(result.error.code)
    assert client.deleted_at is None
    db.commit.assert_not_called()


class TestErrorPresentation:
    def test_only_dependencies_block(self):
        assert is_blocking_error(ErrorCode.HAS_DEPENDENCIES)
        assert not is_blocking_error(ErrorCode.NOT_FOUND)
        assert not is_blocking_error(ErrorCode.CONFLICT)

    def test_message_falls_back_to_error(self):
        error = ActionError(code=ErrorCode.RATE_LIMITED, message="Slow down")
        assert get_client_error_message(error) == "Slow down"

    def test_known_message(self):
        error = ActionError(code=ErrorCode.NOT_FOUND, message="Client not found")
        assert get_client_error_message(error) == CLIENT_ERROR_MESSAGES[ErrorCode.NOT_FOUND]

    def test_duplicate_field_from_details(self):
        error = ActionError(code=ErrorCode.CONFLICT, message="dup", details={"field": "phone"})
        assert get_duplicate_field(error) == "phone"

    def test_duplicate_field_default(self):
        assert get_duplicate_field(ActionError(code=ErrorCode.CONFLICT, message="dup")) == "email"
