"""
Unit tests for staffboard.services.shared.query_helpers

Statements are compiled with the PostgreSQL dialect and inspected as SQL.
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from staffboard.actions.errors import ActionException
from staffboard.actions.result import ErrorCode
from staffboard.models.assignment import Assignment
from staffboard.models.client import Client
from staffboard.services.shared.query_helpers import (
    apply_pagination,
    apply_search_filter,
    apply_soft_delete_filter,
    apply_sort,
    build_search_filter,
    count_rows,
    escape_like,
    get_scoped,
)


def sql(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


def test_escape_like():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


@pytest.mark.parametrize("term", [None, "", "   "])
def test_blank_search_builds_nothing(term):
    assert build_search_filter(term, [Client.name]) is None


def test_search_filter_ors_ilike_over_columns():
    condition = build_search_filter(" acme ", [Client.name, Client.email])
    compiled = condition.compile(dialect=postgresql.dialect())
    text = str(compiled)

    assert text.count("ILIKE") == 2
    assert " OR " in text
    assert "%acme%" in compiled.params.values()


def test_soft_delete_filter():
    query = select(Client)
    assert "deleted_at IS NULL" in sql(apply_soft_delete_filter(query, Client))
    assert "WHERE" not in sql(apply_soft_delete_filter(query, Client, include_deleted=True))


def test_search_filter_none_leaves_query():
    query = select(Client)
    assert apply_search_filter(query, None) is query


def test_sort_and_pagination():
    query = apply_pagination(apply_sort(select(Client), Client.name, "desc"), page=3, page_size=10)
    compiled = query.compile(dialect=postgresql.dialect())

    assert "ORDER BY clients.name DESC" in str(compiled)
    assert "LIMIT" in str(compiled)
    assert {10, 20} <= set(compiled.params.values())


@pytest.mark.asyncio
async def test_count_rows(db, make_result):
    db.execute.return_value = make_result(12)
    assert await count_rows(db, select(Client).order_by(Client.name)) == 12

    counted = db.execute.call_args.args[0]
    assert "count(*)" in sql(counted)
    assert "ORDER BY" not in sql(counted)


@pytest.mark.asyncio
async def test_get_scoped_returns_record(db, make_result):
    client = Client(name="Acme")
    db.execute.return_value = make_result(client)

    found = await get_scoped(db, Client, uuid4(), uuid4(), "Client")

    assert found is client
    statement = sql(db.execute.call_args.args[0])
    assert "clients.organization_id" in statement
    assert "deleted_at IS NULL" in statement


@pytest.mark.asyncio
async def test_get_scoped_missing_raises_not_found(db, make_result):
    db.execute.return_value = make_result(None)

    with pytest.raises(ActionException) as exc_info:
        await get_scoped(db, Client, uuid4(), uuid4(), "Client")

    assert exc_info.value.code == ErrorCode.NOT_FOUND
    assert exc_info.value.message == "Client not found"


@pytest.mark.asyncio
async def test_get_scoped_for_update_without_soft_delete(db, make_result):
    db.execute.return_value = make_result(MagicMock())

    await get_scoped(db, Assignment, uuid4(), uuid4(), "Assignment", for_update=True)

    statement = sql(db.execute.call_args.args[0])
    assert "FOR UPDATE" in statement
    assert "deleted_at" not in statement
