"""
Unit tests for staffboard.models - shared columns and engine setup.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

import staffboard.models.database as database
from staffboard.models.client import Client
from staffboard.settings import StaffboardSettings


def test_soft_delete_marks_row():
    client = Client(id=uuid4(), organization_id=uuid4(), name="Acme")
    assert not client.is_deleted

    client.soft_delete()

    assert client.is_deleted
    assert client.deleted_at.tzinfo is not None


def test_soft_delete_at_given_time():
    client = Client(id=uuid4(), organization_id=uuid4(), name="Acme")
    at = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

    client.soft_delete(at)

    assert client.deleted_at == at


@pytest.fixture
def fake_engine_factory(monkeypatch):
    monkeypatch.setattr(
        database,
        "get_settings",
        lambda: StaffboardSettings(
            _env_file=None,
            database_url="postgresql+asyncpg://db.internal/staffboard",
            database_echo=True,
        ),
    )
    factory = MagicMock()
    monkeypatch.setattr(database, "create_async_engine", factory)
    return factory


def test_get_engine_defaults_from_settings(fake_engine_factory):
    database.get_engine()

    args, kwargs = fake_engine_factory.call_args
    assert args == ("postgresql+asyncpg://db.internal/staffboard",)
    assert kwargs["echo"] is True
    assert kwargs["pool_pre_ping"] is True


def test_get_engine_explicit_arguments_win(fake_engine_factory):
    database.get_engine("postgresql+asyncpg://other/db", echo=False)

    args, kwargs = fake_engine_factory.call_args
    assert args == ("postgresql+asyncpg://other/db",)
    assert kwargs["echo"] is False


@pytest.mark.asyncio
async def test_init_db_disposes_engine_on_failure(fake_engine_factory):
    engine = fake_engine_factory.return_value
    engine.begin.side_effect = OSError("connection refused")
    engine.dispose = AsyncMock()

    with pytest.raises(OSError):
        await database.init_db()

    engine.dispose.assert_awaited_once()
