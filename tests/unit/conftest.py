"""
Shared fixtures for staffboard unit tests.

Actions run against a MagicMock(spec=AsyncSession): async methods become
AsyncMocks, add() stays synchronous.
"""

from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from staffboard.actions.context import ActionContext, SessionResult
from staffboard.auth.client import AuthClient
from staffboard.auth.models import AuthUser
from staffboard.models.organization import Profile, UserRole
from staffboard.settings import StaffboardSettings

FIXED_NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


def result_returning(value: Any) -> MagicMock:
    """Fake Result whose scalar accessors all return value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    result.scalar.return_value = value
    result.scalars.return_value.all.return_value = value if isinstance(value, list) else [value]
    result.all.return_value = value if isinstance(value, list) else [value]
    return result


async def stamp_on_refresh(obj: Any, *args: Any, **kwargs: Any) -> None:
    """Stand-in for AsyncSession.refresh filling server defaults."""
    if getattr(obj, "id", None) is None:
        obj.id = uuid4()
    for name in ("created_at", "updated_at"):
        if hasattr(obj, name) and getattr(obj, name) is None:
            setattr(obj, name, FIXED_NOW)


@pytest.fixture
def settings() -> StaffboardSettings:
    return StaffboardSettings(_env_file=None)


@pytest.fixture
def db() -> MagicMock:
    session = MagicMock(spec=AsyncSession)
    session.refresh.side_effect = stamp_on_refresh
    return session


@pytest.fixture
def auth() -> MagicMock:
    return MagicMock(spec=AuthClient)


@pytest.fixture
def organization_id():
    return uuid4()


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def profile(user_id, organization_id) -> Profile:
    return Profile(
        id=user_id,
        organization_id=organization_id,
        first_name="Anna",
        last_name="Nowak",
        role=UserRole.ADMIN.value,
    )


@pytest.fixture
def session_result(user_id, profile) -> SessionResult:
    return SessionResult(user=AuthUser(id=user_id, email="anna@agency.example"), profile=profile)


@pytest.fixture
def ctx(db, auth, session_result, settings) -> ActionContext:
    """Context of a signed-in admin; no auth service round trip needed."""
    return ActionContext(
        db=db,
        auth=auth,
        access_token="access-token",
        session=session_result,
        settings=settings,
    )


@pytest.fixture
def anonymous_ctx(db, auth, settings) -> ActionContext:
    return ActionContext(db=db, auth=auth, settings=settings)


@pytest.fixture
def auth_user_factory():
    def make(**overrides: Any) -> AuthUser:
        values = {"id": uuid4(), "email": "anna@agency.example"}
        values.update(overrides)
        return AuthUser(**values)

    return make


@pytest.fixture
def make_result():
    return result_returning
