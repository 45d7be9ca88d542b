"""
Unit tests for staffboard.services.auth - Auth Actions
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from staffboard.actions.result import ErrorCode, is_failure, is_success
from staffboard.auth.errors import AuthApiError
from staffboard.auth.models import AuthResponse, AuthSession, AuthUser
from staffboard.auth.pkce import code_challenge
from staffboard.models.organization import Organization, Profile
from staffboard.services.auth import (
    callback_error_path,
    get_current_user,
    handle_auth_callback,
    reset_password,
    sanitize_next,
    sign_in,
    sign_out,
    sign_up,
    update_password,
    update_profile,
)

SIGN_UP_INPUT = {
    "email": "anna@agency.example",
    "password": "secret123",
    "first_name": "Anna",
    "last_name": "Nowak",
    "organization_name": "Nowak Staffing",
}


def auth_response(user_id=None, with_session=True) -> AuthResponse:
    user = AuthUser(id=user_id or uuid4(), email="anna@agency.example")
    session = AuthSession(access_token="access-1", refresh_token="refresh-1", user=user)
    return AuthResponse(user=user, session=session if with_session else None)


class TestSignIn:
    @pytest.mark.asyncio
    async def test_success(self, anonymous_ctx, auth):
        auth.sign_in_with_password = AsyncMock(return_value=auth_response())

        result = await sign_in(anonymous_ctx, {"email": "anna@agency.example", "password": "secret123"})

        assert is_success(result)
        assert result.data.session.access_token == "access-1"
        auth.sign_in_with_password.assert_awaited_once_with("anna@agency.example", "secret123")

    @pytest.mark.asyncio
    async def test_invalid_credentials(self, anonymous_ctx, auth):
        auth.sign_in_with_password = AsyncMock(
            side_effect=AuthApiError("Invalid login credentials", 400, "invalid_credentials")
        )

        result = await sign_in(anonymous_ctx, {"email": "anna@agency.example", "password": "wrong-pass"})

        assert is_failure(result)
        assert result.error.code == ErrorCode.UNAUTHORIZED
        assert result.error.message == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_rate_limited_by_auth_service(self, anonymous_ctx, auth):
        auth.sign_in_with_password = AsyncMock(
            side_effect=AuthApiError("Too many", 429, "over_request_rate_limit")
        )

        result = await sign_in(anonymous_ctx, {"email": "anna@agency.example", "password": "secret123"})
        assert result.error.code == ErrorCode.RATE_LIMITED

    @pytest.mark.asyncio
    async def test_invalid_email_skips_auth_service(self, anonymous_ctx, auth):
        result = await sign_in(anonymous_ctx, {"email": "anna", "password": "secret123"})

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert "email" in result.error.field_errors
        auth.sign_in_with_password.assert_not_called()


class TestSignUp:
    @pytest.mark.asyncio
    async def test_creates_organization_and_admin_profile(self, anonymous_ctx, auth, db, settings):
        user_id = uuid4()
        auth.sign_up = AsyncMock(return_value=auth_response(user_id, with_session=False))

        result = await sign_up(anonymous_ctx, SIGN_UP_INPUT)

        assert is_success(result)
        _, kwargs = auth.sign_up.call_args
        assert kwargs["redirect_to"] == f"{settings.site_url}/auth/callback?type=signup"
        assert kwargs["data"]["organization_name"] == "Nowak Staffing"
        assert kwargs["code_challenge"] == code_challenge(result.data.code_verifier)
        assert "code_verifier" not in result.model_dump(mode="json")["data"]

        added = [call.args[0] for call in db.add.call_args_list]
        organization = next(obj for obj in added if isinstance(obj, Organization))
        profile = next(obj for obj in added if isinstance(obj, Profile))
        assert organization.name == "Nowak Staffing"
        assert profile.id == user_id
        assert profile.organization_id == organization.id
        assert profile.role == "admin"
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_existing_account(self, anonymous_ctx, auth, db):
        auth.sign_up = AsyncMock(
            side_effect=AuthApiError("User already registered", 422, "user_already_exists")
        )

        result = await sign_up(anonymous_ctx, SIGN_UP_INPUT)

        assert result.error.code == ErrorCode.CONFLICT
        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_profile_write_failure_keeps_account_usable(self, anonymous_ctx, auth, db):
        user_id = uuid4()
        auth.sign_up = AsyncMock(return_value=auth_response(user_id, with_session=False))
        db.commit.side_effect = OperationalError("INSERT INTO profiles", {}, Exception("gone"))

        result = await sign_up(anonymous_ctx, SIGN_UP_INPUT)

        # The auth account exists, so registration reports success; the
        # profile is provisioned from signup metadata on first sign-in.
        assert is_success(result)
        assert result.data.user.id == user_id
        db.rollback.assert_awaited()


class TestSessionActions:
    @pytest.mark.asyncio
    async def test_sign_out(self, ctx, auth):
        auth.sign_out = AsyncMock(return_value=None)

        result = await sign_out(ctx)

        assert result.data.success is True
        auth.sign_out.assert_awaited_once_with("access-token")

    @pytest.mark.asyncio
    async def test_sign_out_requires_session(self, anonymous_ctx):
        result = await sign_out(anonymous_ctx)
        assert result.error.code == ErrorCode.UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_get_current_user(self, ctx, user_id, organization_id):
        result = await get_current_user(ctx)

        assert result.data.id == user_id
        assert result.data.first_name == "Anna"
        assert result.data.role == "admin"
        assert result.data.organization_id == organization_id
        # profile without a loaded organization
        assert result.data.organization_name == "Organization"

    @pytest.mark.asyncio
    async def test_update_profile(self, ctx, db, profile):
        db.get.return_value = profile

        result = await update_profile(ctx, {"first_name": " Anne ", "last_name": "Nowak-Kowalska"})

        assert result.data.first_name == "Anne"
        assert result.data.last_name == "Nowak-Kowalska"
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_profile_missing(self, ctx, db):
        db.get.return_value = None
        result = await update_profile(ctx, {"first_name": "Anne", "last_name": "Nowak"})
        assert result.error.code == ErrorCode.NOT_FOUND


class TestPasswords:
    @pytest.mark.asyncio
    async def test_reset_password_sends_recovery_link(self, anonymous_ctx, auth, settings):
        auth.reset_password_for_email = AsyncMock(return_value=None)

        result = await reset_password(anonymous_ctx, {"email": "anna@agency.example"})

        assert is_success(result)
        auth.reset_password_for_email.assert_awaited_once_with(
            "anna@agency.example",
            redirect_to=f"{settings.site_url}/auth/callback?type=recovery",
            code_challenge=code_challenge(result.data.code_verifier),
        )

    @pytest.mark.asyncio
    async def test_reset_password_hides_unknown_email(self, anonymous_ctx, auth):
        auth.reset_password_for_email = AsyncMock(
            side_effect=AuthApiError("User not found", 404, "user_not_found")
        )

        result = await reset_password(anonymous_ctx, {"email": "nobody@agency.example"})

        assert is_success(result)
        assert result.data.success is True

    @pytest.mark.asyncio
    async def test_update_password(self, ctx, auth):
        auth.update_user = AsyncMock(return_value=AuthUser(id=uuid4()))

        result = await update_password(ctx, {"new_password": "brand-new-secret"})

        assert is_success(result)
        auth.update_user.assert_awaited_once_with("access-token", password="brand-new-secret")

    @pytest.mark.asyncio
    async def test_update_password_same_password(self, ctx, auth):
        auth.update_user = AsyncMock(
            side_effect=AuthApiError("New password should be different", 422, "same_password")
        )

        result = await update_password(ctx, {"new_password": "same-old-secret"})

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert result.error.message == "New password must be different from current password"


class TestAuthCallback:
    @pytest.mark.asyncio
    async def test_code_exchange_wins(self, anonymous_ctx, auth):
        auth.exchange_code_for_session = AsyncMock(return_value=auth_response())
        auth.verify_otp = AsyncMock()

        result = await handle_auth_callback(
            anonymous_ctx,
            {
                "code": "pkce-code",
                "code_verifier": "verifier-1",
                "token_hash": "hash",
                "type": "signup",
                "next": "/workers",
            },
        )

        assert result.data.redirect_to == "/workers"
        assert result.data.session.access_token == "access-1"
        auth.exchange_code_for_session.assert_awaited_once_with("pkce-code", "verifier-1")
        auth.verify_otp.assert_not_called()

    @pytest.mark.asyncio
    async def test_code_without_verifier_falls_back_to_token_hash(self, anonymous_ctx, auth):
        auth.exchange_code_for_session = AsyncMock()
        auth.verify_otp = AsyncMock(return_value=auth_response())

        result = await handle_auth_callback(
            anonymous_ctx, {"code": "pkce-code", "token_hash": "hash", "type": "signup"}
        )

        assert is_success(result)
        auth.exchange_code_for_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_code_without_verifier(self, anonymous_ctx, auth):
        auth.exchange_code_for_session = AsyncMock()

        result = await handle_auth_callback(anonymous_ctx, {"code": "pkce-code"})

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert "code_verifier" in result.error.field_errors
        auth.exchange_code_for_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_recovery_redirects_to_reset_page(self, anonymous_ctx, auth):
        auth.verify_otp = AsyncMock(return_value=auth_response())

        result = await handle_auth_callback(
            anonymous_ctx, {"token_hash": "hash", "type": "recovery", "next": "/clients"}
        )

        assert result.data.redirect_to == "/reset-password"
        auth.verify_otp.assert_awaited_once_with("hash", "recovery")

    @pytest.mark.asyncio
    async def test_missing_parameters(self, anonymous_ctx):
        result = await handle_auth_callback(anonymous_ctx, {"type": "signup"})
        assert result.error.code == ErrorCode.VALIDATION_ERROR

    @pytest.mark.asyncio
    async def test_expired_link(self, anonymous_ctx, auth):
        auth.verify_otp = AsyncMock(
            side_effect=AuthApiError("Token has expired", 403, "otp_expired")
        )

        result = await handle_auth_callback(anonymous_ctx, {"token_hash": "hash", "type": "signup"})

        assert result.error.code == ErrorCode.SESSION_EXPIRED
        assert callback_error_path(result.error.code) == "/forgot-password?error=SESSION_EXPIRED"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "/"),
        ("", "/"),
        ("/workers", "/workers"),
        ("https://evil.example", "/"),
        ("//evil.example", "/"),
    ],
)
def test_sanitize_next(value, expected):
    assert sanitize_next(value) == expected
