"""
staffboard.services.auth - Auth Actions

Sign-in, registration, sign-out, profile and password management, and the
email-link callback. Every action returns an ActionResult.

Example:
    >>> result = await sign_in(ctx, {"email": "user@example.com", "password": "secret123"})
    >>> if is_success(result):
    ...     token = result.data.session.access_token
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from staffboard.actions.context import ActionContext, provision_profile
from staffboard.actions.errors import ActionException
from staffboard.actions.result import ErrorCode
from staffboard.actions.wrapper import action
from staffboard.auth.errors import AuthApiError
from staffboard.auth.models import AuthResponse
from staffboard.auth.pkce import generate_pkce_pair
from staffboard.models.organization import Profile
from staffboard.schemas.auth import (
    AuthCallbackInput,
    AuthCallbackResult,
    CurrentUserResponse,
    OkResponse,
    ProfileResponse,
    RecoveryRequested,
    ResetPasswordInput,
    SignInInput,
    SignUpInput,
    SignUpResult,
    UpdatePasswordInput,
    UpdateProfileInput,
)

logger = logging.getLogger(__name__)

DEFAULT_ORGANIZATION_NAME = "Organization"
RESET_PASSWORD_PATH = "/reset-password"
CALLBACK_ERROR_PATH = "/forgot-password"


@action(schema=SignInInput, require_auth=False)
async def sign_in(ctx: ActionContext, data: SignInInput) -> AuthResponse:
    """Sign in with email and password."""
    response = await ctx.auth.sign_in_with_password(data.email, data.password)
    logger.info(
        "User signed in",
        extra={"user_id": str(response.user.id) if response.user else None},
    )
    return response


@action(schema=SignUpInput, require_auth=False)
async def sign_up(ctx: ActionContext, data: SignUpInput) -> SignUpResult:
    """
    Register a new organization and its first admin.

    The account is created with the auth service first; the organization
    and an admin profile are then created in Postgres. If that write fails
    the account still works: the profile is provisioned from the signup
    metadata on the first session check.

    Returns:
        SignUpResult (session is None while email confirmation is pending;
        code_verifier must accompany the confirmation link's code)
    """
    code_verifier, challenge = generate_pkce_pair()
    response = await ctx.auth.sign_up(
        data.email,
        data.password,
        data={
            "first_name": data.first_name,
            "last_name": data.last_name,
            "organization_name": data.organization_name,
        },
        redirect_to=ctx.settings.auth_redirect_url("signup"),
        code_challenge=challenge,
    )
    if response.user is None:
        raise ActionException(ErrorCode.UNKNOWN, "Registration did not return a user")

    try:
        await provision_profile(
            ctx.db,
            response.user,
            first_name=data.first_name,
            last_name=data.last_name,
            organization_name=data.organization_name,
        )
    except SQLAlchemyError:
        await ctx.db.rollback()
        logger.warning(
            "Profile not created at registration; deferred to first sign-in",
            exc_info=True,
            extra={"user_id": str(response.user.id)},
        )
    return SignUpResult(user=response.user, session=response.session, code_verifier=code_verifier)


@action()
async def sign_out(ctx: ActionContext, data: None) -> OkResponse:
    """Revoke the caller's session."""
    await ctx.auth.sign_out(ctx.access_token)
    logger.info("User signed out", extra={"user_id": str(ctx.user_id)})
    return OkResponse()


@action(schema=UpdateProfileInput)
async def update_profile(ctx: ActionContext, data: UpdateProfileInput) -> ProfileResponse:
    profile = await ctx.db.get(Profile, ctx.user_id)
    if profile is None:
        raise ActionException(ErrorCode.NOT_FOUND, "Profile not found")

    profile.first_name = data.first_name
    profile.last_name = data.last_name
    await ctx.db.commit()
    await ctx.db.refresh(profile)
    return ProfileResponse.model_validate(profile)


@action()
async def get_current_user(ctx: ActionContext, data: None) -> CurrentUserResponse:
    """Return the signed-in user with profile and organization name."""
    session = ctx.session
    profile = session.profile
    return CurrentUserResponse(
        id=session.user.id,
        email=session.user.email,
        first_name=profile.first_name,
        last_name=profile.last_name,
        role=profile.role,
        organization_id=profile.organization_id,
        organization_name=session.organization_name or DEFAULT_ORGANIZATION_NAME,
    )


@action(schema=ResetPasswordInput, require_auth=False)
async def reset_password(ctx: ActionContext, data: ResetPasswordInput) -> RecoveryRequested:
    """
    Send a password reset email.

    Always succeeds so that callers cannot learn which emails have accounts.
    """
    code_verifier, challenge = generate_pkce_pair()
    try:
        await ctx.auth.reset_password_for_email(
            data.email,
            redirect_to=ctx.settings.auth_redirect_url("recovery"),
            code_challenge=challenge,
        )
    except AuthApiError as exc:
        if ctx.settings.is_development:
            logger.warning(f"Password reset request failed: {exc}", extra={"code": exc.code})
    return RecoveryRequested(code_verifier=code_verifier)


@action(schema=UpdatePasswordInput)
async def update_password(ctx: ActionContext, data: UpdatePasswordInput) -> OkResponse:
    await ctx.auth.update_user(ctx.access_token, password=data.new_password)
    logger.info("Password updated", extra={"user_id": str(ctx.user_id)})
    return OkResponse()


def sanitize_next(next_path: str | None) -> str:
    """Only same-site paths are allowed as post-login targets."""
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return "/"
    return next_path


def callback_error_path(code: ErrorCode) -> str:
    return f"{CALLBACK_ERROR_PATH}?error={code.value}"


@action(schema=AuthCallbackInput, require_auth=False)
async def handle_auth_callback(ctx: ActionContext, data: AuthCallbackInput) -> AuthCallbackResult:
    """
    Complete an email link: PKCE code exchange, else token hash verification.

    Returns:
        Path to redirect to: the reset-password page for recovery links,
        otherwise the sanitized ``next`` parameter

    Raises:
        ActionException: VALIDATION_ERROR when neither flow's parameters are present
    """
    if data.code and data.code_verifier:
        response = await ctx.auth.exchange_code_for_session(data.code, data.code_verifier)
    elif data.token_hash and data.type:
        response = await ctx.auth.verify_otp(data.token_hash, data.type)
    elif data.code:
        # The verifier cookie lives in the browser that requested the email
        raise ActionException(
            ErrorCode.VALIDATION_ERROR,
            "This link must be opened in the browser it was requested from",
            field_errors={"code_verifier": ["Missing code verifier"]},
        )
    else:
        raise ActionException(ErrorCode.VALIDATION_ERROR, "Missing authentication parameters")

    if data.type == "recovery":
        redirect_to = RESET_PASSWORD_PATH
    else:
        redirect_to = sanitize_next(data.next)
    return AuthCallbackResult(redirect_to=redirect_to, session=response.session)


__all__ = [
    "callback_error_path",
    "get_current_user",
    "handle_auth_callback",
    "reset_password",
    "sanitize_next",
    "sign_in",
    "sign_out",
    "sign_up",
    "update_password",
    "update_profile",
]
