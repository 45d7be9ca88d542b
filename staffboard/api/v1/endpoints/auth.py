"""
staffboard.api.v1.endpoints.auth - Authentication Endpoints

Thin HTTP transport over the auth actions. Sign-in and password reset are
rate limited per client IP.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from staffboard.actions.context import ActionContext
from staffboard.actions.result import ActionResult, is_success
from staffboard.api.deps import (
    ACCESS_TOKEN_COOKIE,
    CODE_VERIFIER_COOKIE,
    CODE_VERIFIER_MAX_AGE,
    REFRESH_TOKEN_COOKIE,
    Ctx,
    query_payload,
    to_response,
)
from staffboard.api.ratelimit import limit
from staffboard.services import auth as auth_actions

logger = logging.getLogger(__name__)

router = APIRouter()

Payload = Annotated[dict[str, Any] | None, Body()]


def _with_verifier_cookie(
    ctx: ActionContext, response: JSONResponse, result: ActionResult[Any]
) -> JSONResponse:
    """Keep the PKCE verifier of an emailed link in the requesting browser."""
    code_verifier = getattr(result.data, "code_verifier", None) if is_success(result) else None
    if code_verifier:
        response.set_cookie(
            CODE_VERIFIER_COOKIE,
            code_verifier,
            max_age=CODE_VERIFIER_MAX_AGE,
            httponly=True,
            secure=not ctx.settings.is_development,
            samesite="lax",
        )
    return response


@router.post("/sign-in", dependencies=[Depends(limit("sign_in_limiter"))])
async def sign_in(ctx: Ctx, payload: Payload = None) -> JSONResponse:
    """Sign in with email and password; the session tokens are in ``data.session``."""
    return to_response(await auth_actions.sign_in(ctx, payload))


@router.post("/sign-up")
async def sign_up(ctx: Ctx, payload: Payload = None) -> JSONResponse:
    result = await auth_actions.sign_up(ctx, payload)
    return _with_verifier_cookie(ctx, to_response(result, status.HTTP_201_CREATED), result)


@router.post("/sign-out")
async def sign_out(ctx: Ctx) -> JSONResponse:
    response = to_response(await auth_actions.sign_out(ctx))
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)
    return response


@router.get("/me")
async def get_current_user(ctx: Ctx) -> JSONResponse:
    return to_response(await auth_actions.get_current_user(ctx))


@router.put("/profile")
async def update_profile(ctx: Ctx, payload: Payload = None) -> JSONResponse:
    return to_response(await auth_actions.update_profile(ctx, payload))


@router.post("/reset-password", dependencies=[Depends(limit("password_reset_limiter"))])
async def reset_password(ctx: Ctx, payload: Payload = None) -> JSONResponse:
    """Always answers with success so account existence is not revealed."""
    result = await auth_actions.reset_password(ctx, payload)
    return _with_verifier_cookie(ctx, to_response(result), result)


@router.post("/update-password")
async def update_password(ctx: Ctx, payload: Payload = None) -> JSONResponse:
    return to_response(await auth_actions.update_password(ctx, payload))


@router.get("/callback")
async def auth_callback(ctx: Ctx, request: Request) -> RedirectResponse:
    """
    Landing point of email confirmation and recovery links.

    Redirects to the dashboard on success (storing the session in cookies)
    and to the forgot-password page with an error code otherwise.
    """
    site_url = ctx.settings.site_url
    payload = query_payload(request)
    payload["code_verifier"] = request.cookies.get(CODE_VERIFIER_COOKIE)
    result = await auth_actions.handle_auth_callback(ctx, payload)

    if not is_success(result):
        logger.info(
            f"Auth callback failed: {result.error.code.value}",
            extra={"error_code": result.error.code.value},
        )
        return RedirectResponse(
            f"{site_url}{auth_actions.callback_error_path(result.error.code)}",
            status_code=status.HTTP_303_SEE_OTHER,
        )

    response = RedirectResponse(
        f"{site_url}{result.data.redirect_to}", status_code=status.HTTP_303_SEE_OTHER
    )
    response.delete_cookie(CODE_VERIFIER_COOKIE)

    session = result.data.session
    if session is not None:
        secure = not ctx.settings.is_development
        response.set_cookie(
            ACCESS_TOKEN_COOKIE,
            session.access_token,
            max_age=session.expires_in,
            httponly=True,
            secure=secure,
            samesite="lax",
        )
        if session.refresh_token:
            response.set_cookie(
                REFRESH_TOKEN_COOKIE,
                session.refresh_token,
                httponly=True,
                secure=secure,
                samesite="lax",
            )
    return response
