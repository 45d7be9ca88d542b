"""
staffboard.api.deps - FastAPI Dependencies

Provides reusable dependencies for API endpoints:
- get_db: Database session
- get_auth_client: Shared auth service client
- get_action_context: ActionContext for the current request (bearer token
  or access-token cookie)

and the helpers that turn an ActionResult into an HTTP response.
"""

import logging
from collections.abc import AsyncGenerator, Iterable
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from staffboard.actions.context import ActionContext
from staffboard.actions.result import ActionResult, ErrorCode, Failure
from staffboard.auth.client import AuthClient
from staffboard.settings import get_settings

logger = logging.getLogger(__name__)

# Security scheme for bearer access tokens
security = HTTPBearer(auto_error=False)

ACCESS_TOKEN_COOKIE = "staffboard-access-token"
REFRESH_TOKEN_COOKIE = "staffboard-refresh-token"
# PKCE verifier of the last sign-up / recovery email, read by the auth callback
CODE_VERIFIER_COOKIE = "staffboard-code-verifier"
CODE_VERIFIER_MAX_AGE = 60 * 60 * 24

# HTTP status for each failure code
STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.SESSION_EXPIRED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.HAS_DEPENDENCIES: 409,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.DATABASE_ERROR: 500,
    ErrorCode.UNKNOWN: 500,
}


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session from app state.

    Yields:
        AsyncSession for database operations

    Raises:
        HTTPException: If database is not initialized
    """
    sessionmaker = getattr(request.app.state, "sessionmaker", None)
    if sessionmaker is None:
        logger.error("Database not initialized")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not available",
        )

    async with sessionmaker() as session:
        yield session


# Type alias for database dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_auth_client(request: Request) -> AuthClient:
    auth_client = getattr(request.app.state, "auth_client", None)
    if auth_client is None:
        logger.error("Auth client not initialized")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service not available",
        )
    return auth_client


AuthService = Annotated[AuthClient, Depends(get_auth_client)]


async def get_action_context(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: DBSession,
    auth: AuthService,
) -> ActionContext:
    """
    Build the ActionContext for this request.

    The session itself is resolved lazily by the action wrapper, so public
    actions never call the auth service.
    """
    token = credentials.credentials if credentials else request.cookies.get(ACCESS_TOKEN_COOKIE)
    settings = getattr(request.app.state, "settings", None) or get_settings()
    return ActionContext(db=db, auth=auth, access_token=token, settings=settings)


# Type alias for action context dependency
Ctx = Annotated[ActionContext, Depends(get_action_context)]


def status_for(result: ActionResult[Any], success_status: int = status.HTTP_200_OK) -> int:
    if isinstance(result, Failure):
        return STATUS_BY_CODE.get(result.error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return success_status


def to_response(
    result: ActionResult[Any],
    success_status: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """
    Render an ActionResult as its JSON envelope.

    Args:
        result: Action outcome
        success_status: Status code for a Success (201 for creates)
        headers: Extra response headers

    Returns:
        JSONResponse with ``{"success": ..., "data"|"error": ...}``
    """
    body = result.model_dump(mode="json", exclude_none=isinstance(result, Failure))
    return JSONResponse(
        status_code=status_for(result, success_status),
        content=body,
        headers=headers,
    )


def query_payload(request: Request, list_fields: Iterable[str] = ()) -> dict[str, Any]:
    """
    Collect query parameters into an action payload.

    Args:
        request: Incoming request
        list_fields: Parameters that may repeat (``?status=a&status=b``)
    """
    list_fields = set(list_fields)
    payload: dict[str, Any] = {}
    for key in request.query_params:
        if key in list_fields:
            payload[key] = request.query_params.getlist(key)
        else:
            payload[key] = request.query_params[key]
    return payload


__all__ = [
    "ACCESS_TOKEN_COOKIE",
    "CODE_VERIFIER_COOKIE",
    "CODE_VERIFIER_MAX_AGE",
    "REFRESH_TOKEN_COOKIE",
    "STATUS_BY_CODE",
    "AuthService",
    "Ctx",
    "DBSession",
    "get_action_context",
    "get_auth_client",
    "get_db",
    "query_payload",
    "status_for",
    "to_response",
]
