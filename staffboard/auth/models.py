"""
staffboard.auth.models - Auth Service Payloads

Pydantic models for the users and sessions returned by the auth service.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """User record as returned by the auth service."""

    model_config = ConfigDict(extra="ignore")

    id: UUID
    email: str | None = None
    phone: str | None = None
    role: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    app_metadata: dict[str, Any] = Field(default_factory=dict)
    email_confirmed_at: datetime | None = None
    last_sign_in_at: datetime | None = None
    created_at: datetime | None = None


class AuthSession(BaseModel):
    """Access/refresh token pair issued by the auth service."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    expires_at: int | None = None
    user: AuthUser | None = None


class AuthResponse(BaseModel):
    """
    Result of sign-in / sign-up style calls.

    ``session`` is None when the account still needs email confirmation.
    """

    user: AuthUser | None = None
    session: AuthSession | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AuthResponse":
        """Normalize the token and signup response shapes."""
        if "access_token" in payload:
            session = AuthSession.model_validate(payload)
            return cls(user=session.user, session=session)
        if isinstance(payload.get("user"), dict):
            return cls(user=AuthUser.model_validate(payload["user"]))
        if "id" in payload:
            return cls(user=AuthUser.model_validate(payload))
        return cls()


__all__ = ["AuthResponse", "AuthSession", "AuthUser"]
