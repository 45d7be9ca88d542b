"""
staffboard.schemas.auth - Auth Schemas

Inputs of the auth actions and the user/profile views they return.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from staffboard.auth.models import AuthResponse, AuthSession
from staffboard.schemas.shared import InputModel, NewPassword, UserRoleName, required_text

FirstName = required_text("First name", 100)
LastName = required_text("Last name", 100)
OrganizationName = required_text("Organization name", 200)


class SignInInput(InputModel):
    email: EmailStr
    password: NewPassword


class SignUpInput(InputModel):
    """Registration of a new organization and its first admin."""

    email: EmailStr
    password: NewPassword
    first_name: FirstName
    last_name: LastName
    organization_name: OrganizationName


class UpdateProfileInput(InputModel):
    first_name: FirstName
    last_name: LastName


class ResetPasswordInput(InputModel):
    email: EmailStr


class UpdatePasswordInput(InputModel):
    new_password: NewPassword


class AuthCallbackInput(InputModel):
    """
    Query parameters of the auth callback link.

    Either ``code`` (PKCE exchange, needs the ``code_verifier`` issued with
    the email) or ``token_hash`` + ``type`` (email verification) must be
    present.
    """

    code: str | None = None
    code_verifier: str | None = None
    token_hash: str | None = None
    type: str | None = None
    next: str | None = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    first_name: str
    last_name: str
    role: UserRoleName


class CurrentUserResponse(BaseModel):
    """Signed-in user with profile and organization."""

    id: UUID
    email: str | None
    first_name: str
    last_name: str
    role: UserRoleName
    organization_id: UUID
    organization_name: str | None


class AuthCallbackResult(BaseModel):
    redirect_to: str
    session: AuthSession | None = None


class OkResponse(BaseModel):
    success: bool = True


# The PKCE verifier is handed to the HTTP layer (which keeps it in a cookie)
# and never serialized into the response body.


class SignUpResult(AuthResponse):
    code_verifier: str | None = Field(default=None, exclude=True)


class RecoveryRequested(OkResponse):
    code_verifier: str | None = Field(default=None, exclude=True)


__all__ = [
    "AuthCallbackInput",
    "AuthCallbackResult",
    "CurrentUserResponse",
    "OkResponse",
    "ProfileResponse",
    "RecoveryRequested",
    "ResetPasswordInput",
    "SignInInput",
    "SignUpInput",
    "SignUpResult",
    "UpdatePasswordInput",
    "UpdateProfileInput",
]
