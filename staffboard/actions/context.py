"""
staffboard.actions.context - Action Context and Session Check

The caller supplies an ActionContext (database session, auth client and
the caller's access token). Session state is resolved per call from that
context; nothing here is process-wide.

Session check: the access token is validated with the auth service, then
the caller's profile (role and organization) is loaded from Postgres. A user
who signed up but has no profile yet (the registration write failed) gets
their organization and admin profile created from the signup metadata.
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from staffboard.actions.errors import AuthenticationError
from staffboard.auth.client import AuthClient
from staffboard.auth.errors import AuthApiError
from staffboard.auth.models import AuthUser
from staffboard.models.organization import Organization, Profile, UserRole
from staffboard.settings import StaffboardSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionResult:
    """
    Outcome of a session check.

    All fields are None for anonymous callers.
    """

    user: AuthUser | None = None
    profile: Profile | None = None

    @property
    def role(self) -> str | None:
        return self.profile.role if self.profile else None

    @property
    def organization_id(self) -> UUID | None:
        return self.profile.organization_id if self.profile else None

    @property
    def organization_name(self) -> str | None:
        if self.profile is None or self.profile.organization is None:
            return None
        return self.profile.organization.name

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.profile is not None


ANONYMOUS = SessionResult()


@dataclass
class ActionContext:
    """
    Everything an action needs from its caller.

    Attributes:
        db: Database session
        auth: Auth service client
        access_token: Caller's bearer token, None for anonymous callers
        session: Resolved session (filled in by the action wrapper)
        settings: Application settings
    """

    db: AsyncSession
    auth: AuthClient
    access_token: str | None = None
    session: SessionResult | None = None
    settings: StaffboardSettings = field(default_factory=get_settings)

    @property
    def user_id(self) -> UUID:
        """Id of the authenticated caller."""
        if self.session is None or self.session.user is None:
            raise AuthenticationError("User is not authenticated")
        return self.session.user.id

    @property
    def organization_id(self) -> UUID:
        """Organization of the authenticated caller."""
        if self.session is None or self.session.organization_id is None:
            raise AuthenticationError("User is not authenticated")
        return self.session.organization_id


async def load_profile(db: AsyncSession, user_id: UUID) -> Profile | None:
    result = await db.execute(
        select(Profile).options(joinedload(Profile.organization)).where(Profile.id == user_id)
    )
    return result.scalar_one_or_none()


async def provision_profile(
    db: AsyncSession,
    user: AuthUser,
    first_name: str | None = None,
    last_name: str | None = None,
    organization_name: str | None = None,
) -> Profile | None:
    """
    Create the organization and admin profile of a newly registered user.

    Names default to the user's signup metadata. Safe to call twice for
    the same user: a concurrent insert of the same profile id is rolled
    back and the stored profile is returned instead.

    Returns:
        The profile, or None when the user carries no signup metadata
    """
    metadata = user.user_metadata
    first_name = first_name or metadata.get("first_name")
    last_name = last_name or metadata.get("last_name")
    organization_name = organization_name or metadata.get("organization_name")
    if not (first_name and last_name and organization_name):
        logger.warning(
            "Authenticated user has no profile",
            extra={"user_id": str(user.id)},
        )
        return None

    organization = Organization(id=uuid4(), name=organization_name)
    profile = Profile(
        id=user.id,
        organization_id=organization.id,
        first_name=first_name,
        last_name=last_name,
        role=UserRole.ADMIN.value,
    )
    profile.organization = organization
    db.add(organization)
    db.add(profile)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Profile already provisioned", extra={"user_id": str(user.id)})
        return await load_profile(db, user.id)

    logger.info(
        f"Provisioned organization {organization.id}",
        extra={"organization_id": str(organization.id), "user_id": str(user.id)},
    )
    return profile


async def get_session(ctx: ActionContext) -> SessionResult:
    """
    Resolve the caller's session.

    No token, or a token the auth service rejects, yields ANONYMOUS:
    public routes are expected to be unauthenticated.

    Args:
        ctx: Action context carrying the access token

    Returns:
        SessionResult with user and profile, or ANONYMOUS
    """
    if not ctx.access_token:
        return ANONYMOUS

    try:
        user = await ctx.auth.get_user(ctx.access_token)
    except AuthApiError as exc:
        logger.debug(f"Access token rejected by auth service: {exc.code or exc.status}")
        return ANONYMOUS

    profile = await load_profile(ctx.db, user.id)
    if profile is None:
        profile = await provision_profile(ctx.db, user)
    if profile is None:
        return SessionResult(user=user)

    return SessionResult(user=user, profile=profile)


async def require_session(ctx: ActionContext) -> SessionResult:
    """
    Resolve the caller's session or raise.

    Raises:
        AuthenticationError: If the caller has no user, role or organization
    """
    session = await get_session(ctx)
    if not session.is_authenticated:
        raise AuthenticationError("User is not authenticated")
    return session


__all__ = [
    "ANONYMOUS",
    "ActionContext",
    "SessionResult",
    "get_session",
    "load_profile",
    "provision_profile",
    "require_session",
]
