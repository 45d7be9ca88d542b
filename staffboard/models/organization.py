"""
staffboard.models.organization - Organization and Profile Models

- Organization: Staffing agency account
- Profile: Dashboard user within an organization (id = auth service user id)
"""

from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffboard.models.base import Base, TimestampedModel


class UserRole(str, Enum):
    """Dashboard user roles."""

    ADMIN = "admin"
    COORDINATOR = "coordinator"


class Organization(TimestampedModel, Base):
    """
    Staffing agency account.

    Every client, worker and assignment belongs to exactly one organization.
    """

    __tablename__ = "organizations"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    profiles: Mapped[list["Profile"]] = relationship(
        "Profile", back_populates="organization", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name})>"


class Profile(TimestampedModel, Base):
    """
    Dashboard user profile.

    The primary key is the user id issued by the auth service.

    Example:
        >>> profile = Profile(
        ...     id=auth_user.id,
        ...     organization_id=organization.id,
        ...     first_name="Jane",
        ...     last_name="Smith",
        ...     role="admin",
        ... )
    """

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
    )

    organization_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)

    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.COORDINATOR.value,
    )

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="profiles", lazy="joined"
    )

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'coordinator')", name="ck_profiles_role"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, role={self.role})>"
