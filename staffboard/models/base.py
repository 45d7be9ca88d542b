"""
staffboard.models.base - Declarative Base and Shared Columns

Every business table is scoped to an organization, carries
created_at/updated_at and is soft-deleted through deleted_at; those
columns come from OrganizationScopedModel. Tables that are never
soft-deleted (organizations, profiles, assignments, the audit log) pick the pieces they
need from Base and TimestampedModel.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


class TimestampedModel:
    """created_at / updated_at, both filled by Postgres on insert."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
        onupdate=utcnow,
    )


class SoftDeletableModel(TimestampedModel):
    """Rows are hidden, never removed: deleted_at marks them as gone."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self, at: datetime | None = None) -> None:
        """Mark the row deleted; callers commit."""
        self.deleted_at = at or utcnow()


class OrganizationScopedModel(SoftDeletableModel, Base):
    __abstract__ = True

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    organization_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id} org={self.organization_id}>"
