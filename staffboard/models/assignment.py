"""
staffboard.models.assignment - Assignment Models

- Assignment: A worker placed on a position for a time span
- AssignmentAuditLog: Append-only history of assignment changes
"""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffboard.models.base import Base, TimestampedModel
from staffboard.models.position import Position
from staffboard.models.worker import TemporaryWorker


class AssignmentStatus(str, Enum):
    """Assignment lifecycle status."""

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Assignments that still occupy the worker
OPEN_STATUSES = (AssignmentStatus.SCHEDULED.value, AssignmentStatus.ACTIVE.value)


class Assignment(TimestampedModel, Base):
    """
    Worker placement on a position.

    ``end_at`` is NULL for open-ended assignments.
    """

    __tablename__ = "assignments"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )

    organization_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    worker_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("temporary_workers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    position_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("positions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    end_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AssignmentStatus.SCHEDULED.value,
    )

    created_by: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False
    )

    ended_by: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=True
    )

    cancelled_by: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=True
    )

    worker: Mapped["TemporaryWorker"] = relationship("TemporaryWorker")
    position: Mapped["Position"] = relationship("Position")

    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'active', 'completed', 'cancelled')",
            name="ck_assignments_status",
        ),
        CheckConstraint(
            "end_at IS NULL OR end_at > start_at",
            name="ck_assignments_date_range",
        ),
        Index("idx_assignments_worker_time", "worker_id", "start_at"),
    )

    def snapshot(self) -> dict[str, Any]:
        """JSON-serializable state for the audit log."""
        return {
            "worker_id": str(self.worker_id),
            "position_id": str(self.position_id),
            "start_at": self.start_at.isoformat() if self.start_at else None,
            "end_at": self.end_at.isoformat() if self.end_at else None,
            "status": self.status,
        }

    def __repr__(self) -> str:
        return f"<Assignment(id={self.id}, status={self.status})>"


class AssignmentAuditLog(Base):
    """Append-only record of a change to an assignment."""

    __tablename__ = "assignment_audit_log"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )

    organization_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    assignment_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("assignments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    action: Mapped[str] = mapped_column(String(30), nullable=False)

    old_values: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    new_values: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    performed_by: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
