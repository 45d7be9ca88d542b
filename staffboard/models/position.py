"""
staffboard.models.position - Position Model
"""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffboard.models.base import OrganizationScopedModel

if TYPE_CHECKING:
    from staffboard.models.client import WorkLocation


class Position(OrganizationScopedModel):
    """Job position offered at a work location."""

    __tablename__ = "positions"

    work_location_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("work_locations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    work_location: Mapped["WorkLocation"] = relationship(
        "WorkLocation", back_populates="positions"
    )
