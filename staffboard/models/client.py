"""
staffboard.models.client - Client and Work Location Models

- Client: Company that orders temporary workers
- WorkLocation: Site of a client where workers are placed
"""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffboard.models.base import OrganizationScopedModel

if TYPE_CHECKING:
    from staffboard.models.position import Position


class Client(OrganizationScopedModel):
    """
    Client company.

    Example:
        >>> client = Client(
        ...     organization_id=org.id,
        ...     name="Acme Corp",
        ...     email="contact@acme.com",
        ...     phone="+48 123 456 789",
        ...     address="ul. Glowna 1, 00-001 Warszawa",
        ... )
    """

    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    phone: Mapped[str] = mapped_column(String(20), nullable=False)

    address: Mapped[str] = mapped_column(String(500), nullable=False)

    work_locations: Mapped[list["WorkLocation"]] = relationship(
        "WorkLocation", back_populates="client"
    )

    __table_args__ = (
        Index(
            "uq_clients_email",
            "organization_id",
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )


class WorkLocation(OrganizationScopedModel):
    """Work site belonging to a client."""

    __tablename__ = "work_locations"

    client_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    address: Mapped[str] = mapped_column(String(500), nullable=False)

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    client: Mapped["Client"] = relationship("Client", back_populates="work_locations")

    positions: Mapped[list["Position"]] = relationship(
        "Position", back_populates="work_location"
    )
