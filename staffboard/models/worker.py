"""
staffboard.models.worker - Temporary Worker Model
"""

from sqlalchemy import Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from staffboard.models.base import OrganizationScopedModel


class TemporaryWorker(OrganizationScopedModel):
    """
    Temporary worker placed at client positions.

    Example:
        >>> worker = TemporaryWorker(
        ...     organization_id=org.id,
        ...     first_name="Jan",
        ...     last_name="Kowalski",
        ...     phone="+48 600 100 200",
        ... )
    """

    __tablename__ = "temporary_workers"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)

    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    phone: Mapped[str] = mapped_column(String(20), nullable=False)

    __table_args__ = (
        Index(
            "uq_temporary_workers_phone",
            "organization_id",
            "phone",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
