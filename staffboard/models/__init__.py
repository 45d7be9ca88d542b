"""
staffboard.models - SQLAlchemy Database Models

Models are organized by domain:
- base: Base model classes with common functionality
- organization: Organization, Profile
- client: Client, WorkLocation
- position: Position
- worker: TemporaryWorker
- assignment: Assignment, AssignmentAuditLog

Usage:
    >>> from staffboard.models import Client
    >>> clients = (await ctx.db.execute(select(Client))).scalars().all()
"""

from staffboard.models.assignment import (
    OPEN_STATUSES,
    Assignment,
    AssignmentAuditLog,
    AssignmentStatus,
)
from staffboard.models.base import Base
from staffboard.models.client import Client, WorkLocation
from staffboard.models.organization import Organization, Profile, UserRole
from staffboard.models.position import Position
from staffboard.models.worker import TemporaryWorker

__all__ = [
    "OPEN_STATUSES",
    "Assignment",
    "AssignmentAuditLog",
    "AssignmentStatus",
    "Base",
    "Client",
    "Organization",
    "Position",
    "Profile",
    "TemporaryWorker",
    "UserRole",
    "WorkLocation",
]
