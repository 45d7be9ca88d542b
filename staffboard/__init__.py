"""
staffboard - Staffing Agency Dashboard Backend

Server actions for a temporary-staffing dashboard: clients, work locations,
positions, temporary workers and their assignments, backed by Postgres and
a hosted auth service.

Every action returns an ActionResult instead of raising:

Example:
    >>> from staffboard.actions import ActionContext, is_success
    >>> from staffboard.services.workers import get_workers
    >>>
    >>> result = await get_workers(ctx, {"search": "kowalski"})
    >>> if is_success(result):
    ...     for worker in result.data.data:
    ...         print(worker.first_name, worker.total_hours)

Architecture:
    - actions: ActionResult, error taxonomy, try_catch, action wrapper
    - auth: async client for the hosted auth service
    - models: SQLAlchemy models and engine/session factory
    - schemas: pydantic input and response schemas
    - services: server actions per domain
    - api: FastAPI transport
    - cli: operational commands
"""

__version__ = "0.1.0"
__author__ = "staffboard contributors"
__license__ = "Apache-2.0"

__all__ = ["__version__"]
