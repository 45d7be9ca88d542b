"""
staffboard.api.v1.router - API v1 Router

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter

from staffboard.api.v1.endpoints import (
    assignments,
    auth,
    clients,
    positions,
    reports,
    work_locations,
    workers,
)

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(
    work_locations.router, prefix="/work-locations", tags=["work-locations"]
)
api_router.include_router(positions.router, prefix="/positions", tags=["positions"])
api_router.include_router(workers.router, prefix="/workers", tags=["workers"])
api_router.include_router(assignments.router, prefix="/assignments", tags=["assignments"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
