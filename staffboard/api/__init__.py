"""
staffboard.api - FastAPI REST API

JSON transport over the server actions.

Usage:
    uvicorn staffboard.api.main:app --reload
"""

from staffboard.api.main import app, create_app

__all__ = ["app", "create_app"]
