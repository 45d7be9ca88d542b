"""
staffboard.auth - Hosted Auth Service Client

Thin async client over the auth service REST API.
"""

from staffboard.auth.client import AuthClient
from staffboard.auth.errors import AuthApiError
from staffboard.auth.models import AuthResponse, AuthSession, AuthUser

__all__ = ["AuthApiError", "AuthClient", "AuthResponse", "AuthSession", "AuthUser"]
