"""
staffboard.auth.errors - Auth Service Exceptions
"""

from typing import Any

import httpx


class AuthApiError(Exception):
    """
    Error response returned by the hosted auth service.

    Attributes:
        message: Human-readable message from the service
        status: HTTP status code of the response
        code: Machine-readable error code (e.g. "invalid_credentials"), if any
    """

    def __init__(self, message: str, status: int, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def __repr__(self) -> str:
        return f"AuthApiError(status={self.status}, code={self.code!r}, message={self.message!r})"

    @classmethod
    def from_response(cls, response: httpx.Response) -> "AuthApiError":
        """
        Build an AuthApiError from a non-2xx auth service response.

        The service reports errors in two shapes:
        ``{"code": 400, "error_code": "...", "msg": "..."}`` and the
        OAuth-style ``{"error": "...", "error_description": "..."}``.
        """
        try:
            body: Any = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            return cls(response.text or response.reason_phrase, response.status_code)

        code = body.get("error_code")
        if code is None and isinstance(body.get("code"), str):
            code = body["code"]
        if code is None and isinstance(body.get("error"), str):
            code = body["error"]

        message = (
            body.get("msg")
            or body.get("message")
            or body.get("error_description")
            or body.get("error")
            or response.reason_phrase
        )
        return cls(str(message), response.status_code, code)


__all__ = ["AuthApiError"]
