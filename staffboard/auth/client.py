"""
staffboard.auth.client - Hosted Auth Service Client

Async client for the GoTrue-compatible REST API of the hosted auth
service. Every failed call raises AuthApiError; classification into
action error codes happens in staffboard.actions.errors.

Example:
    >>> client = AuthClient(base_url="https://project.example.co/auth/v1", api_key="anon-key")
    >>> response = await client.sign_in_with_password("user@example.com", "secret123")
    >>> response.session.access_token
    >>> await client.aclose()
"""

import logging
from typing import Any

import httpx

from staffboard.auth.errors import AuthApiError
from staffboard.auth.models import AuthResponse, AuthUser
from staffboard.auth.pkce import CHALLENGE_METHOD
from staffboard.settings import StaffboardSettings

logger = logging.getLogger(__name__)


def _with_challenge(body: dict[str, Any], code_challenge: str | None) -> dict[str, Any]:
    if code_challenge:
        body["code_challenge"] = code_challenge
        body["code_challenge_method"] = CHALLENGE_METHOD
    return body


class AuthClient:
    """
    Client for the hosted auth service.

    Holds a single httpx.AsyncClient; call aclose() on shutdown.
    """

    # Default timeout for HTTP requests
    TIMEOUT = 30.0

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the auth client.

        Args:
            base_url: Auth API root (e.g. https://project.example.co/auth/v1)
            api_key: Public (anon) API key sent as the ``apikey`` header
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["apikey"] = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout or self.TIMEOUT,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: StaffboardSettings) -> "AuthClient":
        return cls(
            base_url=settings.auth_url,
            api_key=settings.auth_api_key,
            timeout=settings.auth_timeout_seconds,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        access_token: str | None = None,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else None
        response = await self._client.request(
            method, path, params=params, json=json, headers=headers
        )

        if response.is_error:
            error = AuthApiError.from_response(response)
            logger.debug(
                f"Auth service call failed: {method} {path} -> {response.status_code}",
                extra={"status_code": response.status_code, "error_code": error.code},
            )
            raise error

        if not response.content:
            return {}
        body = response.json()
        return body if isinstance(body, dict) else {}

    async def sign_in_with_password(self, email: str, password: str) -> AuthResponse:
        """Sign in with email and password."""
        payload = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return AuthResponse.from_payload(payload)

    async def sign_up(
        self,
        email: str,
        password: str,
        data: dict[str, Any] | None = None,
        redirect_to: str | None = None,
        code_challenge: str | None = None,
    ) -> AuthResponse:
        """
        Register a new account.

        Args:
            email: Account email
            password: Account password
            data: Metadata stored on the user (user_metadata)
            redirect_to: URL the confirmation email links back to
            code_challenge: PKCE challenge; the link then carries a code

        Returns:
            AuthResponse; session is None when email confirmation is required
        """
        payload = await self._request(
            "POST",
            "/signup",
            params={"redirect_to": redirect_to} if redirect_to else None,
            json=_with_challenge(
                {"email": email, "password": password, "data": data or {}}, code_challenge
            ),
        )
        return AuthResponse.from_payload(payload)

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind the access token."""
        await self._request("POST", "/logout", access_token=access_token)

    async def get_user(self, access_token: str) -> AuthUser:
        """Validate an access token with the service and return its user."""
        payload = await self._request("GET", "/user", access_token=access_token)
        return AuthUser.model_validate(payload)

    async def update_user(
        self,
        access_token: str,
        *,
        password: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> AuthUser:
        """Update the password and/or metadata of the current user."""
        body: dict[str, Any] = {}
        if password is not None:
            body["password"] = password
        if data is not None:
            body["data"] = data
        payload = await self._request("PUT", "/user", access_token=access_token, json=body)
        return AuthUser.model_validate(payload)

    async def reset_password_for_email(
        self,
        email: str,
        redirect_to: str | None = None,
        code_challenge: str | None = None,
    ) -> None:
        """Send a password recovery email."""
        await self._request(
            "POST",
            "/recover",
            params={"redirect_to": redirect_to} if redirect_to else None,
            json=_with_challenge({"email": email}, code_challenge),
        )

    async def exchange_code_for_session(
        self, auth_code: str, code_verifier: str | None = None
    ) -> AuthResponse:
        """Exchange a PKCE authorization code for a session."""
        body = {"auth_code": auth_code}
        if code_verifier:
            body["code_verifier"] = code_verifier
        payload = await self._request(
            "POST", "/token", params={"grant_type": "pkce"}, json=body
        )
        return AuthResponse.from_payload(payload)

    async def verify_otp(self, token_hash: str, otp_type: str) -> AuthResponse:
        """Verify an email OTP / magic link token hash."""
        payload = await self._request(
            "POST", "/verify", json={"token_hash": token_hash, "type": otp_type}
        )
        return AuthResponse.from_payload(payload)

    async def refresh_session(self, refresh_token: str) -> AuthResponse:
        """Trade a refresh token for a new session."""
        payload = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return AuthResponse.from_payload(payload)


__all__ = ["AuthClient"]
