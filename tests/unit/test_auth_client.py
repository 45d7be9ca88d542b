"""
Unit tests for staffboard.auth.client - Hosted Auth Service Client

Requests are served by httpx.MockTransport; no network access.
"""

import json
from uuid import uuid4

import httpx
import pytest

from staffboard.auth.client import AuthClient
from staffboard.auth.errors import AuthApiError
from staffboard.auth.models import AuthResponse

USER_ID = str(uuid4())

TOKEN_PAYLOAD = {
    "access_token": "access-1",
    "refresh_token": "refresh-1",
    "token_type": "bearer",
    "expires_in": 3600,
    "user": {"id": USER_ID, "email": "anna@agency.example"},
}


def make_client(handler) -> AuthClient:
    return AuthClient(
        base_url="https://auth.example.test/auth/v1/",
        api_key="anon-key",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_sign_in_with_password():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["apikey"] = request.headers.get("apikey")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=TOKEN_PAYLOAD)

    client = make_client(handler)
    response = await client.sign_in_with_password("anna@agency.example", "secret123")
    await client.aclose()

    assert seen["url"] == "https://auth.example.test/auth/v1/token?grant_type=password"
    assert seen["apikey"] == "anon-key"
    assert seen["body"] == {"email": "anna@agency.example", "password": "secret123"}
    assert response.session.access_token == "access-1"
    assert str(response.user.id) == USER_ID


@pytest.mark.asyncio
async def test_error_response_raises_auth_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"code": 400, "error_code": "invalid_credentials", "msg": "Invalid login credentials"},
        )

    client = make_client(handler)
    with pytest.raises(AuthApiError) as exc_info:
        await client.sign_in_with_password("anna@agency.example", "wrong-pass")
    await client.aclose()

    assert exc_info.value.status == 400
    assert exc_info.value.code == "invalid_credentials"
    assert exc_info.value.message == "Invalid login credentials"


@pytest.mark.asyncio
async def test_oauth_style_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400, json={"error": "invalid_grant", "error_description": "Refresh token not found"}
        )

    client = make_client(handler)
    with pytest.raises(AuthApiError) as exc_info:
        await client.refresh_session("refresh-x")
    await client.aclose()

    assert exc_info.value.code == "invalid_grant"
    assert exc_info.value.message == "Refresh token not found"


@pytest.mark.asyncio
async def test_non_json_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    client = make_client(handler)
    with pytest.raises(AuthApiError) as exc_info:
        await client.get_user("token")
    await client.aclose()

    assert exc_info.value.status == 502
    assert exc_info.value.code is None


@pytest.mark.asyncio
async def test_get_user_sends_bearer_token():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer access-1"
        return httpx.Response(200, json={"id": USER_ID, "email": "anna@agency.example"})

    client = make_client(handler)
    user = await client.get_user("access-1")
    await client.aclose()

    assert str(user.id) == USER_ID


@pytest.mark.asyncio
async def test_sign_out_with_empty_body():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/auth/v1/logout"
        return httpx.Response(204)

    client = make_client(handler)
    assert await client.sign_out("access-1") is None
    await client.aclose()


@pytest.mark.asyncio
async def test_sign_up_passes_redirect_and_metadata():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["redirect_to"] = request.url.params.get("redirect_to")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": USER_ID, "email": "anna@agency.example"})

    client = make_client(handler)
    response = await client.sign_up(
        "anna@agency.example",
        "secret123",
        data={"first_name": "Anna"},
        redirect_to="http://localhost:3000/auth/callback?type=signup",
        code_challenge="challenge-1",
    )
    await client.aclose()

    assert seen["redirect_to"] == "http://localhost:3000/auth/callback?type=signup"
    assert seen["body"]["data"] == {"first_name": "Anna"}
    assert seen["body"]["code_challenge"] == "challenge-1"
    assert seen["body"]["code_challenge_method"] == "s256"
    # confirmation pending: user but no session
    assert response.session is None
    assert str(response.user.id) == USER_ID


@pytest.mark.asyncio
async def test_update_user_only_sends_given_fields():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": USER_ID})

    client = make_client(handler)
    await client.update_user("access-1", password="new-secret-1")
    await client.aclose()

    assert seen == {"method": "PUT", "body": {"password": "new-secret-1"}}


@pytest.mark.asyncio
async def test_exchange_code_and_verify_otp():
    paths = []
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append((request.url.path, request.url.params.get("grant_type")))
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=TOKEN_PAYLOAD)

    client = make_client(handler)
    exchanged = await client.exchange_code_for_session("code-1", "verifier-1")
    verified = await client.verify_otp("hash-1", "recovery")
    await client.aclose()

    assert paths == [("/auth/v1/token", "pkce"), ("/auth/v1/verify", None)]
    assert bodies[0] == {"auth_code": "code-1", "code_verifier": "verifier-1"}
    assert exchanged.session.refresh_token == "refresh-1"
    assert verified.session.access_token == "access-1"


def test_auth_response_from_empty_payload():
    response = AuthResponse.from_payload({})
    assert response.user is None
    assert response.session is None


def test_from_settings(settings):
    client = AuthClient.from_settings(settings)
    assert str(client._client.base_url) == settings.auth_url + "/"


@pytest.mark.asyncio
async def test_recovery_without_challenge_sends_email_only():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={})

    client = make_client(handler)
    await client.reset_password_for_email("anna@agency.example")
    await client.aclose()

    assert seen == {"path": "/auth/v1/recover", "body": {"email": "anna@agency.example"}}
