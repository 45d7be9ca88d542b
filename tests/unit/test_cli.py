"""
Unit tests for staffboard.cli - Command-Line Interface.

Tests argument parsing and command routing against a mocked auth client.
"""

import json
from argparse import Namespace
from unittest.mock import AsyncMock, MagicMock

import pytest

import staffboard.cli as cli
from staffboard.auth.client import AuthClient
from staffboard.auth.errors import AuthApiError
from staffboard.auth.models import AuthResponse, AuthSession
from staffboard.cli import build_parser, main
from staffboard.settings import StaffboardSettings


def test_parser_auth_verify_command():
    """Test parsing auth verify command."""
    args = build_parser().parse_args(
        ["auth", "verify", "--email", "anna@agency.example", "--password", "secret-pass"]
    )
    assert args.command == "auth"
    assert args.action == "verify"
    assert args.email == "anna@agency.example"
    assert args.password == "secret-pass"


def test_parser_verify_requires_password():
    """Test verify command requires --password."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["auth", "verify", "--email", "anna@agency.example"])


def test_parser_db_init_command():
    args = build_parser().parse_args(["db", "init"])
    assert (args.command, args.action) == ("db", "init")


def test_main_without_command_exits():
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1


@pytest.fixture
def fake_auth(monkeypatch):
    auth = MagicMock(spec=AuthClient)
    monkeypatch.setattr(cli.AuthClient, "from_settings", MagicMock(return_value=auth))
    monkeypatch.setattr(cli, "get_settings", lambda: StaffboardSettings(_env_file=None))
    return auth


@pytest.mark.asyncio
async def test_verify_auth_success(fake_auth, auth_user_factory, capsys):
    user = auth_user_factory()
    fake_auth.sign_in_with_password.return_value = AuthResponse(
        user=user, session=AuthSession(access_token="access", refresh_token="refresh")
    )

    exit_code = await cli._verify_auth(Namespace(email="anna@agency.example", password="pw"))

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["ok"] is True
    assert output["user_id"] == str(user.id)
    fake_auth.sign_out.assert_awaited_once_with("access")
    fake_auth.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_verify_auth_rejected_credentials(fake_auth, capsys):
    fake_auth.sign_in_with_password = AsyncMock(
        side_effect=AuthApiError("Invalid login credentials", 400, "invalid_credentials")
    )

    exit_code = await cli._verify_auth(Namespace(email="anna@agency.example", password="bad"))

    assert exit_code == 1
    output = json.loads(capsys.readouterr().out)
    assert output == {"ok": False, "step": "sign_in", "error": output["error"]}
    fake_auth.sign_out.assert_not_called()
    fake_auth.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_init_db_refuses_outside_development(monkeypatch, capsys):
    monkeypatch.setattr(
        cli, "get_settings", lambda: StaffboardSettings(_env_file=None, env="production")
    )

    assert await cli._init_db(Namespace()) == 1
    assert "alembic upgrade head" in capsys.readouterr().out


def test_cli_module_importable():
    """Test CLI modules can be imported."""
    import staffboard.cli.__main__

    assert staffboard.cli.__main__ is not None
