"""
staffboard.cli - Command-Line Interface

Operational commands for the staffboard backend.

Usage:
    python -m staffboard.cli auth verify --email admin@example.com --password ...
    python -m staffboard.cli db init
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from staffboard.actions.result import is_failure
from staffboard.actions.try_catch import try_catch
from staffboard.auth.client import AuthClient
from staffboard.settings import get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, indent=2, default=str))


async def _verify_auth(args: argparse.Namespace) -> int:
    """Sign in and out with the given account to check the auth service setup."""
    settings = get_settings()
    auth = AuthClient.from_settings(settings)

    try:
        signed_in = await try_catch(lambda: auth.sign_in_with_password(args.email, args.password))
        if is_failure(signed_in):
            _print_json({"ok": False, "step": "sign_in", "error": signed_in.error.model_dump()})
            return 1

        session = signed_in.data.session
        if session is None:
            _print_json({"ok": False, "step": "sign_in", "error": "No session returned"})
            return 1

        signed_out = await try_catch(lambda: auth.sign_out(session.access_token))
        if is_failure(signed_out):
            _print_json({"ok": False, "step": "sign_out", "error": signed_out.error.model_dump()})
            return 1

        _print_json(
            {
                "ok": True,
                "auth_url": settings.auth_url,
                "user_id": str(signed_in.data.user.id) if signed_in.data.user else None,
            }
        )
        return 0
    finally:
        await auth.aclose()


async def _init_db(_args: argparse.Namespace) -> int:
    """Create all tables (development databases only; use alembic elsewhere)."""
    from staffboard.models.database import init_db

    settings = get_settings()
    if not settings.is_development:
        print(f"Refusing to create tables in {settings.env!r}; run 'alembic upgrade head'.")
        return 1

    await init_db(settings.database_url)
    print("Database tables created.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="staffboard",
        description="staffboard - Staffing Agency Dashboard Backend",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ── auth command group ──
    auth_parser = subparsers.add_parser("auth", help="Auth service checks")
    auth_sub = auth_parser.add_subparsers(dest="action", help="Auth actions")

    verify_p = auth_sub.add_parser("verify", help="Sign in and out with an account")
    verify_p.add_argument("--email", required=True, help="Account email")
    verify_p.add_argument("--password", required=True, help="Account password")
    verify_p.set_defaults(func=_verify_auth)

    # ── db command group ──
    db_parser = subparsers.add_parser("db", help="Database management")
    db_sub = db_parser.add_subparsers(dest="action", help="Database actions")

    init_p = db_sub.add_parser("init", help="Create all tables (development only)")
    init_p.set_defaults(func=_init_db)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(level=get_settings().log_level, format=LOG_FORMAT)
    exit_code = asyncio.run(args.func(args))
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
