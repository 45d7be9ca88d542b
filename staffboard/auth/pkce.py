"""
staffboard.auth.pkce - PKCE Verifier/Challenge Pairs

Sign-up and recovery requests carry the challenge; the verifier stays with
the browser (an HttpOnly cookie) until the email link comes back to the
auth callback, which sends it along with the code.
"""

import base64
import hashlib
import secrets

CHALLENGE_METHOD = "s256"


def code_challenge(code_verifier: str) -> str:
    """BASE64URL(SHA256(verifier)) without padding."""
    digest = hashlib.sha256(code_verifier.encode()).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode()


def generate_pkce_pair() -> tuple[str, str]:
    """
    Generate a PKCE code verifier and its S256 challenge.

    Returns:
        Tuple of (code_verifier, code_challenge)
    """
    code_verifier = secrets.token_urlsafe(48)
    return code_verifier, code_challenge(code_verifier)


__all__ = ["CHALLENGE_METHOD", "code_challenge", "generate_pkce_pair"]
