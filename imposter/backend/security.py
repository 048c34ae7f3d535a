"""Security helpers for session token handling in the backend."""

from __future__ import annotations

import hashlib
import secrets


TOKEN_BYTES = 24
FINGERPRINT_LENGTH = 8


def generate_token() -> str:
    """Generate a URL-safe session token for a player device."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def token_fingerprint(token: str | None) -> str:
    """Short sha256 prefix of a token, safe to write to logs."""
    if not token:
        return "-"
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]
