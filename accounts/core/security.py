"""Security helpers (hashing, verification and random tokens)."""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"

RESET_TOKEN_BYTES = 15


def hash_password(password: str) -> str:
    """Create an Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored.startswith(_PREFIX):
        return False
    hashed = stored[len(_PREFIX) :]
    try:
        return _ph.verify(hashed, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def needs_rehash(stored_hash: str) -> bool:
    hashed = (stored_hash or "")[len(_PREFIX) :]
    try:
        return _ph.check_needs_rehash(hashed)
    except argon_exc.InvalidHashError:
        return True


def new_reset_token() -> str:
    """15 random bytes, hex encoded (30 characters)."""
    return secrets.token_hex(RESET_TOKEN_BYTES)


def new_session_token() -> str:
    return secrets.token_urlsafe(32)
