"""Salted one-way password hashing backed by bcrypt."""

from __future__ import annotations

import bcrypt

from ..config import get_settings


def hash_password(password: str, *, rounds: int | None = None) -> str:
    """Return a bcrypt digest of ``password`` using a freshly generated salt."""
    cost = rounds if rounds is not None else get_settings().bcrypt_rounds
    salt = bcrypt.gensalt(rounds=cost)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Return ``True`` when ``password`` matches the stored digest.

    Malformed or empty digests verify as ``False`` instead of raising.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False
