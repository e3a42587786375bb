"""Utilities for issuing and validating account bearer tokens."""

from __future__ import annotations

import time
from typing import Any

import jwt

from ..config import get_settings
from ..domain.account import Role
from ..domain.contracts import TokenIdentity

_ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be trusted."""


def issue_access_token(*, account_id: int, role: Role) -> tuple[str, int]:
    """Create a signed JWT asserting the account identifier and role.

    Parameters
    ----------
    account_id:
        Account identifier embedded in the ``id`` claim.
    role:
        Role of the account at issuance time.

    Returns
    -------
    tuple[str, int]
        The encoded JWT string and its TTL (in seconds).
    """

    settings = get_settings()
    now = int(time.time())
    expires_in = settings.jwt_ttl_seconds
    payload: dict[str, Any] = {
        "id": account_id,
        "role": Role(role).value,
        "iat": now,
        "exp": now + expires_in,
    }

    token = jwt.encode(payload, settings.jwt_secret, algorithm=_ALGORITHM)
    return token, expires_in


def decode_access_token(token: str) -> TokenIdentity:
    """Verify a JWT and return the identity it asserts.

    Raises
    ------
    InvalidTokenError
        When the signature is wrong, the token has expired or is malformed,
        or the claims do not carry an integer ``id`` and a known ``role``.
    """

    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    account_id = claims.get("id")
    # bool is a subclass of int
    if not isinstance(account_id, int) or isinstance(account_id, bool):
        raise InvalidTokenError("Invalid token")
    try:
        role = Role(claims.get("role"))
    except ValueError as exc:
        raise InvalidTokenError("Invalid token") from exc

    return TokenIdentity(id=account_id, role=role)
