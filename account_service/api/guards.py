"""Request guards resolving the bearer identity ahead of the account service."""

from __future__ import annotations

import logging

from fastapi import Depends, Header, Request

from ..domain.contracts import TokenIdentity
from ..domain.errors import UnauthenticatedError
from ..domain.policy import authorize_list
from ..domain.service import AccountService
from ..security.tokens import InvalidTokenError, decode_access_token

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


def get_service(request: Request) -> AccountService:
    """Resolve the `AccountService` stored on the FastAPI application state."""
    service: AccountService = request.app.state.account_service
    return service


def require_identity(authorization: str | None = Header(default=None)) -> TokenIdentity:
    """Decode the ``Authorization: Bearer <token>`` header into a requester identity."""
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        raise UnauthenticatedError("Unauthorized")
    token = authorization[len(_BEARER_PREFIX):].strip()
    if not token:
        raise UnauthenticatedError("Unauthorized")
    try:
        return decode_access_token(token)
    except InvalidTokenError as exc:
        logger.info("rejected bearer token: %s", exc)
        raise UnauthenticatedError("Invalid token") from exc


def require_admin(identity: TokenIdentity = Depends(require_identity)) -> TokenIdentity:
    """Allow the request through only for administrators."""
    authorize_list(identity)
    return identity
