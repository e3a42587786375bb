"""Authorization rules deciding who may read or change which account.

The ``can_*`` predicates are pure decisions over the requester identity and
the target. The ``authorize_*`` helpers return ``None`` when allowed and
raise a subclass of :class:`~account_service.domain.errors.AccountServiceError`
otherwise.
"""

from __future__ import annotations

from .contracts import TokenIdentity
from .errors import AdminSelfBlockError, ForbiddenError


def can_view(requester: TokenIdentity, target_id: int) -> bool:
    return requester.is_admin or requester.id == target_id


def can_list(requester: TokenIdentity) -> bool:
    return requester.is_admin


def can_update_status(requester: TokenIdentity, target_id: int) -> bool:
    """Admins may change any other account; users may change only their own."""
    is_self = requester.id == target_id
    if requester.is_admin:
        return not is_self
    return is_self


def authorize_view(requester: TokenIdentity, target_id: int) -> None:
    if not can_view(requester, target_id):
        raise ForbiddenError("Access denied")


def authorize_list(requester: TokenIdentity) -> None:
    if not can_list(requester):
        raise ForbiddenError("Access denied: Admins only")


def authorize_status_change(requester: TokenIdentity, target_id: int, is_active: bool) -> None:
    """Check a status change, rejecting admin self-deactivation before the general rule."""
    if requester.is_admin and requester.id == target_id and not is_active:
        raise AdminSelfBlockError()
    if can_update_status(requester, target_id):
        return
    if requester.is_admin:
        raise ForbiddenError("Admin cannot change their own status")
    raise ForbiddenError("You can only update your own status")
