"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from .account import Account, Role


@dataclass(slots=True)
class CreateAccountInput:
    """Validated inputs required to persist a new account."""

    full_name: str
    birth_date: datetime
    email: str
    password_hash: str
    role: Role = Role.USER
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class TokenIdentity:
    """Authenticated requester decoded from a bearer token."""

    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class AccountStore(Protocol):
    """Persistence operations the account service relies on."""

    def create_account(self, payload: CreateAccountInput) -> Account:
        """Insert a new account; raise ``EmailInUseError`` on a duplicate email."""

    def get_account(self, account_id: int) -> Account | None:
        """Return the account with the given id or ``None``."""

    def get_account_by_email(self, email: str) -> Account | None:
        """Return the account registered under ``email`` or ``None``."""

    def list_accounts(self) -> list[Account]:
        """Return every account ordered by id."""

    def update_status(self, account_id: int, is_active: bool) -> Account | None:
        """Set ``is_active`` and refresh ``updated_at``; ``None`` if the id is unknown."""
