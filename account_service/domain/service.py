"""Account service orchestrating persistence, password checks, and token issuance."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from . import policy
from .account import Account, Role
from .contracts import AccountStore, CreateAccountInput, TokenIdentity
from .errors import (
    AccountBlockedError,
    EmailInUseError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from ..security.passwords import hash_password, verify_password
from ..security.tokens import issue_access_token

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
_MAX_PASSWORD_BYTES = 72


@dataclass(slots=True)
class LoginResult:
    """Bearer token issued on a successful login together with the account."""

    token: str
    expires_in: int
    account: Account


def parse_birth_date(value: str) -> datetime:
    """Parse an ISO-8601 date or date/time string into an aware UTC datetime."""
    try:
        parsed = datetime.fromisoformat(value.strip())
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        # shifting to UTC can leave the supported year range
        return parsed.astimezone(timezone.utc)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError("Invalid birthDate format") from exc


class AccountService:
    """Account workflows backed by an injected account store."""

    def __init__(self, repository: AccountStore) -> None:
        """Store dependencies used to orchestrate persistence and token issuance."""
        self._repository = repository

    def register(
        self,
        full_name: str | None,
        birth_date: str | None,
        email: str | None,
        password: str | None,
        *,
        role: Role = Role.USER,
    ) -> Account:
        """Create an active account after validating the inputs and hashing the password."""
        if not all(_present(value) for value in (full_name, birth_date, email, password)):
            raise ValidationError("All fields are required")
        parsed_birth_date = parse_birth_date(birth_date)
        if len(password.encode("utf-8")) > _MAX_PASSWORD_BYTES:
            raise ValidationError("Password must be at most 72 bytes")

        if self._repository.get_account_by_email(email) is not None:
            raise EmailInUseError()

        account = self._repository.create_account(
            CreateAccountInput(
                full_name=full_name,
                birth_date=parsed_birth_date,
                email=email,
                password_hash=hash_password(password),
                role=role,
                is_active=True,
            )
        )
        logger.info("registered account id=%s role=%s", account.id, account.role.value)
        return account

    def login(self, email: str | None, password: str | None) -> LoginResult:
        """Verify credentials and issue a bearer token.

        Credentials are checked before the active flag, so only a caller who
        knows the password learns that the account is blocked.
        """
        if not _present(email) or not _present(password):
            raise ValidationError("Email and password are required")

        account = self._repository.get_account_by_email(email)
        if account is None or not verify_password(password, account.password_hash):
            logger.warning("login rejected: invalid credentials")
            raise InvalidCredentialsError()
        if not account.is_active:
            logger.warning("login rejected: account id=%s is blocked", account.id)
            raise AccountBlockedError()

        token, expires_in = issue_access_token(account_id=account.id, role=account.role)
        return LoginResult(token=token, expires_in=expires_in, account=account)

    def find_by_email(self, email: str) -> Account | None:
        return self._repository.get_account_by_email(email)

    def get_by_id(self, requester: TokenIdentity, target_id: int) -> Account:
        """Return a profile visible to the requester."""
        account = self._repository.get_account(target_id)
        if account is None:
            raise NotFoundError("User not found")
        policy.authorize_view(requester, target_id)
        return account

    def list_all(self, requester: TokenIdentity) -> list[Account]:
        policy.authorize_list(requester)
        return self._repository.list_accounts()

    def update_status(self, requester: TokenIdentity, target_id: int, is_active: bool) -> Account:
        """Activate or block an account on behalf of the requester."""
        if self._repository.get_account(target_id) is None:
            raise NotFoundError("User not found")
        policy.authorize_status_change(requester, target_id, is_active)

        updated = self._repository.update_status(target_id, is_active)
        if updated is None:
            raise NotFoundError("User not found")
        logger.info(
            "account id=%s is_active=%s changed by id=%s", target_id, is_active, requester.id
        )
        return updated


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""
