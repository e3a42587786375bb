from __future__ import annotations

import os

os.environ.setdefault("JWT_SECRET", "test-signing-key-with-at-least-32-bytes")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from dataclasses import replace
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from account_service.domain.account import Account, Role
from account_service.domain.contracts import CreateAccountInput, TokenIdentity
from account_service.domain.errors import EmailInUseError
from account_service.domain.service import AccountService
from account_service.main import create_app
from account_service.security.tokens import issue_access_token


class FakeRepository:
    """In-memory repository mimicking the Postgres-backed behaviors."""

    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._next_id = 1

    def create_account(self, payload: CreateAccountInput) -> Account:
        if any(account.email == payload.email for account in self._accounts.values()):
            raise EmailInUseError()
        now = datetime.now(timezone.utc)
        account = Account(
            id=self._next_id,
            full_name=payload.full_name,
            birth_date=payload.birth_date,
            email=payload.email,
            password_hash=payload.password_hash,
            role=payload.role,
            is_active=payload.is_active,
            created_at=now,
            updated_at=now,
        )
        self._accounts[account.id] = account
        self._next_id += 1
        return account

    def get_account(self, account_id: int) -> Account | None:
        return self._accounts.get(account_id)

    def get_account_by_email(self, email: str) -> Account | None:
        for account in self._accounts.values():
            if account.email == email:
                return account
        return None

    def list_accounts(self) -> list[Account]:
        return [self._accounts[key] for key in sorted(self._accounts)]

    def update_status(self, account_id: int, is_active: bool) -> Account | None:
        account = self._accounts.get(account_id)
        if account is None:
            return None
        updated = replace(account, is_active=is_active, updated_at=datetime.now(timezone.utc))
        self._accounts[account_id] = updated
        return updated


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def service(repository: FakeRepository) -> AccountService:
    return AccountService(repository)


@pytest.fixture
def api_client(service: AccountService):
    """Provide a FastAPI test client with isolated state."""
    app = create_app(use_lifespan=False)
    app.state.account_service = service

    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_account(service: AccountService):
    """Register an account directly through the service."""

    def _make(email: str, *, role: Role = Role.USER, password: str = "secret1") -> Account:
        return service.register("Test User", "1990-01-01", email, password, role=role)

    return _make


def identity_of(account: Account) -> TokenIdentity:
    return TokenIdentity(id=account.id, role=account.role)


def auth_headers(account: Account) -> dict[str, str]:
    token, _ = issue_access_token(account_id=account.id, role=account.role)
    return {"Authorization": f"Bearer {token}"}
