"""HTTP route definitions for the account service."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, status
from prometheus_client import Counter
from pydantic import BaseModel, ConfigDict, Field, StrictBool

from ..domain.account import Account, Role
from ..domain.contracts import TokenIdentity
from ..domain.errors import AccountServiceError
from ..domain.service import AccountService
from .guards import get_service, require_admin, require_identity


router = APIRouter(prefix="/api/users", tags=["users"])

LOGIN_ATTEMPTS = Counter(
    "account_login_attempts_total",
    "Login attempts partitioned by outcome.",
    ["outcome"],
)


class AccountSummary(BaseModel):
    """Public fields returned for logins and status changes."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    full_name: str = Field(..., alias="fullName")
    email: str
    role: Role
    is_active: bool = Field(..., alias="isActive")

    @classmethod
    def from_domain(cls, account: Account) -> "AccountSummary":
        """Build a response model from the domain aggregate."""
        return cls(
            id=account.id,
            full_name=account.full_name,
            email=account.email,
            role=account.role,
            is_active=account.is_active,
        )


class RegisteredAccount(AccountSummary):
    """Response returned after a successful registration."""

    birth_date: datetime = Field(..., alias="birthDate")

    @classmethod
    def from_domain(cls, account: Account) -> "RegisteredAccount":
        return cls(
            id=account.id,
            full_name=account.full_name,
            birth_date=account.birth_date,
            email=account.email,
            role=account.role,
            is_active=account.is_active,
        )


class AccountResponse(RegisteredAccount):
    """Full profile representation of an `Account` aggregate."""

    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            full_name=account.full_name,
            birth_date=account.birth_date,
            email=account.email,
            role=account.role,
            is_active=account.is_active,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class RegisterRequest(BaseModel):
    """Payload accepted when registering a new account."""

    model_config = ConfigDict(populate_by_name=True)

    full_name: str | None = Field(default=None, alias="fullName")
    birth_date: str | None = Field(default=None, alias="birthDate")
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class LoginResponse(BaseModel):
    """Bearer token together with the authenticated account."""

    token: str
    user: AccountSummary


class UpdateStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_active: StrictBool = Field(..., alias="isActive")


@router.post("/register", response_model=RegisteredAccount, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest | None = None,
    service: AccountService = Depends(get_service),
) -> RegisteredAccount:
    """Register a new account with the ``USER`` role."""
    payload = payload or RegisterRequest()
    account = service.register(
        payload.full_name,
        payload.birth_date,
        payload.email,
        payload.password,
    )
    return RegisteredAccount.from_domain(account)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest | None = None,
    service: AccountService = Depends(get_service),
) -> LoginResponse:
    """Exchange email and password for a bearer token."""
    payload = payload or LoginRequest()
    try:
        result = service.login(payload.email, payload.password)
    except AccountServiceError as exc:
        LOGIN_ATTEMPTS.labels(outcome=type(exc).__name__).inc()
        raise
    LOGIN_ATTEMPTS.labels(outcome="success").inc()
    return LoginResponse(token=result.token, user=AccountSummary.from_domain(result.account))


@router.get("", response_model=list[AccountResponse])
@router.get("/", response_model=list[AccountResponse], include_in_schema=False)
def list_accounts(
    identity: TokenIdentity = Depends(require_admin),
    service: AccountService = Depends(get_service),
) -> list[AccountResponse]:
    """List every account (administrators only)."""
    return [AccountResponse.from_domain(account) for account in service.list_all(identity)]


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    identity: TokenIdentity = Depends(require_identity),
    service: AccountService = Depends(get_service),
) -> AccountResponse:
    """Return a profile to its owner or to an administrator."""
    return AccountResponse.from_domain(service.get_by_id(identity, account_id))


@router.put("/{account_id}/status", response_model=AccountSummary)
def update_status(
    account_id: int,
    payload: UpdateStatusRequest,
    identity: TokenIdentity = Depends(require_identity),
    service: AccountService = Depends(get_service),
) -> AccountSummary:
    """Activate or block an account."""
    account = service.update_status(identity, account_id, payload.is_active)
    return AccountSummary.from_domain(account)
