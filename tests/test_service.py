from __future__ import annotations

from datetime import datetime, timezone

import pytest

from account_service.domain.account import Role
from account_service.domain.errors import (
    AccountBlockedError,
    EmailInUseError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from account_service.domain.service import AccountService, parse_birth_date
from account_service.security.tokens import decode_access_token

from conftest import FakeRepository, identity_of


def test_register_creates_active_user(service, repository):
    account = service.register("Ann", "1990-01-01", "ann@example.com", "secret1")
    assert account.role is Role.USER
    assert account.is_active is True
    assert account.birth_date == datetime(1990, 1, 1, tzinfo=timezone.utc)
    assert account.password_hash != "secret1"
    assert repository.get_account(account.id) == account


@pytest.mark.parametrize(
    "fields",
    [
        (None, "1990-01-01", "a@x.com", "secret1"),
        ("Ann", None, "a@x.com", "secret1"),
        ("Ann", "1990-01-01", "  ", "secret1"),
        ("Ann", "1990-01-01", "a@x.com", ""),
    ],
)
def test_register_rejects_missing_fields(service, fields):
    with pytest.raises(ValidationError, match="All fields are required"):
        service.register(*fields)


def test_register_rejects_overlong_password(service):
    with pytest.raises(ValidationError):
        service.register("Ann", "1990-01-01", "a@x.com", "x" * 73)


def test_register_duplicate_email(service):
    service.register("Ann", "1990-01-01", "ann@example.com", "secret1")
    with pytest.raises(EmailInUseError):
        service.register("Ann Again", "1991-02-02", "ann@example.com", "secret2")


def test_register_relies_on_store_uniqueness_when_precheck_misses():
    class RacingRepository(FakeRepository):
        def get_account_by_email(self, email):
            return None

    repository = RacingRepository()
    service = AccountService(repository)
    service.register("Ann", "1990-01-01", "ann@example.com", "secret1")
    with pytest.raises(EmailInUseError):
        service.register("Ann", "1990-01-01", "ann@example.com", "secret1")
    assert len(repository.list_accounts()) == 1


def test_parse_birth_date_accepts_datetimes_with_offset():
    parsed = parse_birth_date("1990-01-01T03:00:00+03:00")
    assert parsed == datetime(1990, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value",
    ["0001-01-01T00:00:00+01:00", "9999-12-31T23:00:00-05:00", "1990-13-01", ""],
)
def test_parse_birth_date_rejects_values_outside_the_utc_range(value):
    with pytest.raises(ValidationError, match="Invalid birthDate format"):
        parse_birth_date(value)


def test_register_rejects_birth_date_that_overflows_in_utc(service, repository):
    with pytest.raises(ValidationError, match="Invalid birthDate format"):
        service.register("Ann", "0001-01-01T00:00:00+01:00", "ann@example.com", "secret1")
    assert repository.list_accounts() == []


def test_login_returns_token_for_same_identity(service, make_account):
    account = make_account("user@example.com")
    result = service.login("user@example.com", "secret1")
    identity = decode_access_token(result.token)
    assert (identity.id, identity.role) == (account.id, account.role)
    assert result.expires_in == 24 * 60 * 60


def test_login_unknown_email(service):
    with pytest.raises(InvalidCredentialsError):
        service.login("ghost@example.com", "secret1")


def test_login_checks_password_before_active_flag(service, repository, make_account):
    account = make_account("user@example.com")
    repository.update_status(account.id, False)
    with pytest.raises(InvalidCredentialsError):
        service.login("user@example.com", "wrong")
    with pytest.raises(AccountBlockedError):
        service.login("user@example.com", "secret1")


def test_get_by_id_checks_existence_then_policy(service, make_account):
    user = make_account("user@example.com")
    other = make_account("other@example.com")
    with pytest.raises(NotFoundError):
        service.get_by_id(identity_of(user), 999)
    with pytest.raises(ForbiddenError):
        service.get_by_id(identity_of(user), other.id)
    assert service.get_by_id(identity_of(user), user.id).id == user.id


def test_list_all_for_admin_only(service, make_account):
    admin = make_account("admin@example.com", role=Role.ADMIN)
    user = make_account("user@example.com")
    with pytest.raises(ForbiddenError):
        service.list_all(identity_of(user))
    assert [a.id for a in service.list_all(identity_of(admin))] == [admin.id, user.id]


def test_update_status_touches_updated_at(service, make_account):
    admin = make_account("admin@example.com", role=Role.ADMIN)
    user = make_account("user@example.com")
    updated = service.update_status(identity_of(admin), user.id, False)
    assert updated.is_active is False
    assert updated.updated_at >= user.updated_at
    assert updated.role is Role.USER


def test_update_status_leaves_store_untouched_when_denied(service, repository, make_account):
    user = make_account("user@example.com")
    other = make_account("other@example.com")
    with pytest.raises(ForbiddenError):
        service.update_status(identity_of(user), other.id, False)
    assert repository.get_account(other.id).is_active is True
