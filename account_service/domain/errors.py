"""Recoverable failures raised by the account workflows."""

from __future__ import annotations


class AccountServiceError(Exception):
    """Base class for errors that map onto a client-facing HTTP status."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AccountServiceError):
    status_code = 400


class AdminSelfBlockError(ValidationError):
    def __init__(self, message: str = "Admin cannot block themselves") -> None:
        super().__init__(message)


class UnauthenticatedError(AccountServiceError):
    status_code = 401


class InvalidCredentialsError(UnauthenticatedError):
    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class ForbiddenError(AccountServiceError):
    status_code = 403


class AccountBlockedError(ForbiddenError):
    def __init__(self, message: str = "User is blocked") -> None:
        super().__init__(message)


class NotFoundError(AccountServiceError):
    status_code = 404


class EmailInUseError(AccountServiceError):
    status_code = 409

    def __init__(self, message: str = "Email already in use") -> None:
        super().__init__(message)
