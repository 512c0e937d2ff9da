"""Error hierarchy for the account API.

Every failure a handler can produce is an AccountError carrying the HTTP
status it maps to; the global handler turns it into a response envelope.
"""

from __future__ import annotations

from typing import Any


class AccountError(Exception):
    """Base class for account-related exceptions."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None, data: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.data = data


class ValidationFailed(AccountError):
    status_code = 400


class NotLoggedInError(AccountError):
    status_code = 401

    def __init__(self, message: str = "Not logged in"):
        super().__init__(message)


class RoleNotAllowedError(AccountError):
    status_code = 403

    def __init__(self, role: str):
        super().__init__(f"Role '{role}' cannot be self-assigned")
        self.role = role


class NotFoundError(AccountError):
    status_code = 404


class InvalidCredentialsError(AccountError):
    # Login failures keep the 500 status the public contract promises.
    status_code = 500


class PersistenceError(AccountError):
    """Wraps any database failure."""

    status_code = 500
    public_message = "Database error"


class MailDeliveryError(AccountError):
    status_code = 500
    public_message = "Could not send e-mail"


class SessionError(AccountError):
    status_code = 500
    public_message = "Could not destroy session"
