"""Domain helpers for users: request payloads, usernames and the public projection."""
from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from accounts.db.models import User

# Editable through PUT /users/profile. email and user_name are never here.
EDITABLE_FIELDS = ("first_name", "last_name", "phone", "password", "type")


class _Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class SignupPayload(_Payload):
    first_name: str = Field(min_length=1, max_length=120)
    last_name: Optional[str] = Field(default=None, max_length=120)
    email: EmailStr
    password: str = Field(min_length=1)
    phone: Optional[str] = Field(default=None, max_length=40)
    type: Optional[str] = Field(default=None, max_length=32)


class LoginPayload(_Payload):
    email: EmailStr
    password: str = Field(min_length=1)


class ForgotPasswordPayload(_Payload):
    email: EmailStr


class ResetPasswordPayload(_Payload):
    password: str = Field(min_length=1)


class ProfileUpdatePayload(_Payload):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    last_name: Optional[str] = Field(default=None, max_length=120)
    phone: Optional[str] = Field(default=None, max_length=40)
    password: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = Field(default=None, max_length=32)

    def changes(self) -> dict:
        """Fields the client actually sent with a non-null value."""
        return {key: value for key, value in self.model_dump(exclude_unset=True).items() if value is not None}


def generate_username(first_name: str) -> str:
    """Username is the first name followed by a short random id."""
    return f"{first_name}{secrets.token_urlsafe(6)}"


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    # SQLite drops the offset; timestamps are stored as UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def public_user(user: User) -> dict:
    """Plain dict safe to send to clients: no password, no reset token pair."""
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "userName": user.user_name,
        "email": user.email,
        "phone": user.phone,
        "type": user.type,
        "createdAt": _iso(user.created_at),
        "updatedAt": _iso(user.updated_at),
    }
