"""Payload validation against a static set of named schemas."""

from __future__ import annotations

from typing import Callable

from fastapi import Request
from pydantic import BaseModel, ValidationError

from accounts.core.errors import ValidationFailed
from accounts.domain.users import (
    ForgotPasswordPayload,
    LoginPayload,
    ProfileUpdatePayload,
    ResetPasswordPayload,
    SignupPayload,
)

SCHEMAS: dict[str, type[BaseModel]] = {
    "signup": SignupPayload,
    "login": LoginPayload,
    "forgotPassword": ForgotPasswordPayload,
    "resetPassword": ResetPasswordPayload,
    "profile": ProfileUpdatePayload,
}


def _field_errors(exc: ValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in err["loc"]) or "body",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


def validate(schema_name: str) -> Callable:
    """
    Build a dependency that parses the JSON body with the named schema.

    Invalid payloads short-circuit with a 400 envelope; on success the parsed
    model is handed to the route.
    """
    schema = SCHEMAS[schema_name]

    async def dependency(request: Request) -> BaseModel:
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationFailed("Request body must be a JSON object")
        if not isinstance(payload, dict):
            raise ValidationFailed("Request body must be a JSON object")
        try:
            return schema.model_validate(payload)
        except ValidationError as exc:
            errors = _field_errors(exc)
            fields = ", ".join(err["field"] for err in errors)
            raise ValidationFailed(f"Invalid {schema_name} payload: {fields}", data=errors)

    dependency.__name__ = f"validate_{schema_name}"
    return dependency
