"""Uniform response envelope shared by every /users route."""

from __future__ import annotations

from typing import Any


def generate(is_error: bool, message: str, status_code: int, data: Any = None) -> dict:
    """Wrap a result into ``{error, message, status, data}``."""
    return {
        "error": bool(is_error),
        "message": message,
        "status": status_code,
        "data": data,
    }
