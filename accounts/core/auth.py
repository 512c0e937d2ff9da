"""Route guard: only requests carrying a live session get through."""

from __future__ import annotations

from fastapi import Request

from accounts.core.errors import NotLoggedInError
from accounts.services.session_service import session_token


def check_logged_in(request: Request) -> dict:
    """Return the session user or reject with 401."""
    user = request.app.state.sessions.get(session_token(request))
    if not user:
        raise NotLoggedInError()
    return user
