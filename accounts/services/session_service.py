"""Session store (issue tokens, cookies, lookup, destroy)."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from fastapi import Request, Response
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from accounts.core.config import Settings
from accounts.core.errors import PersistenceError, SessionError
from accounts.core.security import new_session_token
from accounts.db.models import UserSession
from accounts.db.session import get_session

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "session"

_LOG = {"component": "session"}


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SessionStore:
    """Server-side sessions keyed by the ``session`` cookie, holding a stripped copy of the user."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def issue(self, user: dict) -> str:
        """Create a new session row for ``user`` (a public projection) and return its token."""
        token = new_session_token()
        ttl = max(60, self.settings.session_ttl_seconds)
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)
        try:
            with get_session(self.settings.database_url) as session:
                session.add(UserSession(token=token, user_id=user["id"], data=user, expires_at=expires_at))
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Could not store session: %s", exc, extra=_LOG)
            raise PersistenceError(str(exc)) from exc
        return token

    def get(self, token: str | None) -> dict | None:
        """Return the session user for ``token``; expired sessions are removed."""
        if not token:
            return None
        now = datetime.now(timezone.utc)
        with get_session(self.settings.database_url) as session:
            entity = session.get(UserSession, token)
            if entity is None:
                return None
            if _as_utc(entity.expires_at) < now:
                session.delete(entity)
                session.commit()
                return None
            return dict(entity.data or {})

    def refresh(self, token: str | None, user: dict) -> None:
        """Replace the stored user copy after a profile change."""
        if not token:
            return
        try:
            with get_session(self.settings.database_url) as session:
                entity = session.get(UserSession, token)
                if entity is not None:
                    entity.data = user
                    session.commit()
        except SQLAlchemyError as exc:
            logger.error("Could not refresh session: %s", exc, extra=_LOG)
            raise PersistenceError(str(exc)) from exc

    def destroy(self, token: str | None) -> None:
        """Remove a session; a missing token is a no-op."""
        if not token:
            return
        try:
            with get_session(self.settings.database_url) as session:
                session.execute(delete(UserSession).where(UserSession.token == token))
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Could not destroy session: %s", exc, extra=_LOG)
            raise SessionError(str(exc)) from exc


def session_token(request: Request) -> str | None:
    return request.cookies.get(SESSION_COOKIE_NAME)


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="strict",
        max_age=settings.session_ttl_seconds,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
