"""User persistence backed by SQLAlchemy.

Exposes the model contract the account use cases rely on (create, find_one,
find_by_id, find_by_id_and_update, authenticate, save). Every database failure
is re-raised as PersistenceError.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from accounts.core.errors import InvalidCredentialsError, PersistenceError
from accounts.core.security import hash_password, needs_rehash, verify_password
from accounts.db.models import User
from accounts.db.session import get_session
from accounts.domain.users import EDITABLE_FIELDS

logger = logging.getLogger(__name__)

_LOG = {"component": "repository"}


def _integrity_message(exc: IntegrityError) -> str:
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    if "email" in detail:
        return f"Email already registered: {detail}"
    if "user_name" in detail:
        return f"Username already taken: {detail}"
    return detail


class UserRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    def __init__(self, database_url: str | None = None):
        self.database_url = database_url

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with get_session(self.database_url) as session:
            try:
                yield session
            except IntegrityError as exc:
                session.rollback()
                logger.error("Integrity error: %s", exc, extra=_LOG)
                raise PersistenceError(_integrity_message(exc)) from exc
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Database error: %s", exc, extra=_LOG)
                raise PersistenceError(str(exc)) from exc

    # -------------------------- create / read --------------------------
    def create(
        self,
        *,
        first_name: str,
        email: str,
        password: str,
        user_name: str,
        last_name: str | None = None,
        phone: str | None = None,
        type: str | None = None,
    ) -> User:
        user = User(
            first_name=first_name,
            last_name=last_name,
            user_name=user_name,
            email=email,
            password_hash=hash_password(password),
            phone=phone,
            type=type,
        )
        with self._session() as session:
            session.add(user)
            session.commit()
            session.refresh(user)
        return user

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._session() as session:
            return session.get(User, user_id)

    def find_one(self, *, email: str | None = None, reset_token: str | None = None, now: datetime | None = None) -> Optional[User]:
        """
        Look a user up by e-mail or by reset token.

        With ``reset_token`` only a token whose expiry lies after ``now``
        (default: current UTC time) matches.
        """
        if email is None and reset_token is None:
            raise ValueError("find_one needs email or reset_token")
        stmt = select(User)
        if email is not None:
            stmt = stmt.where(User.email == email)
        if reset_token is not None:
            moment = now or datetime.now(timezone.utc)
            stmt = stmt.where(User.reset_password_token == reset_token, User.reset_password_expires > moment)
        with self._session() as session:
            return session.execute(stmt.limit(1)).scalar_one_or_none()

    # -------------------------- update --------------------------
    def find_by_id_and_update(self, user_id: str, changes: dict) -> Optional[User]:
        """Apply whitelisted changes and return the updated user (None when absent)."""
        with self._session() as session:
            user = session.get(User, user_id)
            if user is None:
                return None
            for key, value in changes.items():
                if key not in EDITABLE_FIELDS:
                    continue
                if key == "password":
                    user.password_hash = hash_password(value)
                else:
                    setattr(user, key, value)
            session.commit()
            session.refresh(user)
            return user

    def save(self, user: User) -> User:
        """Persist every column of a detached user."""
        with self._session() as session:
            merged = session.merge(user)
            session.commit()
            session.refresh(merged)
            return merged

    def set_password(self, user: User, password: str) -> None:
        user.password_hash = hash_password(password)

    # -------------------------- authentication --------------------------
    def authenticate(self, email: str, password: str) -> User:
        user = self.find_one(email=email)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid email or password")
        if needs_rehash(user.password_hash):
            self.set_password(user, password)
            user = self.save(user)
        return user
