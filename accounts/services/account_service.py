"""
Account lifecycle use cases: signup, login, profile, logout and password reset.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from accounts.core.config import Settings
from accounts.core.errors import NotFoundError, RoleNotAllowedError
from accounts.core.mailer import Mailer
from accounts.core.security import new_reset_token
from accounts.core.utils import absolute_url
from accounts.domain.users import (
    LoginPayload,
    ProfileUpdatePayload,
    SignupPayload,
    generate_username,
    public_user,
)
from accounts.repositories.user_repository import UserRepository
from accounts.services.session_service import SessionStore

logger = logging.getLogger(__name__)

_LOG = {"component": "service"}

RESET_SUBJECT = "Catchup Password Reset"


@dataclass
class SessionResult:
    user: dict
    session_token: str


@dataclass
class ResetLinkResult:
    reset_url: str
    mail_sent: bool


@dataclass
class AccountService:
    """Orchestrates the user repository, the session store and the mailer."""

    repository: UserRepository
    sessions: SessionStore
    mailer: Mailer
    settings: Settings

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _check_role(self, role: Optional[str]) -> Optional[str]:
        """Return ``role`` lowercased if it may be self-assigned."""
        if role is None:
            return None
        normalized = role.lower()
        if normalized not in self.settings.signup_roles:
            logger.warning("Rejected self-assigned role %r", role, extra=_LOG)
            raise RoleNotAllowedError(role)
        return normalized

    def _reset_mail(self, reset_url: str) -> tuple[str, str]:
        text = (
            "You are receiving this because you (or someone else) have requested the reset of the password for your account.\n\n"
            "Please click on the following link, or paste this into your browser to complete the process:\n\n"
            f"{reset_url}\n\n"
            "If you did not request this, please ignore this email and your password will remain unchanged.\n"
        )
        html_body = f"""
        <p>You are receiving this because you (or someone else) have requested the reset of the password for your account.</p>
        <p><a href="{reset_url}">Reset my password</a></p>
        <p>If the button does not work, paste this link into your browser:</p>
        <p>{reset_url}</p>
        <p>If you did not request this, please ignore this email and your password will remain unchanged.</p>
        """
        return text, html_body

    # -------------------------------------- signup / login --------------------------------------
    def signup(self, payload: SignupPayload) -> SessionResult:
        role = self._check_role(payload.type)
        user = self.repository.create(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            password=payload.password,
            user_name=generate_username(payload.first_name),
            phone=payload.phone,
            type=role,
        )
        logger.info("User successfully added to database", extra={**_LOG, "user_id": user.id})
        data = public_user(user)
        return SessionResult(user=data, session_token=self.sessions.issue(data))

    def login(self, payload: LoginPayload) -> SessionResult:
        user = self.repository.authenticate(payload.email, payload.password)
        logger.info("User successfully logged in", extra={**_LOG, "user_id": user.id})
        data = public_user(user)
        return SessionResult(user=data, session_token=self.sessions.issue(data))

    # -------------------------------------- profile --------------------------------------
    def profile(self, user_id: str) -> dict:
        user = self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return public_user(user)

    def update_profile(self, user_id: str, payload: ProfileUpdatePayload, session_token: str | None = None) -> dict:
        changes = payload.changes()
        if "type" in changes:
            changes["type"] = self._check_role(changes["type"])
        user = self.repository.find_by_id_and_update(user_id, changes)
        if user is None:
            raise NotFoundError("User not found")
        data = public_user(user)
        self.sessions.refresh(session_token, data)
        logger.info("Edited Profile Details", extra={**_LOG, "user_id": user_id})
        return data

    def logout(self, session_token: str | None) -> None:
        self.sessions.destroy(session_token)
        logger.info("User Logged Out", extra=_LOG)

    # -------------------------------------- password reset --------------------------------------
    def forgot_password(self, email: str, base_url: str | None = None) -> ResetLinkResult:
        """
        Issue a reset token valid for ``password_reset_ttl`` seconds and mail the link.

        The token is saved before the mail goes out; if sending fails the token
        stays valid. ``mail_sent`` is False when no mail transport is configured.
        """
        user = self.repository.find_one(email=email)
        if user is None:
            raise NotFoundError("User not found")
        token = new_reset_token()
        user.reset_password_token = token
        user.reset_password_expires = self._now() + timedelta(seconds=self.settings.password_reset_ttl)
        user = self.repository.save(user)
        logger.info("Reset token issued (%s...)", token[:6], extra={**_LOG, "user_id": user.id})

        reset_url = absolute_url(
            f"/users/reset/{token}", base=base_url, public_base_url=self.settings.public_base_url
        )
        text_body, html_body = self._reset_mail(reset_url)
        sent = self.mailer.send(RESET_SUBJECT, user.email, text_body, html_body)
        if sent:
            logger.info("Password reset mail successfully sent", extra={**_LOG, "user_id": user.id})
        else:
            logger.warning("Password reset mail not sent", extra={**_LOG, "user_id": user.id})
        return ResetLinkResult(reset_url=reset_url, mail_sent=bool(sent))

    def reset_password(self, token: str, password: str) -> None:
        user = self.repository.find_one(reset_token=token, now=self._now())
        if user is None:
            logger.warning("Reset token not found or expired", extra=_LOG)
            raise NotFoundError("User not found")
        self.repository.set_password(user, password)
        user.reset_password_token = None
        user.reset_password_expires = None
        self.repository.save(user)
        logger.info("successfully changed password", extra={**_LOG, "user_id": user.id})
