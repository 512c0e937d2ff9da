from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from accounts.core.auth import check_logged_in
from accounts.core.response import generate
from accounts.core.validation import validate
from accounts.domain.users import (
    ForgotPasswordPayload,
    LoginPayload,
    ProfileUpdatePayload,
    ResetPasswordPayload,
    SignupPayload,
)
from accounts.services.account_service import AccountService
from accounts.services.session_service import (
    clear_session_cookie,
    session_token,
    set_session_cookie,
)

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)

_LOG = {"component": "controller"}


def get_account_service(request: Request) -> AccountService:
    return request.app.state.account_service


@router.post("/signup")
def signup(
    response: Response,
    payload: SignupPayload = Depends(validate("signup")),
    service: AccountService = Depends(get_account_service),
):
    result = service.signup(payload)
    set_session_cookie(response, result.session_token, service.settings)
    logger.info("POST /users/signup ok", extra=_LOG)
    return generate(False, "User successfully added to database", 200, result.user)


@router.post("/login")
def login(
    response: Response,
    payload: LoginPayload = Depends(validate("login")),
    service: AccountService = Depends(get_account_service),
):
    result = service.login(payload)
    set_session_cookie(response, result.session_token, service.settings)
    logger.info("POST /users/login ok", extra=_LOG)
    return generate(False, "User successfully logged in", 200, result.user)


@router.get("/profile")
def profile(
    session_user: dict = Depends(check_logged_in),
    service: AccountService = Depends(get_account_service),
):
    user = service.profile(session_user["id"])
    return generate(False, "Profile Details", 200, user)


@router.put("/profile")
def edit_profile(
    request: Request,
    session_user: dict = Depends(check_logged_in),
    payload: ProfileUpdatePayload = Depends(validate("profile")),
    service: AccountService = Depends(get_account_service),
):
    user = service.update_profile(session_user["id"], payload, session_token(request))
    return generate(False, "Edited Profile Details", 200, user)


@router.get("/logout")
def logout(
    request: Request,
    response: Response,
    service: AccountService = Depends(get_account_service),
):
    service.logout(session_token(request))
    clear_session_cookie(response)
    return generate(False, "User Logged Out", 200, None)


@router.post("/forgotPassword")
def forgot_password(
    request: Request,
    payload: ForgotPasswordPayload = Depends(validate("forgotPassword")),
    service: AccountService = Depends(get_account_service),
):
    # The link is echoed back so the flow can be completed without a mailbox.
    result = service.forgot_password(payload.email, base_url=str(request.base_url))
    if not result.mail_sent:
        return generate(False, "Password reset link generated (mail not sent)", 200, result.reset_url)
    return generate(False, "Password reset mail successfully sent", 200, result.reset_url)


@router.post("/reset/{token}")
def reset_password(
    token: str,
    payload: ResetPasswordPayload = Depends(validate("resetPassword")),
    service: AccountService = Depends(get_account_service),
):
    service.reset_password(token, payload.password)
    return generate(False, "successfully changed password", 200, None)
