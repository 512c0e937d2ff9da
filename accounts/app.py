from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from accounts.core.config import Settings, get_settings
from accounts.core.error_handlers import register_error_handlers
from accounts.core.mailer import Mailer
from accounts.core.observability import setup_logging
from accounts.db.create_tables import create_all
from accounts.db.session import get_engine
from accounts.repositories.user_repository import UserRepository
from accounts.routers import users as users_router
from accounts.services.account_service import AccountService
from accounts.services.session_service import SessionStore

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers for a JSON-only API."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Cache-Control", "no-store")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def create_app(
    settings: Settings | None = None,
    *,
    mailer: Mailer | None = None,
    repository: UserRepository | None = None,
    sessions: SessionStore | None = None,
) -> FastAPI:
    """Build the API with its collaborators passed in explicitly (usable as an uvicorn factory)."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    if settings.auto_create_tables:
        create_all(get_engine(settings.database_url))

    app = FastAPI(title="Catchup Accounts API")
    app.state.settings = settings
    app.state.sessions = sessions or SessionStore(settings)
    app.state.account_service = AccountService(
        repository=repository or UserRepository(settings.database_url),
        sessions=app.state.sessions,
        mailer=mailer or Mailer(settings),
        settings=settings,
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(settings.cors_origins),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    register_error_handlers(app, settings)

    app.include_router(users_router.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    logger.info("Accounts API ready (env=%s)", settings.app_env, extra={"component": "app"})
    return app
