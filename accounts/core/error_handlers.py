"""Global exception handlers: every failure leaves as a response envelope.

AccountError → its own status and message; RequestValidationError → 400;
HTTPException (unknown route, wrong method) → its status; anything else → 500.
Outside dev the message of persistence and unexpected errors is replaced by a
generic one; the full text is always logged.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from accounts.core.config import Settings
from accounts.core.errors import AccountError
from accounts.core.response import generate

logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str, data=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=generate(True, message, status_code, data))


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(AccountError)
    async def account_error_handler(request: Request, exc: AccountError):
        extra = {"component": "error_handler", "path": request.url.path, "status": exc.status_code}
        if exc.status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.message, exc_info=exc, extra=extra)
        else:
            logger.warning("%s: %s", type(exc).__name__, exc.message, extra=extra)
        message = exc.message
        public = getattr(exc, "public_message", None)
        if public and not settings.expose_error_details:
            message = public
        return _envelope(exc.status_code, message, exc.data)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Validation error on %s: %s",
            request.url.path,
            exc.errors(),
            extra={"component": "error_handler", "path": request.url.path, "status": 400},
        )
        details = [
            {"field": ".".join(str(loc) for loc in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return _envelope(status.HTTP_400_BAD_REQUEST, "Invalid request data", details)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s: %s",
            request.url.path,
            exc,
            exc_info=exc,
            extra={"component": "error_handler", "path": request.url.path, "status": 500},
        )
        message = str(exc) if settings.expose_error_details else "An unexpected error occurred"
        return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, message)
