"""
Configuration helpers for the accounts backend.

Every tunable (database URL, mail transport, TTLs, roles) is read from the
environment here so that routers/services never touch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    auto_create_tables: bool
    public_base_url: str
    cors_origins: tuple[str, ...]
    mail_service: str
    smtp_host: str
    smtp_port: int
    mail_user: str
    mail_password: str
    mail_from: str
    smtp_timeout: int
    password_reset_ttl: int
    session_ttl_seconds: int
    signup_roles: frozenset[str]
    expose_error_details: bool
    log_level: str
    log_format: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _list(value: str | None) -> list[str]:
        return [item.strip() for item in (value or "").split(",") if item.strip()]

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    return Settings(
        app_env=app_env,
        database_url=os.getenv("DATABASE_URL", "sqlite:///./accounts.db"),
        auto_create_tables=_bool(os.getenv("AUTO_CREATE_TABLES"), True),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "").rstrip("/"),
        cors_origins=tuple(_list(os.getenv("CORS_ORIGINS"))),
        mail_service=(os.getenv("MAIL_SERVICE") or "").strip().lower(),
        smtp_host=os.getenv("SMTP_HOST", ""),
        smtp_port=_int(os.getenv("SMTP_PORT", "0"), 0),
        mail_user=os.getenv("MAIL_USER", ""),
        mail_password=os.getenv("MAIL_PASSWORD", ""),
        mail_from=os.getenv("MAIL_FROM", os.getenv("MAIL_USER", "")),
        smtp_timeout=_int(os.getenv("SMTP_TIMEOUT", "10"), 10),
        password_reset_ttl=_int(os.getenv("PASSWORD_RESET_TTL", "3600"), 3600),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400),
        signup_roles=frozenset(role.lower() for role in _list(os.getenv("SIGNUP_ROLES", "user"))),
        expose_error_details=_bool(os.getenv("EXPOSE_ERROR_DETAILS"), app_env != "prod"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_format=(os.getenv("LOG_FORMAT") or "json").lower(),
    )
