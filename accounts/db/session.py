"""Engine/session helpers for the SQL backend.

Engines and sessionmakers are cached per database URL; callers holding
injected settings pass ``settings.database_url``, everything else falls back
to the environment.
"""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from accounts.core.config import get_settings

Base = declarative_base()


def _resolve_url(url: str | None) -> str:
    resolved = (url or get_settings().database_url or "").strip()
    if not resolved:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    return resolved


@lru_cache
def _engine(url: str):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


@lru_cache
def _sessionmaker(url: str):
    return sessionmaker(bind=_engine(url), autoflush=False, autocommit=False, expire_on_commit=False, future=True)


def get_engine(url: str | None = None):
    return _engine(_resolve_url(url))


@contextmanager
def get_session(url: str | None = None) -> Session:
    session: Session = _sessionmaker(_resolve_url(url))()
    try:
        yield session
    finally:
        session.close()
