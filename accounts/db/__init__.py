"""Database layer: engine/session factory and the ORM models."""

from .session import Base, get_engine, get_session
from .models import User, UserSession

__all__ = ["Base", "User", "UserSession", "get_engine", "get_session"]
