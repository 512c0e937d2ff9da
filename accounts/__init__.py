"""Catchup accounts API: signup, login, profile, logout and password reset."""
from accounts.app import create_app

__all__ = ["create_app"]
