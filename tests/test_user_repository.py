"""
Smoke tests for the UserRepository against a temporary SQLite database.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from accounts.core.errors import InvalidCredentialsError, PersistenceError
from accounts.repositories.user_repository import UserRepository


def _create(repo: UserRepository, email: str = "alice@example.com", user_name: str = "Alice1"):
    return repo.create(first_name="Alice", email=email, password="s3cret", user_name=user_name, phone="555")


def test_create_and_find(temp_db):
    repo = UserRepository()
    user = _create(repo)

    assert len(user.id) == 32
    assert user.created_at is not None
    assert repo.find_by_id(user.id).email == "alice@example.com"
    assert repo.find_one(email="alice@example.com").id == user.id
    assert repo.find_one(email="bob@example.com") is None


def test_unique_email_and_username(temp_db):
    repo = UserRepository()
    _create(repo)

    with pytest.raises(PersistenceError, match="Email already registered"):
        _create(repo, user_name="Alice2")
    with pytest.raises(PersistenceError, match="Username already taken"):
        _create(repo, email="other@example.com")


def test_authenticate(temp_db):
    repo = UserRepository()
    user = _create(repo)

    assert repo.authenticate("alice@example.com", "s3cret").id == user.id
    with pytest.raises(InvalidCredentialsError):
        repo.authenticate("alice@example.com", "wrong")
    with pytest.raises(InvalidCredentialsError):
        repo.authenticate("nobody@example.com", "s3cret")


def test_update_skips_fields_outside_whitelist(temp_db):
    repo = UserRepository()
    user = _create(repo)

    updated = repo.find_by_id_and_update(
        user.id,
        {"first_name": "Alicia", "email": "x@example.com", "user_name": "hijack", "password": "n3w"},
    )

    assert updated.first_name == "Alicia"
    assert updated.email == "alice@example.com"
    assert updated.user_name == "Alice1"
    assert repo.authenticate("alice@example.com", "n3w").id == user.id
    assert repo.find_by_id_and_update("missing", {"first_name": "x"}) is None


def test_reset_token_lookup_honours_expiry(temp_db):
    repo = UserRepository()
    user = _create(repo)
    issued = datetime.now(timezone.utc)
    user.reset_password_token = "a" * 30
    user.reset_password_expires = issued + timedelta(hours=1)
    repo.save(user)

    assert repo.find_one(reset_token="a" * 30, now=issued).id == user.id
    assert repo.find_one(reset_token="a" * 30, now=issued + timedelta(minutes=59)) is not None
    assert repo.find_one(reset_token="a" * 30, now=issued + timedelta(hours=1, seconds=1)) is None
    assert repo.find_one(reset_token="b" * 30, now=issued) is None


def test_find_one_needs_a_filter(temp_db):
    with pytest.raises(ValueError):
        UserRepository().find_one()
