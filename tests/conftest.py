from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Keep the accounts package importable when running straight from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from accounts.app import create_app  # noqa: E402
from accounts.core import config as core_config  # noqa: E402
from accounts.db import models  # noqa: E402
from accounts.db import session as db_session  # noqa: E402


class FakeMailer:
    """Records outgoing mails instead of talking to SMTP."""

    def __init__(self, fail_with: Exception | None = None):
        self.sent: list[dict] = []
        self.fail_with = fail_with

    def send(self, subject, to_email, text_body, html_body=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"subject": subject, "to": to_email, "text": text_body, "html": html_body})
        return True


def _clear_caches():
    core_config.get_settings.cache_clear()
    db_session._engine.cache_clear()
    db_session._sessionmaker.cache_clear()


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset the settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("LOG_FORMAT", "text")
    for name in ("PUBLIC_BASE_URL", "SIGNUP_ROLES", "EXPOSE_ERROR_DETAILS", "MAIL_SERVICE", "SMTP_HOST"):
        monkeypatch.delenv(name, raising=False)
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    _clear_caches()


@pytest.fixture()
def mailer():
    return FakeMailer()


@pytest.fixture()
def client(temp_db, mailer):
    app = create_app(mailer=mailer)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def sam():
    return {"firstName": "Sam", "lastName": "Doe", "email": "sam@x.com", "password": "p1", "phone": "123"}


@pytest.fixture()
def signed_up(client, sam):
    """Client holding the session of a freshly signed-up Sam."""
    resp = client.post("/users/signup", json=sam)
    assert resp.status_code == 200
    return resp.json()["data"]
