from __future__ import annotations

import smtplib
from dataclasses import replace

import pytest

from accounts.core import mailer as mailer_module
from accounts.core.config import get_settings
from accounts.core.errors import MailDeliveryError
from accounts.core.mailer import Mailer


@pytest.fixture()
def settings(monkeypatch):
    for name in ("MAIL_SERVICE", "SMTP_HOST", "SMTP_PORT", "MAIL_USER", "MAIL_PASSWORD", "MAIL_FROM"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    base = get_settings()
    get_settings.cache_clear()
    return replace(base, mail_user="bot@x.com", mail_password="secret", mail_from="bot@x.com")


class _FakeSMTP:
    instances: list["_FakeSMTP"] = []

    def __init__(self, host, port, **kwargs):
        self.host = host
        self.port = port
        self.sent = []
        _FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        pass

    def starttls(self, context=None):
        pass

    def login(self, user, password):
        self.credentials = (user, password)

    def sendmail(self, sender, recipients, body):
        self.sent.append((sender, recipients, body))


def test_service_name_resolves_transport(settings):
    m = Mailer(replace(settings, mail_service="sendpulse"))

    assert (m.host, m.port) == ("smtp-pulse.com", 465)
    assert m.configured is True


def test_explicit_host_wins_over_service(settings):
    m = Mailer(replace(settings, mail_service="gmail", smtp_host="mail.internal", smtp_port=2525))

    assert (m.host, m.port) == ("mail.internal", 2525)


def test_unconfigured_transport_skips_send(settings, monkeypatch):
    def _boom(*a, **kw):
        raise AssertionError("SMTP must not be contacted")

    monkeypatch.setattr(mailer_module.smtplib, "SMTP_SSL", _boom)
    monkeypatch.setattr(mailer_module.smtplib, "SMTP", _boom)
    m = Mailer(replace(settings, mail_service="", smtp_host=""))

    assert m.configured is False
    assert m.send("Subject", "sam@x.com", "body") is False


def test_send_uses_credentials_from_settings(settings, monkeypatch):
    _FakeSMTP.instances.clear()
    monkeypatch.setattr(mailer_module.smtplib, "SMTP", _FakeSMTP)
    m = Mailer(replace(settings, mail_service="outlook"))

    assert m.send("Catchup Password Reset", "sam@x.com", "plain", "<p>html</p>") is True

    server = _FakeSMTP.instances[-1]
    assert (server.host, server.port) == ("smtp-mail.outlook.com", 587)
    assert server.credentials == ("bot@x.com", "secret")
    sender, recipients, body = server.sent[0]
    assert sender == "bot@x.com"
    assert recipients == ["sam@x.com"]
    assert "Catchup Password Reset" in body


def test_smtp_failure_raises_mail_delivery_error(settings, monkeypatch):
    class _Refusing(_FakeSMTP):
        def login(self, user, password):
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    monkeypatch.setattr(mailer_module.smtplib, "SMTP_SSL", _Refusing)
    m = Mailer(replace(settings, mail_service="gmail"))

    with pytest.raises(MailDeliveryError):
        m.send("Subject", "sam@x.com", "body")
