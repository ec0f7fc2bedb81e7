from __future__ import annotations

import smtplib

import pytest

from hoaxify.core.config import settings
from hoaxify.services import email as email_service

# Bound at import, before the autouse stub replaces the module attributes.
from hoaxify.services.email import send_account_activation, send_password_reset


@pytest.fixture()
def captured(monkeypatch):
    sent: list[dict] = []

    def _send_email(to_email, subject, text, html=None):
        sent.append({"to": to_email, "subject": subject, "text": text, "html": html})
        return "msg_test_123"

    monkeypatch.setattr(email_service, "send_email", _send_email)
    monkeypatch.setattr(settings, "FRONTEND_BASE_URL", "http://localhost:8080")
    return sent


def test_activation_email_links_to_frontend(captured):
    send_account_activation("user1@mail.com", "abc123")

    assert captured[0]["to"] == "user1@mail.com"
    assert captured[0]["subject"] == "Account Activation"
    assert "http://localhost:8080/#login?token=abc123" in captured[0]["text"]


def test_password_reset_email_links_to_frontend(captured):
    send_password_reset("user1@mail.com", "xyz789")

    assert captured[0]["subject"] == "Password Reset"
    assert "http://localhost:8080/#/password-reset?reset=xyz789" in captured[0]["html"]


@pytest.mark.parametrize(
    "raw,expected",
    [(None, "smtp"), ("", "smtp"), ("gmail", "smtp"), ("SMTP", "smtp"), ("resend", "resend"), ("ses", "ses")],
)
def test_normalize_provider(raw, expected):
    assert email_service._normalize_provider(raw) == expected


def test_unknown_provider_is_not_configured():
    with pytest.raises(email_service.EmailNotConfiguredError):
        email_service._normalize_provider("carrier-pigeon")


def test_resend_requires_api_key(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_PROVIDER", "resend")
    monkeypatch.setattr(settings, "RESEND_API_KEY", "")
    with pytest.raises(email_service.EmailNotConfiguredError):
        email_service.send_email("user1@mail.com", "s", "t")


def test_smtp_connection_failure_is_delivery_error(monkeypatch):
    def _refuse(*args, **kwargs):
        raise ConnectionRefusedError("nope")

    monkeypatch.setattr(settings, "EMAIL_PROVIDER", "smtp")
    monkeypatch.setattr(settings, "SMTP_USE_SSL", False)
    monkeypatch.setattr(smtplib, "SMTP", _refuse)
    with pytest.raises(email_service.EmailDeliveryError):
        email_service.send_email("user1@mail.com", "s", "t")


def test_smtp_sends_multipart_message(monkeypatch):
    sent: list[tuple] = []

    class FakeSMTP:
        def __init__(self, host, port, timeout=None):
            self.host = host
            self.port = port

        def ehlo(self):
            pass

        def starttls(self):
            pass

        def login(self, username, password):
            pass

        def sendmail(self, from_addr, to_addrs, msg):
            sent.append((from_addr, to_addrs, msg))

        def quit(self):
            pass

    monkeypatch.setattr(settings, "EMAIL_PROVIDER", "smtp")
    monkeypatch.setattr(settings, "SMTP_USE_SSL", False)
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)

    email_service.send_email("user1@mail.com", "Hello", "plain body")

    assert len(sent) == 1
    from_addr, to_addrs, msg = sent[0]
    assert to_addrs == ["user1@mail.com"]
    assert "Subject: Hello" in msg
    assert "multipart/alternative" in msg
