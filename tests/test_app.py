from __future__ import annotations

import smtplib

import pytest
from fastapi import status

from lumo_tasks.core.config import Settings
from lumo_tasks.errors import ServerError
from lumo_tasks.services.mailer import SmtpMailer, render_email


@pytest.mark.asyncio
async def test_health_check_reaches_database(client) -> None:
    response = await client.get("/api/v1/healthz")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok", "database": "ok"}


@pytest.mark.asyncio
async def test_root_reports_metadata(client, settings) -> None:
    response = await client.get("/")
    assert response.status_code == status.HTTP_200_OK
    payload = response.json()
    assert payload["name"] == settings.project_name
    assert payload["environment"] == "test"
    assert payload["api_prefix"] == "/api/v1"


def test_reset_email_escapes_user_content() -> None:
    html = render_email(
        "password_reset_request.html",
        first_name="<script>",
        reset_link="https://front.example.com/reset-password/?token=abc",
        valid_minutes=60,
    )
    assert "&lt;script&gt;" in html
    assert "https://front.example.com/reset-password/?token=abc" in html
    assert "60 minutes" in html


@pytest.mark.asyncio
async def test_smtp_mailer_skips_without_host(monkeypatch) -> None:
    def _fail(*_args, **_kwargs):  # pragma: no cover - must not be reached
        raise AssertionError("SMTP should not be contacted")

    monkeypatch.setattr(smtplib, "SMTP", _fail)
    mailer = SmtpMailer(Settings(environment="test", smtp_host=None))
    await mailer.send("ana@example.com", "Subject", "<p>Hello</p>")


@pytest.mark.asyncio
async def test_smtp_mailer_requires_host_in_production(monkeypatch) -> None:
    def _fail(*_args, **_kwargs):  # pragma: no cover - must not be reached
        raise AssertionError("SMTP should not be contacted")

    monkeypatch.setattr(smtplib, "SMTP", _fail)
    mailer = SmtpMailer(Settings(environment="production", smtp_host=None))
    with pytest.raises(ServerError) as exc_info:
        await mailer.send("ana@example.com", "Subject", "<p>Hello</p>")
    assert exc_info.value.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


@pytest.mark.asyncio
async def test_smtp_mailer_delivers_and_reraises(monkeypatch) -> None:
    delivered: list[object] = []

    class _FakeSMTP:
        def __init__(self, host, port, timeout=None) -> None:
            self.host = host

        def __enter__(self):
            return self

        def __exit__(self, *exc_info) -> None:
            return None

        def starttls(self) -> None:
            return None

        def login(self, username, password) -> None:
            return None

        def send_message(self, message) -> None:
            if self.host == "broken.example.com":
                raise smtplib.SMTPException("relay refused")
            delivered.append(message)

    monkeypatch.setattr(smtplib, "SMTP", _FakeSMTP)

    mailer = SmtpMailer(Settings(environment="test", smtp_host="smtp.example.com"))
    await mailer.send("ana@example.com", "Hello", "<p>Hi</p>")
    assert delivered and delivered[0]["To"] == "ana@example.com"
    assert "Lumo Support Team" in delivered[0]["From"]

    broken = SmtpMailer(Settings(environment="test", smtp_host="broken.example.com"))
    with pytest.raises(smtplib.SMTPException):
        await broken.send("ana@example.com", "Hello", "<p>Hi</p>")
