"""Outgoing email: template rendering and SMTP delivery."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path
from typing import Any, Protocol

from jinja2 import Environment, FileSystemLoader, select_autoescape
from starlette.concurrency import run_in_threadpool

from ..core.config import Settings
from ..errors import ServerError

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates" / "email"
_ENV = Environment(
    loader=FileSystemLoader(_TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "xml"]),
)


def render_email(template_name: str, **context: Any) -> str:
    """Render one of the bundled HTML email templates."""
    return _ENV.get_template(template_name).render(**context)


class Mailer(Protocol):
    """Anything able to deliver an HTML email."""

    async def send(self, recipient: str, subject: str, html_body: str) -> None:
        ...


class SmtpMailer:
    """Deliver emails through the configured SMTP relay.

    Transport errors are logged and re-raised. Without an SMTP host the
    message is skipped outside production and refused in production.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def send(self, recipient: str, subject: str, html_body: str) -> None:
        await run_in_threadpool(self._deliver, recipient, subject, html_body)

    def _build_message(self, recipient: str, subject: str, html_body: str) -> EmailMessage:
        settings = self._settings
        message = EmailMessage()
        message["Subject"] = subject
        message["To"] = recipient
        message["From"] = formataddr((settings.mail_from_name, settings.mail_from_address))
        message.set_content("This message contains HTML content.")
        message.add_alternative(html_body, subtype="html")
        return message

    def _deliver(self, recipient: str, subject: str, html_body: str) -> None:
        settings = self._settings
        if not settings.smtp_host:
            if settings.environment == "production":
                logger.error("SMTP host not configured; cannot send email %r", subject)
                raise ServerError()
            logger.info("SMTP host not configured; skipping email %r", subject)
            return
        message = self._build_message(recipient, subject, html_body)
        try:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as server:
                if settings.smtp_use_tls:
                    server.starttls()
                if settings.smtp_username and settings.smtp_password:
                    server.login(settings.smtp_username, settings.smtp_password)
                server.send_message(message)
        except (OSError, smtplib.SMTPException):
            logger.exception("Failed to send email %r", subject)
            raise
        logger.info("Email %r delivered", subject)


__all__ = ["Mailer", "SmtpMailer", "render_email"]
