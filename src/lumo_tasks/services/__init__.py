"""Service layer for the Lumo tasks API."""

from __future__ import annotations

from .accounts import AccountService
from .authorization import authorize_ownership, ensure_task_matches_list
from .lists import ListService
from .mailer import Mailer, SmtpMailer, render_email
from .tasks import TaskService

__all__ = [
    "AccountService",
    "ListService",
    "Mailer",
    "SmtpMailer",
    "TaskService",
    "authorize_ownership",
    "ensure_task_matches_list",
    "render_email",
]
