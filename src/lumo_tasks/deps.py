"""Reusable FastAPI dependencies."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Annotated

import pydantic
from fastapi import Depends, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from .core.config import Settings, get_settings
from .core.context import bind_actor
from .core.security import JWTError, decode_token
from .db.session import get_session
from .errors import UnauthenticatedError
from .schemas.auth import TokenPayload
from .services import AccountService, ListService, Mailer, SmtpMailer, TaskService

logger = logging.getLogger(__name__)

TOKEN_MISSING = "Token missing."
INVALID_TOKEN = "Invalid token."

_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="users/login", auto_error=False)


@dataclass(frozen=True, slots=True)
class Actor:
    """Identity carried by a verified access token."""

    id: int
    email: str


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields a database session."""

    async for session in get_session():
        yield session


SettingsDependency = Annotated[Settings, Depends(get_settings)]
DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_db_session)]


def get_mailer(settings: SettingsDependency) -> Mailer:
    return SmtpMailer(settings)


MailerDependency = Annotated[Mailer, Depends(get_mailer)]


def _invalid_token() -> UnauthenticatedError:
    return UnauthenticatedError(INVALID_TOKEN, code="invalid_token", status_code=status.HTTP_403_FORBIDDEN)


async def get_current_actor(
    settings: SettingsDependency,
    token: str | None = Depends(_oauth2_scheme),
) -> Actor:
    """Resolve the bearer token into an :class:`Actor`.

    A missing token is a 401; a token that fails verification is a 403.
    """
    if not token:
        raise UnauthenticatedError(TOKEN_MISSING)
    try:
        payload = decode_token(
            token=token,
            secret=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        token_payload = TokenPayload.model_validate(payload)
        actor_id = int(token_payload.sub)
    except (JWTError, pydantic.ValidationError, ValueError) as exc:
        logger.info("Rejected bearer token: %s", type(exc).__name__)
        raise _invalid_token() from exc
    bind_actor(actor_id)
    return Actor(id=actor_id, email=token_payload.email)


CurrentActorDependency = Annotated[Actor, Depends(get_current_actor)]


def get_account_service(
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
    mailer: MailerDependency,
) -> AccountService:
    return AccountService(session, settings, mailer)


def get_list_service(session: DatabaseSessionDependency) -> ListService:
    return ListService(session)


def get_task_service(session: DatabaseSessionDependency) -> TaskService:
    return TaskService(session)


AccountServiceDependency = Annotated[AccountService, Depends(get_account_service)]
ListServiceDependency = Annotated[ListService, Depends(get_list_service)]
TaskServiceDependency = Annotated[TaskService, Depends(get_task_service)]


__all__ = [
    "AccountServiceDependency",
    "Actor",
    "CurrentActorDependency",
    "DatabaseSessionDependency",
    "ListServiceDependency",
    "MailerDependency",
    "SettingsDependency",
    "TaskServiceDependency",
    "get_current_actor",
    "get_db_session",
    "get_mailer",
]
