"""Repository for interacting with user persistence models."""

from __future__ import annotations

from typing import Any, Mapping

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import User
from ..schemas.user import UserRecord
from .base import EntityCapabilities, PersistenceGateway
from .lists import ListRepository
from .tasks import TaskRepository

USER_CAPABILITIES: EntityCapabilities[User] = EntityCapabilities(
    model=User,
    schema=UserRecord,
    unique_keys=(("email",),),
    conflict_message="Email already registered.",
    not_found_message="User not found.",
)


class UserRepository:
    """User persistence with email lookups and a cascading delete."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._gateway = PersistenceGateway(session, USER_CAPABILITIES)

    async def create(self, data: Mapping[str, Any]) -> User:
        return await self._gateway.create(data)

    async def read(self, user_id: int) -> User | None:
        return await self._gateway.read(user_id)

    async def get(self, user_id: int) -> User:
        return await self._gateway.get(user_id)

    async def update(self, user_id: int, changes: Mapping[str, Any]) -> User:
        return await self._gateway.update(user_id, changes)

    async def list(self, **filters: Any) -> list[User]:
        return await self._gateway.list(**filters)

    async def find_by_email(self, email: str) -> User | None:
        """Return a user matching the supplied email if it exists."""
        result = await self._session.exec(select(User).where(User.email == email.strip().lower()))
        return result.first()

    async def find_by_reset_token(self, token_digest: str) -> User | None:
        """Return the user holding the given reset token digest, if any."""
        result = await self._session.exec(
            select(User).where(User.reset_password_token == token_digest)
        )
        return result.first()

    async def delete(self, user_id: int) -> User | None:
        """Delete the user's tasks, then lists, then the user row.

        Returns the removed user, or ``None`` if it did not exist. The caller
        runs this inside one unit of work so the cascade is all-or-nothing.
        """
        user = await self._gateway.read(user_id)
        if user is None:
            return None
        await TaskRepository(self._session).delete_for_user(user_id)
        await ListRepository(self._session).delete_for_user(user_id)
        return await self._gateway.delete(user_id)
