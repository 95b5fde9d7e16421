"""Repository for interacting with list persistence models."""

from __future__ import annotations

from typing import Any, Mapping

from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import TaskList
from ..schemas.task_list import ListRecord
from .base import EntityCapabilities, PersistenceGateway
from .tasks import TaskRepository

LIST_CAPABILITIES: EntityCapabilities[TaskList] = EntityCapabilities(
    model=TaskList,
    schema=ListRecord,
    unique_keys=(("title", "user_id"),),
    conflict_message="A list with that title already exists.",
    not_found_message="List not found.",
)


class ListRepository:
    """Concrete repository encapsulating ``TaskList`` persistence operations."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._gateway = PersistenceGateway(session, LIST_CAPABILITIES)

    async def create(self, data: Mapping[str, Any]) -> TaskList:
        return await self._gateway.create(data)

    async def read(self, list_id: int) -> TaskList | None:
        return await self._gateway.read(list_id)

    async def get(self, list_id: int) -> TaskList:
        return await self._gateway.get(list_id)

    async def update(self, list_id: int, changes: Mapping[str, Any]) -> TaskList:
        return await self._gateway.update(list_id, changes)

    async def list(self, **filters: Any) -> list[TaskList]:
        return await self._gateway.list(**filters)

    async def list_for_user(self, user_id: int) -> list[TaskList]:
        """Return every list owned by ``user_id`` in creation order."""
        return await self._gateway.list(user_id=user_id)

    async def delete(self, list_id: int) -> TaskList:
        """Delete a list together with the tasks it contains."""
        task_list = await self._gateway.get(list_id)
        await TaskRepository(self._session).delete_for_list(list_id)
        await self._gateway.delete(list_id)
        return task_list

    async def delete_for_user(self, user_id: int) -> int:
        return await self._gateway.delete_where(user_id=user_id)
