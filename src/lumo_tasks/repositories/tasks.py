"""Repository for interacting with task persistence models."""

from __future__ import annotations

from typing import Any, Mapping

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Task
from ..schemas.task import TaskRecord
from ..ordering import ordering_clauses
from .base import EntityCapabilities, PersistenceGateway

TASK_CAPABILITIES: EntityCapabilities[Task] = EntityCapabilities(
    model=Task,
    schema=TaskRecord,
    not_found_message="Task not found.",
)


class TaskRepository:
    """Concrete repository encapsulating ``Task`` persistence operations."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._gateway = PersistenceGateway(session, TASK_CAPABILITIES)

    async def create(self, data: Mapping[str, Any]) -> Task:
        return await self._gateway.create(data)

    async def read(self, task_id: int) -> Task | None:
        return await self._gateway.read(task_id)

    async def get(self, task_id: int) -> Task:
        return await self._gateway.get(task_id)

    async def update(self, task_id: int, changes: Mapping[str, Any]) -> Task:
        return await self._gateway.update(task_id, changes)

    async def delete(self, task_id: int) -> Task:
        return await self._gateway.delete(task_id)

    async def list(self, **filters: Any) -> list[Task]:
        return await self._gateway.list(**filters)

    async def get_tasks_by_list_ordered(self, list_id: int) -> list[Task]:
        """Return every task of a list by status bucket, then due date (missing last)."""
        query = select(Task).where(Task.list_id == list_id).order_by(*ordering_clauses())
        result = await self._session.exec(query)
        return list(result.all())

    async def delete_for_list(self, list_id: int) -> int:
        return await self._gateway.delete_where(list_id=list_id)

    async def delete_for_user(self, user_id: int) -> int:
        return await self._gateway.delete_where(user_id=user_id)
