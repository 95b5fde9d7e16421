"""Task workflows; a task always inherits its owner from its list."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from ..db import unit_of_work
from ..errors import NotFoundError
from ..models import Task, TaskList
from ..repositories import TaskRepository
from ..schemas.task import TaskCreate, TaskUpdate
from .authorization import authorize_ownership, ensure_task_matches_list
from .common import coerce_payload
from .lists import ListService

logger = logging.getLogger(__name__)


class TaskService:
    """Create, update and delete tasks inside lists the actor owns."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._tasks = TaskRepository(session)
        self._list_service = ListService(session)

    async def _owned_task(self, actor_id: int, task_id: int) -> tuple[Task, TaskList]:
        task = await self._tasks.read(task_id)
        if task is None:
            raise NotFoundError("Task not found.")
        parent = await self._list_service.get_owned_list(actor_id, task.list_id)
        authorize_ownership(actor_id, task, parent=parent)
        return task, parent

    async def create_task(self, actor_id: int, payload: TaskCreate | Mapping[str, Any]) -> Task:
        """Create a task in one of the actor's lists."""
        request = coerce_payload(TaskCreate, payload)
        async with unit_of_work(self._session):
            await self._list_service.require_actor(actor_id)
            task_list = await self._list_service.get_owned_list(actor_id, request.list_id)
            task = await self._tasks.create(
                {
                    **request.model_dump(),
                    "user_id": task_list.user_id,
                }
            )
            ensure_task_matches_list(task, task_list)
        logger.info("User %s created task %s in list %s", actor_id, task.id, task_list.id)
        return task

    async def update_task(
        self,
        actor_id: int,
        task_id: int,
        payload: TaskUpdate | Mapping[str, Any],
    ) -> Task:
        """Apply a partial update; moving lists requires owning the target list."""
        request = coerce_payload(TaskUpdate, payload)
        changes = request.model_dump(exclude_unset=True)
        async with unit_of_work(self._session):
            await self._list_service.require_actor(actor_id)
            task, parent = await self._owned_task(actor_id, task_id)
            target_list_id = changes.get("list_id")
            if target_list_id is not None and target_list_id != parent.id:
                target = await self._list_service.get_owned_list(actor_id, target_list_id)
                changes["user_id"] = target.user_id
            task = await self._tasks.update(task_id, changes)
        logger.info("User %s updated task %s", actor_id, task_id)
        return task

    async def delete_task(self, actor_id: int, task_id: int) -> Task:
        async with unit_of_work(self._session):
            await self._list_service.require_actor(actor_id)
            await self._owned_task(actor_id, task_id)
            task = await self._tasks.delete(task_id)
        logger.info("User %s deleted task %s", actor_id, task_id)
        return task


__all__ = ["TaskService"]
