"""List workflows scoped to the authenticated owner."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from ..db import unit_of_work
from ..errors import NotFoundError
from ..models import Task, TaskList
from ..repositories import ListRepository, TaskRepository, UserRepository
from ..schemas.task_list import ListCreate, ListUpdate
from .authorization import authorize_ownership
from .common import coerce_payload

logger = logging.getLogger(__name__)


class ListService:
    """Create, rename, delete and read lists on behalf of their owner."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._lists = ListRepository(session)
        self._tasks = TaskRepository(session)
        self._users = UserRepository(session)

    async def require_actor(self, actor_id: int) -> None:
        """Fail with 404 when the token subject no longer exists."""
        if await self._users.read(actor_id) is None:
            raise NotFoundError("User not found.")

    async def get_owned_list(self, actor_id: int, list_id: int) -> TaskList:
        """Load a list, reporting a missing one before a foreign one."""
        task_list = await self._lists.read(list_id)
        if task_list is None:
            raise NotFoundError("List not found.")
        authorize_ownership(actor_id, task_list)
        return task_list

    async def get_user_lists(self, actor_id: int) -> list[TaskList]:
        await self.require_actor(actor_id)
        return await self._lists.list_for_user(actor_id)

    async def get_list_tasks(self, actor_id: int, list_id: int) -> list[Task]:
        """Return the tasks of one of the actor's lists in display order."""
        await self.require_actor(actor_id)
        await self.get_owned_list(actor_id, list_id)
        return await self._tasks.get_tasks_by_list_ordered(list_id)

    async def create_list(self, actor_id: int, payload: ListCreate | Mapping[str, Any]) -> TaskList:
        request = coerce_payload(ListCreate, payload)
        async with unit_of_work(self._session):
            await self.require_actor(actor_id)
            task_list = await self._lists.create({"title": request.title, "user_id": actor_id})
        logger.info("User %s created list %s", actor_id, task_list.id)
        return task_list

    async def rename_list(
        self,
        actor_id: int,
        list_id: int,
        payload: ListUpdate | Mapping[str, Any],
    ) -> TaskList:
        request = coerce_payload(ListUpdate, payload)
        async with unit_of_work(self._session):
            await self.require_actor(actor_id)
            await self.get_owned_list(actor_id, list_id)
            task_list = await self._lists.update(list_id, {"title": request.title})
        logger.info("User %s renamed list %s", actor_id, list_id)
        return task_list

    async def delete_list(self, actor_id: int, list_id: int) -> TaskList:
        """Delete one of the actor's lists along with its tasks."""
        async with unit_of_work(self._session):
            await self.require_actor(actor_id)
            await self.get_owned_list(actor_id, list_id)
            task_list = await self._lists.delete(list_id)
        logger.info("User %s deleted list %s", actor_id, list_id)
        return task_list


__all__ = ["ListService"]
