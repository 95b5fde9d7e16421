"""Ownership checks for lists and tasks.

Every mutating list/task operation, and every list-scoped task read, calls
:func:`authorize_ownership` after it has confirmed the entity exists. A
missing entity is therefore reported as 404 and a foreign one as 403.
"""

from __future__ import annotations

import logging

from ..errors import ForbiddenError
from ..models import Task, TaskList

logger = logging.getLogger(__name__)


def ensure_task_matches_list(task: Task, task_list: TaskList) -> None:
    """Reject a task whose owner or list reference disagrees with ``task_list``."""
    if task.list_id != task_list.id or task.user_id != task_list.user_id:
        logger.warning(
            "Task %s is inconsistent with list %s",
            task.id,
            task_list.id,
        )
        raise ForbiddenError()


def authorize_ownership(
    actor_id: int,
    entity: TaskList | Task,
    *,
    parent: TaskList | None = None,
) -> None:
    """Raise :class:`ForbiddenError` unless ``actor_id`` owns ``entity``.

    Lists are checked against their own owner. Tasks are checked through
    ``parent`` when it is supplied (after verifying the task really belongs
    to it), otherwise against the task's own owner.
    """
    if isinstance(entity, Task) and parent is not None:
        ensure_task_matches_list(entity, parent)
        owner_id = parent.user_id
    else:
        owner_id = entity.user_id
    if owner_id != actor_id:
        logger.info(
            "Actor %s denied access to %s %s",
            actor_id,
            type(entity).__name__,
            entity.id,
        )
        raise ForbiddenError()


__all__ = ["authorize_ownership", "ensure_task_matches_list"]
