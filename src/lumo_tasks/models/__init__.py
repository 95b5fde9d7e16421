"""Domain models exposed for the Lumo tasks service."""

from __future__ import annotations

from .common import TimestampMixin
from .task import Task, TaskBase, TaskStatus
from .task_list import DEFAULT_LIST_TITLE, TaskList, TaskListBase
from .user import User, UserBase

__all__ = [
    "DEFAULT_LIST_TITLE",
    "Task",
    "TaskBase",
    "TaskList",
    "TaskListBase",
    "TaskStatus",
    "TimestampMixin",
    "User",
    "UserBase",
]
