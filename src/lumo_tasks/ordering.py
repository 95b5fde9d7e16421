"""Canonical ordering of the tasks inside a list.

Tasks are grouped into status buckets (ongoing, unassigned, done, then
anything unrecognised) and, inside a bucket, sorted by ascending due date
with undated tasks last. Ties keep insertion order.

The same priority table drives the in-memory sort and the SQL ``ORDER BY``
so the two never disagree.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Protocol

import sqlalchemy as sa

from .models import Task, TaskStatus

STATUS_PRIORITY: dict[str, int] = {
    TaskStatus.ONGOING.value: 0,
    TaskStatus.UNASSIGNED.value: 1,
    TaskStatus.DONE.value: 2,
}
UNKNOWN_STATUS_PRIORITY = 3


class SortableTask(Protocol):
    status: Any
    due_date: datetime | None


def status_priority(status: Any) -> int:
    value = status.value if isinstance(status, TaskStatus) else status
    return STATUS_PRIORITY.get(value, UNKNOWN_STATUS_PRIORITY)


def task_sort_key(task: SortableTask) -> tuple[int, bool, datetime]:
    """Sort key: status bucket, then due date with missing dates last."""
    due = task.due_date
    if due is None:
        return status_priority(task.status), True, datetime.min.replace(tzinfo=timezone.utc)
    if due.tzinfo is None:
        due = due.replace(tzinfo=timezone.utc)
    return status_priority(task.status), False, due


def sort_tasks(tasks: Iterable[SortableTask]) -> list[SortableTask]:
    """Return ``tasks`` in canonical order; ``sorted`` is stable so ties keep input order."""
    return sorted(tasks, key=task_sort_key)


def ordering_clauses() -> list[Any]:
    """SQL equivalent of :func:`task_sort_key`, tie-broken by insertion order."""
    bucket = sa.case(
        *((Task.status == TaskStatus(value), rank) for value, rank in STATUS_PRIORITY.items()),
        else_=UNKNOWN_STATUS_PRIORITY,
    )
    missing_due_date = sa.case((Task.due_date.is_(None), 1), else_=0)
    return [bucket.asc(), missing_due_date.asc(), Task.due_date.asc(), Task.id.asc()]


__all__ = [
    "STATUS_PRIORITY",
    "UNKNOWN_STATUS_PRIORITY",
    "ordering_clauses",
    "sort_tasks",
    "status_priority",
    "task_sort_key",
]
