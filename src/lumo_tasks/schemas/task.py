"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field, model_validator

from ..models import TaskStatus
from .common import CamelModel, Description, Title

TASK_READ_EXAMPLE = {
    "id": 7,
    "title": "Buy milk",
    "description": "Two litres, skimmed.",
    "status": TaskStatus.ONGOING.value,
    "dueDate": "2024-03-01T09:00:00Z",
    "listId": 3,
    "userId": 1,
    "createdAt": "2024-02-20T12:00:00Z",
    "updatedAt": "2024-02-21T08:30:00Z",
}


class TaskRecord(CamelModel):
    """Field rules every stored task must satisfy."""

    title: Title
    description: Description | None = None
    status: TaskStatus = TaskStatus.UNASSIGNED
    due_date: datetime | None = None
    list_id: int = Field(ge=1)
    user_id: int = Field(ge=1)


class TaskCreate(CamelModel):
    """Payload for creating a task inside one of the caller's lists."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "description": "Two litres, skimmed.",
                "status": TaskStatus.UNASSIGNED.value,
                "dueDate": "2024-03-01T09:00:00Z",
                "listId": 3,
            }
        }
    )

    title: Title
    description: Description | None = None
    status: TaskStatus = TaskStatus.UNASSIGNED
    due_date: datetime | None = None
    list_id: int = Field(ge=1)


class TaskUpdate(CamelModel):
    """Payload for partially updating an existing task."""

    title: Title | None = None
    description: Description | None = None
    status: TaskStatus | None = None
    due_date: datetime | None = None
    list_id: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "TaskUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        return self


class TaskRead(CamelModel):
    """Public representation of a task."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )

    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    due_date: datetime | None = None
    list_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime


__all__ = ["TaskCreate", "TaskRead", "TaskRecord", "TaskUpdate"]
