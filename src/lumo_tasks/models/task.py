"""Task domain models built with SQLModel."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import TimestampMixin


class TaskStatus(str, Enum):
    """Enumeration of possible task states."""

    ONGOING = "ongoing"
    UNASSIGNED = "unassigned"
    DONE = "done"


class TaskBase(SQLModel, table=False):
    """Shared attributes for task models."""

    title: str = Field(sa_column=sa.Column(sa.String(length=30), nullable=False))
    description: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.String(length=200), nullable=True),
    )
    status: TaskStatus = Field(
        default=TaskStatus.UNASSIGNED,
        sa_column=sa.Column(
            sa.Enum(
                TaskStatus,
                name="task_status",
                native_enum=False,
                validate_strings=True,
                values_callable=lambda statuses: [status.value for status in statuses],
            ),
            nullable=False,
            server_default=TaskStatus.UNASSIGNED.value,
        ),
    )
    due_date: datetime | None = Field(
        default=None,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=True),
    )
    list_id: int = Field(
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("lists.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    user_id: int = Field(
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )


class Task(TaskBase, TimestampMixin, table=True):
    """Persistent task model."""

    __tablename__ = "tasks"
    __table_args__ = (
        sa.CheckConstraint("length(title) > 0", name="ck_tasks_title_length"),
        sa.Index("ix_tasks_list_id", "list_id"),
        sa.Index("ix_tasks_user_id", "user_id"),
    )

    id: int | None = Field(default=None, primary_key=True)


__all__ = ["Task", "TaskBase", "TaskStatus"]
