"""List domain model built with SQLModel."""

from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import TimestampMixin

DEFAULT_LIST_TITLE = "Tasks"


class TaskListBase(SQLModel, table=False):
    title: str = Field(sa_column=sa.Column(sa.String(length=30), nullable=False))
    user_id: int = Field(
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )


class TaskList(TaskListBase, TimestampMixin, table=True):
    """Persistent list model; titles are unique per owner."""

    __tablename__ = "lists"
    __table_args__ = (
        sa.UniqueConstraint("title", "user_id", name="uq_lists_title_user_id"),
        sa.CheckConstraint("length(title) > 0", name="ck_lists_title_length"),
        sa.Index("ix_lists_user_id", "user_id"),
    )

    id: int | None = Field(default=None, primary_key=True)


__all__ = ["DEFAULT_LIST_TITLE", "TaskList", "TaskListBase"]
