"""Timestamp helpers shared by every table."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes read back from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _timestamp(**column_kwargs: Any) -> Any:
    return Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now(), **column_kwargs},
    )


class TimestampMixin(SQLModel, table=False):
    """``created_at`` is set once; ``updated_at`` moves on every ORM update."""

    created_at: datetime = _timestamp()
    updated_at: datetime = _timestamp(onupdate=utcnow)


__all__ = ["TimestampMixin", "ensure_aware", "utcnow"]
