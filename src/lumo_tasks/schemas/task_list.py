"""List-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field

from .common import CamelModel, Title


class ListRecord(CamelModel):
    """Field rules every stored list must satisfy."""

    title: Title
    user_id: int = Field(ge=1)


class ListCreate(CamelModel):
    """Payload for creating a list owned by the caller."""

    model_config = ConfigDict(json_schema_extra={"example": {"title": "Groceries"}})

    title: Title


class ListUpdate(CamelModel):
    """Lists only allow their title to change."""

    title: Title


class ListRead(CamelModel):
    """Public representation of a list."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    user_id: int
    created_at: datetime
    updated_at: datetime


__all__ = ["ListCreate", "ListRead", "ListRecord", "ListUpdate"]
