"""User domain model built with SQLModel."""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import TimestampMixin


class UserBase(SQLModel, table=False):
    """Shared attributes for user models."""

    first_name: str = Field(sa_column=sa.Column(sa.String(length=100), nullable=False))
    last_name: str = Field(sa_column=sa.Column(sa.String(length=100), nullable=False))
    age: int = Field(sa_column=sa.Column(sa.Integer(), nullable=False))
    email: str = Field(
        sa_column=sa.Column(sa.String(length=320), nullable=False, unique=True),
    )


class User(UserBase, TimestampMixin, table=True):
    """Persistent user model."""

    __tablename__ = "users"
    __table_args__ = (
        sa.CheckConstraint("age >= 13", name="ck_users_min_age"),
        sa.Index("ix_users_reset_password_token", "reset_password_token"),
    )

    id: int | None = Field(default=None, primary_key=True)
    hashed_password: str = Field(sa_column=sa.Column(sa.String(length=255), nullable=False))
    reset_password_token: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.String(length=64), nullable=True),
    )
    reset_password_expires: datetime | None = Field(
        default=None,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=True),
    )


__all__ = ["User", "UserBase"]
