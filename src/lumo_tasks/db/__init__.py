"""Database related helpers."""

from __future__ import annotations

from .session import get_engine, get_session, init_db, unit_of_work

__all__ = ["get_engine", "get_session", "init_db", "unit_of_work"]
