"""Database repositories for encapsulating persistence logic."""

from __future__ import annotations

from .base import EntityCapabilities, PersistenceGateway
from .lists import ListRepository
from .tasks import TaskRepository
from .users import UserRepository

__all__ = [
    "EntityCapabilities",
    "ListRepository",
    "PersistenceGateway",
    "TaskRepository",
    "UserRepository",
]
