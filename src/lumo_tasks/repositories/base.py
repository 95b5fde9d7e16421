"""Generic persistence gateway shared by the entity repositories.

Repositories compose a :class:`PersistenceGateway` instead of inheriting from
it. The gateway is parameterised by :class:`EntityCapabilities`, which names
the table model, the pydantic schema holding the field rules and the
uniqueness keys that must be checked before a write.

The gateway flushes but never commits; the calling service owns the
transaction through :func:`lumo_tasks.db.unit_of_work`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import pydantic
from sqlalchemy import delete as sa_delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..errors import ConflictError, NotFoundError, ValidationError

ModelType = TypeVar("ModelType", bound=SQLModel)

logger = logging.getLogger(__name__)

_UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell unique-constraint failures apart from other integrity errors."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == _UNIQUE_VIOLATION_SQLSTATE
    return "unique" in str(orig).lower()


@dataclass(frozen=True, slots=True)
class EntityCapabilities(Generic[ModelType]):
    """Describe how the gateway validates, serialises and de-duplicates an entity."""

    model: type[ModelType]
    schema: type[pydantic.BaseModel]
    unique_keys: Sequence[tuple[str, ...]] = ()
    conflict_message: str = ConflictError.default_message
    not_found_message: str = NotFoundError.default_message

    def validate(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Run the schema rules and return the cleaned field values."""
        try:
            record = self.schema.model_validate(dict(data))
        except pydantic.ValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc
        return record.model_dump()

    def serialize(self, instance: ModelType) -> dict[str, Any]:
        """Return the schema-governed fields of a stored instance."""
        return {name: getattr(instance, name) for name in self.schema.model_fields}


class PersistenceGateway(Generic[ModelType]):
    """Create/read/update/delete/list over a single table model."""

    def __init__(self, session: AsyncSession, capabilities: EntityCapabilities[ModelType]) -> None:
        self._session = session
        self._capabilities = capabilities

    @property
    def model(self) -> type[ModelType]:
        return self._capabilities.model

    async def create(self, data: Mapping[str, Any]) -> ModelType:
        """Validate ``data``, check uniqueness keys and insert a new row."""
        values = self._capabilities.validate(data)
        await self._ensure_unique(values)
        instance = self.model(**values)
        self._session.add(instance)
        await self._flush()
        return instance

    async def read(self, entity_id: int) -> ModelType | None:
        """Return the entity or ``None``; callers decide what a miss means."""
        return await self._session.get(self.model, entity_id)

    async def get(self, entity_id: int) -> ModelType:
        """Return the entity or raise :class:`NotFoundError`."""
        instance = await self.read(entity_id)
        if instance is None:
            raise NotFoundError(self._capabilities.not_found_message)
        return instance

    async def update(self, entity_id: int, changes: Mapping[str, Any]) -> ModelType:
        """Apply ``changes`` after re-validating the merged record."""
        instance = await self.get(entity_id)
        merged = {**self._capabilities.serialize(instance), **changes}
        values = self._capabilities.validate(merged)
        await self._ensure_unique(values, exclude_id=entity_id)
        for name in changes:
            if name in values:
                setattr(instance, name, values[name])
        self._session.add(instance)
        await self._flush()
        return instance

    async def delete(self, entity_id: int) -> ModelType:
        """Delete the entity and return the removed instance."""
        instance = await self.get(entity_id)
        await self._session.delete(instance)
        await self._session.flush()
        return instance

    async def list(self, **filters: Any) -> list[ModelType]:
        """Return entities whose columns equal ``filters``, in insertion order."""
        query = select(self.model).where(*self._criteria(filters)).order_by(self.model.id)
        result = await self._session.exec(query)
        return list(result.all())

    async def delete_where(self, **filters: Any) -> int:
        """Bulk delete matching rows and return how many were removed."""
        statement = sa_delete(self.model).where(*self._criteria(filters))
        result = await self._session.execute(statement)
        return int(result.rowcount or 0)

    def _criteria(self, filters: Mapping[str, Any]) -> list[Any]:
        return [getattr(self.model, name) == value for name, value in filters.items()]

    async def _ensure_unique(self, values: Mapping[str, Any], *, exclude_id: int | None = None) -> None:
        for key in self._capabilities.unique_keys:
            query = select(self.model).where(*self._criteria({name: values[name] for name in key}))
            if exclude_id is not None:
                query = query.where(self.model.id != exclude_id)
            result = await self._session.exec(query.limit(1))
            if result.first() is not None:
                raise ConflictError(self._capabilities.conflict_message)

    async def _flush(self) -> None:
        # Rollback is left to unit_of_work, which owns the transaction.
        try:
            await self._session.flush()
        except IntegrityError as exc:
            logger.warning("Integrity violation while writing %s", self.model.__name__)
            if is_unique_violation(exc):
                raise ConflictError(self._capabilities.conflict_message) from exc
            raise


__all__ = ["EntityCapabilities", "PersistenceGateway", "is_unique_violation"]
