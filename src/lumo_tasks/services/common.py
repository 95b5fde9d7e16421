"""Helpers shared by the service layer."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic

from ..errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)


def coerce_payload(schema: type[SchemaT], payload: SchemaT | Mapping[str, Any]) -> SchemaT:
    """Return ``payload`` as ``schema``, validating raw mappings on the way in."""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(dict(payload))
    except pydantic.ValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


__all__ = ["coerce_payload"]
