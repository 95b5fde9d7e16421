"""Shared schema building blocks."""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, StringConstraints
from pydantic.alias_generators import to_camel

_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[\W_]).{8,}$")

PASSWORD_RULES_MESSAGE = (
    "Password must have at least 8 characters, one uppercase letter, "
    "one lowercase letter, one number and one special character."
)


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_password_strength(value: str) -> str:
    if not _PASSWORD_PATTERN.match(value):
        raise ValueError(PASSWORD_RULES_MESSAGE)
    return value


def _lower(value: str) -> str:
    return value.lower()


PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=200)]
Email = Annotated[EmailStr, AfterValidator(_lower)]
Password = Annotated[str, AfterValidator(_check_password_strength)]
LookupEmail = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=1)]

__all__ = [
    "CamelModel",
    "Description",
    "Email",
    "LookupEmail",
    "PASSWORD_RULES_MESSAGE",
    "Password",
    "PersonName",
    "Title",
]
