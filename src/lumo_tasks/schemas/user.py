"""User-facing Pydantic schemas and the persisted user record rules."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field, model_validator

from .common import CamelModel, Email, LookupEmail, Password, PersonName

PASSWORDS_DO_NOT_MATCH = "Passwords do not match."

REGISTRATION_EXAMPLE = {
    "firstName": "Ana",
    "lastName": "Lopez",
    "age": 24,
    "email": "ana@example.com",
    "password": "Str0ng!Pass",
    "confirmPassword": "Str0ng!Pass",
}


class UserRecord(CamelModel):
    """Field rules every stored user must satisfy."""

    first_name: PersonName
    last_name: PersonName
    age: int = Field(ge=13)
    email: Email
    hashed_password: str = Field(min_length=1)
    reset_password_token: str | None = None
    reset_password_expires: datetime | None = None


class RegistrationRequest(CamelModel):
    """Incoming payload for registering a new user."""

    model_config = ConfigDict(json_schema_extra={"example": REGISTRATION_EXAMPLE})

    first_name: PersonName
    last_name: PersonName
    age: int = Field(ge=13)
    email: Email
    password: Password
    confirm_password: str

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegistrationRequest":
        if self.password != self.confirm_password:
            raise ValueError(PASSWORDS_DO_NOT_MATCH)
        return self


class ProfileUpdateRequest(CamelModel):
    """Partial profile update; a new password needs a matching confirmation."""

    first_name: PersonName | None = None
    last_name: PersonName | None = None
    age: int | None = Field(default=None, ge=13)
    email: Email | None = None
    password: Password | None = None
    confirm_password: str | None = None

    @model_validator(mode="after")
    def _passwords_match(self) -> "ProfileUpdateRequest":
        if self.password is not None and self.password != self.confirm_password:
            raise ValueError(PASSWORDS_DO_NOT_MATCH)
        return self


class ProfileResponse(CamelModel):
    """Public profile of the authenticated user."""

    model_config = ConfigDict(from_attributes=True)

    first_name: str
    last_name: str
    age: int
    email: str


class LoginRequest(CamelModel):
    email: LookupEmail
    password: str = Field(min_length=1)


class TokenResponse(CamelModel):
    token: str


class ForgotPasswordRequest(CamelModel):
    email: LookupEmail


class ResetPasswordRequest(CamelModel):
    password: Password
    confirm_password: str

    @model_validator(mode="after")
    def _passwords_match(self) -> "ResetPasswordRequest":
        if self.password != self.confirm_password:
            raise ValueError(PASSWORDS_DO_NOT_MATCH)
        return self


__all__ = [
    "ForgotPasswordRequest",
    "LoginRequest",
    "PASSWORDS_DO_NOT_MATCH",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "RegistrationRequest",
    "ResetPasswordRequest",
    "TokenResponse",
    "UserRecord",
]
