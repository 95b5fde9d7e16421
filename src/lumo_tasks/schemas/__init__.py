"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .auth import TokenPayload
from .system import ErrorResponse, HealthCheckResponse, MessageResponse, RootResponse
from .task import TaskCreate, TaskRead, TaskRecord, TaskUpdate
from .task_list import ListCreate, ListRead, ListRecord, ListUpdate
from .user import (
    ForgotPasswordRequest,
    LoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RegistrationRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserRecord,
)

__all__ = [
    "ErrorResponse",
    "ForgotPasswordRequest",
    "HealthCheckResponse",
    "ListCreate",
    "ListRead",
    "ListRecord",
    "ListUpdate",
    "LoginRequest",
    "MessageResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "RegistrationRequest",
    "ResetPasswordRequest",
    "RootResponse",
    "TaskCreate",
    "TaskRead",
    "TaskRecord",
    "TaskUpdate",
    "TokenPayload",
    "TokenResponse",
    "UserRecord",
]
