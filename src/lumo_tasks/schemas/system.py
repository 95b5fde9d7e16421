"""Response bodies that are not tied to a single entity."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RootResponse(BaseModel):
    name: str
    environment: str
    version: str
    api_prefix: str = Field(description="Mount point of the users, lists and tasks routers")


class HealthCheckResponse(BaseModel):
    status: str = "ok"
    database: str = Field(default="ok", description="Result of a trivial round-trip query")


class MessageResponse(BaseModel):
    """Acknowledgement for operations that return no entity."""

    model_config = ConfigDict(json_schema_extra={"example": {"message": "Task deleted successfully."}})

    message: str


class ErrorResponse(BaseModel):
    """Body of every non-2xx response.

    ``code`` is stable and machine readable, ``message`` is shown to users and
    ``details`` always carries the ``request_id`` of the failing call.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": "forbidden",
                "message": "Forbidden action.",
                "details": {"request_id": "5f0c3a9e2b7d4c1f8e6a0b9d3c2e1f47"},
            }
        }
    )

    code: str
    message: str
    details: Any | None = None
