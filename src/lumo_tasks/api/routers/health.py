"""Liveness endpoint with a database round-trip."""

from __future__ import annotations

from fastapi import APIRouter, status
from sqlalchemy import text

from ...deps import DatabaseSessionDependency
from ...schemas.system import HealthCheckResponse

router = APIRouter(tags=["system"])


@router.get(
    "/healthz",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def read_health(session: DatabaseSessionDependency) -> HealthCheckResponse:
    """Report the service as healthy once the database answers."""
    await session.execute(text("SELECT 1"))
    return HealthCheckResponse(status="ok", database="ok")
