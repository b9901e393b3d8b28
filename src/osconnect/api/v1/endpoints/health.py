"""Health check endpoints: service and cluster connectivity."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from osconnect import __version__
from osconnect.api.deps import get_backend
from osconnect.backend.backend import OpenSearchBackend

router = APIRouter()


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="osconnect version")
    service: str = Field(description="Service name ('osconnect')")
    connector: str = Field(description="Configured connector id")


class BackendHealthResponse(BaseModel):
    """Cluster connectivity response."""

    available: bool = Field(description="Whether the OpenSearch cluster answered a ping")
    settings: list[dict[str, Any]] = Field(description="Backend summary: cluster URL and connection status")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service Health Check",
)
async def health_check(
    backend: OpenSearchBackend = Depends(get_backend),
) -> HealthResponse:
    """Basic health check; does not contact the cluster."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="osconnect",
        connector=backend.settings.connector,
    )


@router.get(
    "/health/backend",
    response_model=BackendHealthResponse,
    summary="Cluster Connectivity Check",
    description=(
        "Builds the configured client if needed and pings the OpenSearch cluster. "
        "Configuration errors are reported as 404/422, not as an unavailable cluster."
    ),
)
async def backend_health(
    backend: OpenSearchBackend = Depends(get_backend),
) -> BackendHealthResponse:
    settings = await backend.view_settings(probe=True)
    available = any(entry.get("status") == "ok" for entry in settings)
    return BackendHealthResponse(available=available, settings=settings)
