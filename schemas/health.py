"""
Pydantic schemas for the liveness and readiness probes.
"""
from pydantic import BaseModel

SERVICE_NAME = "patient-management-api"


class HealthResponse(BaseModel):
    """Response model for /health endpoint."""
    status: str = "ok"
    service: str = SERVICE_NAME


class ReadyResponse(BaseModel):
    """Response model for /ready endpoint."""
    status: str  # "ready" or "not_ready"
    database: str  # "ok" or "unavailable"
