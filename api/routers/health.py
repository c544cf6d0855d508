"""
Health and readiness endpoints for operational visibility.

This module provides:
- /health: Liveness probe (is the app running?)
- /ready: Readiness probe (can the app reach its database?)

Neither endpoint requires a request body or authentication.
"""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError

from core.dependencies import get_database
from repositories import Database
from schemas import HealthResponse, ReadyResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns immediately without touching the database."
)
async def health_check() -> HealthResponse:
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Runs a trivial query through the connection pool. Returns 503 if it fails."
)
async def readiness_check(
    response: Response,
    db: Database = Depends(get_database),
) -> ReadyResponse:
    """
    Readiness probe - can the application serve patient requests?

    Returns:
    - 200 with status="ready" if the database answers
    - 503 with status="not_ready" otherwise
    """
    try:
        await db.ping()
    except (SQLAlchemyError, OSError) as e:
        logger.error("Database readiness check failed", extra={"error": str(e)})
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadyResponse(status="not_ready", database="unavailable")

    return ReadyResponse(status="ready", database="ok")
