"""
Pydantic schemas for API request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from schemas.health import HealthResponse, ReadyResponse, SERVICE_NAME
from schemas.patient import (
    ErrorResponse,
    MessageResponse,
    PatientListResponse,
    PatientResponse,
    PatientWrite,
)

__all__ = [
    # Patient schemas
    "PatientWrite",
    "PatientResponse",
    "PatientListResponse",
    "MessageResponse",
    "ErrorResponse",
    # Probe schemas
    "HealthResponse",
    "ReadyResponse",
    "SERVICE_NAME",
]
