"""
Shared exception classes and error handling utilities for the Patient Management API.

This module provides:
- Startup exceptions that stop the process before it serves traffic
- Per-request exceptions carrying an HTTP status code and message
- Exception handlers for FastAPI integration

Every per-request error renders as {"error": "<message>"}.

Usage:
    from core.exceptions import PatientNotFoundError

    # In service layer - raise domain exceptions
    raise PatientNotFoundError(patient_id=42)

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing name or patientNumber."


# =============================================================================
# STARTUP EXCEPTIONS
# =============================================================================

class StartupError(Exception):
    """Base class for errors that make the service unable to start."""


class ConfigError(StartupError):
    """Raised when required configuration is absent or invalid."""


class CredentialError(StartupError):
    """Raised when database credentials cannot be fetched or parsed."""


class SchemaError(StartupError):
    """Raised when the patients table cannot be created."""


# =============================================================================
# REQUEST EXCEPTIONS
# =============================================================================

class PatientServiceError(Exception):
    """
    Base exception for all per-request domain errors.

    Provides consistent error structure with status code and detail message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An internal server error occurred."

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context, logged but not returned to the caller.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {"error": self.detail}


class InvalidPatientDataError(PatientServiceError):
    """Raised when name or patientNumber is missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = MISSING_FIELDS_MESSAGE


class PatientNotFoundError(PatientServiceError):
    """Raised when an update or delete targets an id that does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Patient not found."

    def __init__(self, patient_id: Optional[Any] = None, **kwargs: Any):
        super().__init__(patient_id=patient_id, **kwargs)


class DatabaseError(PatientServiceError):
    """Raised when a database operation fails during a request."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database operation failed."

    def __init__(self, detail: Optional[str] = None, operation: Optional[str] = None, **kwargs: Any):
        super().__init__(detail=detail, operation=operation, **kwargs)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def patient_service_exception_handler(
    request: Request,
    exc: PatientServiceError
) -> JSONResponse:
    """Log a domain error and return its JSON body."""
    log_extra = {
        "status_code": exc.status_code,
        "path": request.url.path,
        "method": request.method,
        "context": exc.context,
    }
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.detail}", exc_info=exc, extra=log_extra)
    else:
        logger.warning(f"{type(exc).__name__}: {exc.detail}", extra=log_extra)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Turn FastAPI's 422 validation errors into 400 responses.

    Patient ids are parsed by the service, so the only validated input left
    is the body: a malformed or wrongly typed body is a missing field.
    """
    errors = exc.errors()
    logger.warning(
        f"Request validation failed: {MISSING_FIELDS_MESSAGE}",
        extra={"path": request.url.path, "method": request.method, "errors": len(errors)},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": MISSING_FIELDS_MESSAGE},
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions with a generic error response.

    Logs the full exception for debugging but returns a safe error message.
    """
    logger.exception(
        f"Unhandled exception: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": PatientServiceError.detail}
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(PatientServiceError, patient_service_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
