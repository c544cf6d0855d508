"""
Patients router - patient management endpoints.

Architecture:
    HTTP Request → Router (this file) → PatientService → PatientRepository → Database

Error responses all have the shape {"error": "..."} and are produced by the
handlers registered in core.exceptions.setup_exception_handlers().

Dependency Injection:
    Services are injected via FastAPI's Depends() mechanism.
    The DI chain is defined in core/dependencies.py.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Response, status

from core.dependencies import get_patient_service
from schemas import ErrorResponse, MessageResponse, PatientListResponse, PatientResponse, PatientWrite
from services import PatientService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/patients",
    tags=["Patients"],
    responses={500: {"model": ErrorResponse, "description": "Database error"}},
)


@router.get(
    "",
    response_model=PatientListResponse,
    summary="List all patients",
    description="Retrieve every patient, ordered by id ascending."
)
async def list_patients(
    patient_service: PatientService = Depends(get_patient_service)
):
    return PatientListResponse(patients=await patient_service.get_patients())


@router.post(
    "",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new patient",
    description="Add a patient. Returns the created patient with its generated id.",
    responses={400: {"model": ErrorResponse, "description": "Missing name or patientNumber"}},
)
async def create_patient(
    payload: Optional[PatientWrite] = Body(None),
    patient_service: PatientService = Depends(get_patient_service)
):
    """
    Create a new patient.

    - **name**: Patient's full name (required, non-empty)
    - **patientNumber**: Patient number (required, non-empty, need not be unique)
    """
    return await patient_service.add_patient(payload)


@router.put(
    "/{patient_id}",
    response_model=MessageResponse,
    summary="Update a patient",
    description="Replace the name and patient number of an existing patient. The id never changes.",
    responses={
        400: {"model": ErrorResponse, "description": "Missing name or patientNumber"},
        404: {"model": ErrorResponse, "description": "Patient not found"},
    },
)
async def update_patient(
    patient_id: str,
    payload: Optional[PatientWrite] = Body(None),
    patient_service: PatientService = Depends(get_patient_service)
):
    await patient_service.update_patient(patient_id, payload)
    return MessageResponse(message="Patient updated successfully.")


@router.delete(
    "/{patient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a patient",
    responses={404: {"model": ErrorResponse, "description": "Patient not found"}},
)
async def delete_patient(
    patient_id: str,
    patient_service: PatientService = Depends(get_patient_service)
):
    await patient_service.delete_patient(patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
