"""
Service layer for patient operations.

This service validates incoming patient data and turns repository outcomes
into domain errors.

Architecture:
    API Layer (routers) → PatientService → PatientRepository → Database

Dependency Injection:
    PatientService receives its repository via constructor injection.
    Use core.dependencies.get_patient_service() in routers with Depends().
"""
import logging
from typing import List, Optional, Tuple

from core.exceptions import InvalidPatientDataError, PatientNotFoundError
from repositories import PatientRepository
from schemas import PatientResponse, PatientWrite

logger = logging.getLogger(__name__)

# Largest value a signed 64-bit primary key can hold
MAX_PATIENT_ID = 2**63 - 1


def _parse_patient_id(raw_id: str) -> int:
    """
    Convert a path id to an integer key.

    A value that is not an integer in the key range cannot name a stored row,
    so it is reported the same way as an id with no row.

    Raises:
        PatientNotFoundError: If the id cannot match any patient.
    """
    try:
        patient_id = int(raw_id)
    except ValueError:
        raise PatientNotFoundError(patient_id=raw_id) from None
    if not 0 < patient_id <= MAX_PATIENT_ID:
        raise PatientNotFoundError(patient_id=raw_id)
    return patient_id


def _required_fields(payload: Optional[PatientWrite]) -> Tuple[str, str]:
    """
    Presence check: both fields must be non-empty strings.

    No trimming and no length checks; "  " is accepted.

    Raises:
        InvalidPatientDataError: If either field is missing or empty.
    """
    if payload is None or not payload.name or not payload.patient_number:
        raise InvalidPatientDataError()
    return payload.name, payload.patient_number


class PatientService:
    """
    Service layer for patient operations.
    """

    def __init__(self, patient_repository: PatientRepository):
        """
        Initialize the patient service.

        Args:
            patient_repository: PatientRepository instance for data access.
                               Injected via core.dependencies.get_patient_service().
        """
        self._repo = patient_repository

    async def get_patients(self) -> List[PatientResponse]:
        """
        Get all patients, ordered by id ascending.
        """
        patients = await self._repo.list_all()
        return [PatientResponse.model_validate(p) for p in patients]

    async def add_patient(self, payload: Optional[PatientWrite]) -> PatientResponse:
        """
        Add a new patient.

        Returns:
            PatientResponse: The created patient, including its generated id.

        Raises:
            InvalidPatientDataError: If name or patientNumber is missing.
            DatabaseError: If the insert fails.
        """
        name, patient_number = _required_fields(payload)

        created = await self._repo.create(name, patient_number)
        logger.info("Patient created", extra={"patient_id": created.id})
        return PatientResponse.model_validate(created)

    async def update_patient(self, raw_id: str, payload: Optional[PatientWrite]) -> None:
        """
        Replace name and patient number of an existing patient.

        The body is checked before the id, so a bad body always yields 400.

        Raises:
            InvalidPatientDataError: If name or patientNumber is missing.
            PatientNotFoundError: If no patient has this id.
            DatabaseError: If the update fails.
        """
        name, patient_number = _required_fields(payload)
        patient_id = _parse_patient_id(raw_id)

        if not await self._repo.update(patient_id, name, patient_number):
            raise PatientNotFoundError(patient_id=patient_id)
        logger.info("Patient updated", extra={"patient_id": patient_id})

    async def delete_patient(self, raw_id: str) -> None:
        """
        Delete a patient.

        Raises:
            PatientNotFoundError: If no patient has this id.
            DatabaseError: If the delete fails.
        """
        patient_id = _parse_patient_id(raw_id)
        if not await self._repo.delete(patient_id):
            raise PatientNotFoundError(patient_id=patient_id)
        logger.info("Patient deleted", extra={"patient_id": patient_id})
