"""
Repository for patient database operations.

Architecture:
    PatientRepository is the data access layer for patients.
    It should be injected via core.dependencies.get_patient_repository().

All SQL is encapsulated in this repository - no SQL in service or API layers.
Statements are SQLAlchemy Core constructs, so every value is sent as a bound
parameter.
"""
import logging
from typing import List

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import DatabaseError
from models.patient import Patient, patients
from repositories.base import Database

logger = logging.getLogger(__name__)


class PatientRepository:
    """
    Repository for patient CRUD operations.

    Holds no state besides the injected database handle. Callers are expected
    to have validated name and patient_number already.
    """

    def __init__(self, db: Database):
        """
        Initialize the patient repository.

        Args:
            db: Database handle for data access.
                Injected via core.dependencies.get_patient_repository().
        """
        self._db = db

    async def list_all(self) -> List[Patient]:
        """
        Get all patients ordered by id ascending.

        Raises:
            DatabaseError: If the query fails.
        """
        stmt = select(patients.c.id, patients.c.name, patients.c.patient_number).order_by(
            patients.c.id.asc()
        )
        try:
            async with self._db.connect() as conn:
                result = await conn.execute(stmt)
                rows = result.all()
        except SQLAlchemyError as exc:
            raise DatabaseError("Failed to fetch patients.", operation="list") from exc

        return [Patient.from_row(row) for row in rows]

    async def create(self, name: str, patient_number: str) -> Patient:
        """
        Insert a patient and return it with the generated id.

        Args:
            name: Full name of the patient.
            patient_number: External patient number (not required to be unique).

        Raises:
            DatabaseError: If the insert fails.
        """
        stmt = insert(patients).values(name=name, patient_number=patient_number)
        try:
            async with self._db.begin() as conn:
                result = await conn.execute(stmt)
                patient_id = result.inserted_primary_key[0]
        except SQLAlchemyError as exc:
            raise DatabaseError("Failed to add patient.", operation="insert") from exc

        return Patient(id=patient_id, name=name, patient_number=patient_number)

    async def update(self, patient_id: int, name: str, patient_number: str) -> bool:
        """
        Update name and patient_number of the row with the given id.

        Returns:
            bool: True if a row matched, False if no patient has this id.

        Raises:
            DatabaseError: If the update fails.
        """
        stmt = (
            update(patients)
            .where(patients.c.id == patient_id)
            .values(name=name, patient_number=patient_number)
        )
        try:
            async with self._db.begin() as conn:
                result = await conn.execute(stmt)
                matched = result.rowcount
        except SQLAlchemyError as exc:
            raise DatabaseError(
                "Failed to update patient.", operation="update", patient_id=patient_id
            ) from exc

        return matched > 0

    async def delete(self, patient_id: int) -> bool:
        """
        Delete the row with the given id.

        Returns:
            bool: True if a row was removed, False if no patient has this id.

        Raises:
            DatabaseError: If the delete fails.
        """
        stmt = delete(patients).where(patients.c.id == patient_id)
        try:
            async with self._db.begin() as conn:
                result = await conn.execute(stmt)
                matched = result.rowcount
        except SQLAlchemyError as exc:
            raise DatabaseError(
                "Failed to delete patient.", operation="delete", patient_id=patient_id
            ) from exc

        return matched > 0
