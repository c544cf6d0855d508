"""
FastAPI Dependency Injection configuration.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (PatientService)
         ↓ Depends()
    Repository Layer (PatientRepository)
         ↓ Depends()
    Database handle (app.state.database, set by the lifespan)

The database handle is created by the startup pipeline and stored on the
application, not in a module global, so each app instance carries its own.

Testing:
    # Override any link of the chain
    app.dependency_overrides[get_patient_repository] = lambda: fake_repository
"""
import logging

from fastapi import Depends, Request

from repositories import Database, PatientRepository
from services import PatientService

logger = logging.getLogger(__name__)


def get_database(request: Request) -> Database:
    """
    Get the database handle attached to the running application.

    Raises:
        RuntimeError: If the app is serving before its lifespan opened the database.
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not initialized; the application lifespan has not run.")
    return database


def get_patient_repository(db: Database = Depends(get_database)) -> PatientRepository:
    """Get a PatientRepository bound to the application's database handle."""
    return PatientRepository(db=db)


def get_patient_service(
    patient_repository: PatientRepository = Depends(get_patient_repository),
) -> PatientService:
    """Get a PatientService with its repository injected."""
    return PatientService(patient_repository=patient_repository)
