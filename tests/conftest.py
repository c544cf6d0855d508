"""
Shared pytest fixtures.

Key patterns:

1. Database Isolation: Each test gets a fresh SQLite file (via aiosqlite)
   standing in for MySQL
2. Composition: The app is built with create_app(database=...) so the real
   lifespan, routers and exception handlers run against the test database
3. DI Override: Individual links can still be replaced via app.dependency_overrides

Fixture Hierarchy:
    sqlite_url → database → patient_repo → patient_service
    sqlite_url → test_app → client
"""
import os

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Required settings must exist before any config is loaded.
os.environ.setdefault("DB_HOST", "localhost:3306")
os.environ.setdefault("DB_NAME", "patients_test")
os.environ.setdefault("DB_SECRET_ARN", "arn:aws:secretsmanager:us-east-1:000000000000:secret:patients-db")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("LOG_FORMAT", "text")

from core.config import Settings
from main import create_app
from repositories import Database, PatientRepository
from services import PatientService


@pytest.fixture
def sqlite_url(tmp_path):
    """URL of a fresh SQLite database file."""
    return f"sqlite+aiosqlite:///{tmp_path / 'patients.db'}"


@pytest.fixture
def settings(tmp_path):
    """Settings from the test environment, with a static dir that does not exist."""
    return Settings(static_dir=str(tmp_path / "public"))


@pytest_asyncio.fixture
async def database(sqlite_url):
    """A Database handle with the schema in place, disposed after the test."""
    db = Database(sqlite_url, pool_size=5)
    await db.ensure_schema()
    yield db
    await db.dispose()


@pytest.fixture
def patient_repo(database):
    return PatientRepository(db=database)


@pytest.fixture
def patient_service(patient_repo):
    return PatientService(patient_repository=patient_repo)


@pytest.fixture
def test_app(settings, sqlite_url):
    """
    The production app wired to a test database.

    The lifespan creates the schema when the client starts and disposes the
    pool when it stops.
    """
    app = create_app(settings=settings, database=Database(sqlite_url, pool_size=5))
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """A test client with the application lifespan running."""
    with TestClient(test_app) as test_client:
        yield test_client
