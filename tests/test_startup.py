"""
Tests for the ordered startup pipeline and the application lifespan.
"""
import threading
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from core import startup
from core.exceptions import ConfigError, CredentialError, SchemaError
from main import create_app
from services.secrets_service import DatabaseCredentials


def _provider(username="app", password="s3cret"):
    provider = Mock()
    provider.get_db_credentials.return_value = DatabaseCredentials(
        username=username, password=SecretStr(password)
    )
    return provider


def test_build_database_url(settings):
    settings = settings.model_copy(update={"db_host": "db.internal:3307", "db_name": "clinic"})

    url = startup.build_database_url(settings, username="app", password="p@ss/word")

    assert url.drivername == "mysql+aiomysql"
    assert url.host == "db.internal"
    assert url.port == 3307
    assert url.database == "clinic"
    assert url.username == "app"
    assert url.password == "p@ss/word"


def test_build_database_url_default_port(settings):
    settings = settings.model_copy(update={"db_host": "db.internal"})
    url = startup.build_database_url(settings, username="app", password="pw")
    assert url.port == 3306


def test_build_database_url_invalid_port(settings):
    settings = settings.model_copy(update={"db_host": "db.internal:abc"})
    with pytest.raises(ConfigError):
        startup.build_database_url(settings, username="app", password="pw")


@pytest.mark.asyncio
async def test_open_database_runs_pipeline(settings, sqlite_url, monkeypatch):
    monkeypatch.setattr(startup, "build_database_url", lambda settings, username, password: sqlite_url)
    provider = _provider()

    db = await startup.open_database(settings, provider)
    try:
        provider.get_db_credentials.assert_called_once_with(settings.db_secret_arn)
        # Schema exists: a query against patients works
        from repositories import PatientRepository
        assert await PatientRepository(db=db).list_all() == []
    finally:
        await db.dispose()


@pytest.mark.asyncio
async def test_open_database_fetches_credentials_off_the_event_loop(settings, sqlite_url, monkeypatch):
    monkeypatch.setattr(startup, "build_database_url", lambda settings, username, password: sqlite_url)
    provider = _provider()
    callers = []
    credentials = provider.get_db_credentials.return_value

    def fetch(secret_id):
        callers.append(threading.get_ident())
        return credentials

    provider.get_db_credentials.side_effect = fetch

    db = await startup.open_database(settings, provider)
    await db.dispose()

    assert callers and callers[0] != threading.get_ident()


@pytest.mark.asyncio
async def test_open_database_credential_failure(settings):
    provider = Mock()
    provider.get_db_credentials.side_effect = CredentialError("secret not found")

    with pytest.raises(CredentialError):
        await startup.open_database(settings, provider)


@pytest.mark.asyncio
async def test_open_database_unreachable_store(settings):
    # Nothing listens on port 1
    settings = settings.model_copy(update={"db_host": "127.0.0.1:1"})

    with pytest.raises(SchemaError):
        await startup.open_database(settings, _provider())


def test_lifespan_opens_and_closes_database(settings, sqlite_url, monkeypatch):
    monkeypatch.setattr(startup, "build_database_url", lambda settings, username, password: sqlite_url)
    app = create_app(settings=settings, credential_provider=_provider())

    assert app.state.database is None
    with TestClient(app) as client:
        assert app.state.database is not None
        response = client.post("/api/patients", json={"name": "Jane Doe", "patientNumber": "P-1001"})
        assert response.status_code == 201
    assert app.state.database is None
