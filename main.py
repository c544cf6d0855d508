"""
FastAPI application entry point for the Patient Management API.

This module configures and creates the FastAPI application with:
- Structured JSON Logging: Request/response logging with request ids
- Dependency Injection: Services and repositories injected via Depends()
- Exception Handling: {"error": ...} responses via setup_exception_handlers()
- CORS Middleware: Allows cross-origin requests from browser clients
- Lifespan Management: Ordered database startup and pool disposal
- Static Assets: The STATIC_DIR directory, if present, is served at /

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware Stack (order matters!)                          │
    │    ├── LoggingMiddleware  - Request logging & request ids   │
    │    └── CORSMiddleware     - Cross-origin support            │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py     - /health, /ready                      │
    │    └── patients.py   - /api/patients CRUD                   │
    ├─────────────────────────────────────────────────────────────┤
    │  PatientService (services/)      ← Injected via Depends()   │
    ├─────────────────────────────────────────────────────────────┤
    │  PatientRepository (repositories/) ← Injected into Service  │
    ├─────────────────────────────────────────────────────────────┤
    │  Database handle (app.state)   ← Opened by the lifespan     │
    └─────────────────────────────────────────────────────────────┘

Startup Order (lifespan):
    1. Logging setup
    2. Credentials from AWS Secrets Manager
    3. Connection pool
    4. patients table (CREATE IF NOT EXISTS)
    5. Serve requests
Any failure in 2-4 aborts startup; nothing is served.
"""
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.routers import health_router, patients_router
from core.config import Settings, get_settings
from core.exceptions import StartupError, setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from core.startup import open_database
from repositories import Database
from services.secrets_service import SecretsManagerCredentialProvider

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    credential_provider: Optional[SecretsManagerCredentialProvider] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Application settings. Loaded from the environment if omitted.
        database: A pre-built database handle. When omitted the lifespan opens
            one through the startup pipeline (credentials, pool, schema).
        credential_provider: Secret store client used by the startup pipeline.

    Raises:
        ConfigError: If settings are omitted and the environment is incomplete.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # Configure structured logging FIRST so startup logs are formatted
        setup_logging(level="INFO", json_format=True)
        logger.info("Starting Patient Management API...")

        if database is None:
            db = await open_database(settings, credential_provider)
        else:
            db = database
            try:
                await db.ensure_schema()
            except StartupError:
                await db.dispose()
                raise

        app.state.database = db
        logger.info("Patient Management API ready", extra={"database": db.display_url})

        try:
            yield
        finally:
            logger.info("Patient Management API shutting down...")
            app.state.database = None
            await db.dispose()

    app = FastAPI(
        title="Patient Management API",
        description="REST API for managing patient records (name and patient number).",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = None

    setup_exception_handlers(app)

    # Middleware runs in REVERSE order of registration.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.include_router(health_router)
    app.include_router(patients_router)

    # Mounted last so that API routes take precedence over files.
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


def run() -> None:
    """Console entry point: validate configuration, then serve with uvicorn."""
    try:
        settings = get_settings()
    except StartupError as exc:
        setup_logging(level="INFO", json_format=True)
        logger.critical(f"FATAL: {exc}")
        sys.exit(1)

    uvicorn.run(
        "main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_reload,
    )


if __name__ == "__main__":
    run()
