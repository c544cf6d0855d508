"""
Core module for application configuration, logging, errors and wiring.

This module provides:
- Settings: Application configuration via pydantic-settings
- Exceptions: Startup and per-request exception classes
- Startup: The ordered database initialization pipeline
- Dependency injection: FastAPI Depends() functions for services and repositories

Submodules are imported directly (e.g. ``from core.config import get_settings``)
so that importing one does not pull in the whole application.
"""
