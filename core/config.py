"""
Configuration module for the Patient Management API.

Uses Pydantic BaseSettings for validation - the app fails fast if required
config is missing. Values come from the environment or a local .env file.

Required:
    DB_HOST        - "hostname" or "hostname:port" (port defaults to 3306)
    DB_NAME        - database name
    DB_SECRET_ARN  - Secrets Manager id of the {username, password} secret
    AWS_REGION     - region of the secret store
"""
import logging
from functools import lru_cache
from typing import Optional, Tuple

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DB_PORT = 3306


class Settings(BaseSettings):
    """
    Application settings with validation.
    Required fields will cause the app to fail fast if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    db_host: str = Field(..., min_length=1, description="Database host, optionally host:port")
    db_name: str = Field(..., min_length=1, description="Database name")
    db_driver: str = Field(default="mysql+aiomysql", description="SQLAlchemy async driver")
    db_pool_size: int = Field(default=10, ge=1, description="Maximum pooled connections")
    db_pool_timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait for a pooled connection (None waits indefinitely)",
    )

    # Secret store
    db_secret_arn: str = Field(..., min_length=1, description="Secrets Manager secret id")
    aws_region: str = Field(..., min_length=1, description="AWS region of the secret")

    # API Configuration
    app_host: str = Field(default="0.0.0.0", description="API host")
    app_port: int = Field(default=5005, description="API port")
    app_reload: bool = Field(default=False, description="Enable hot reload")
    static_dir: str = Field(default="public", description="Static asset directory served at /")

    @property
    def db_address(self) -> Tuple[str, int]:
        """Split DB_HOST into (hostname, port)."""
        host, _, port = self.db_host.partition(":")
        if not port:
            return host, DEFAULT_DB_PORT
        try:
            return host, int(port)
        except ValueError as exc:
            raise ConfigError(f"Invalid port in DB_HOST: {self.db_host!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache the settings.

    Raises:
        ConfigError: If a required variable is missing or a value is invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        missing = [".".join(str(part) for part in err["loc"]).upper() for err in exc.errors()]
        logger.critical(
            "Configuration validation failed",
            extra={"fields": missing},
        )
        raise ConfigError(
            "Missing or invalid configuration: " + ", ".join(missing)
        ) from exc
    return settings
