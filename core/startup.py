"""
Ordered startup pipeline for the database handle.

    settings → credentials → pool → schema

Each step raises a StartupError subclass on failure, and the first failure
aborts the pipeline. A handle is only returned once its schema is in place.
"""
import asyncio
import logging
from typing import Optional

from sqlalchemy.engine import URL

from core.config import Settings
from repositories.base import Database
from services.secrets_service import SecretsManagerCredentialProvider

logger = logging.getLogger(__name__)


def build_database_url(settings: Settings, username: str, password: str) -> URL:
    """Build the SQLAlchemy URL; URL.create escapes the credentials."""
    host, port = settings.db_address
    return URL.create(
        settings.db_driver,
        username=username,
        password=password,
        host=host,
        port=port,
        database=settings.db_name,
    )


async def open_database(
    settings: Settings,
    credential_provider: Optional[SecretsManagerCredentialProvider] = None,
) -> Database:
    """
    Fetch credentials, build the pool and ensure the schema exists.

    Args:
        settings: Validated application settings.
        credential_provider: Secret store client. Defaults to Secrets Manager
            in settings.aws_region.

    Returns:
        Database: A ready-to-use handle. The caller owns it and must dispose it.

    Raises:
        ConfigError: If DB_HOST carries an invalid port.
        CredentialError: If the secret cannot be fetched or parsed.
        SchemaError: If the store is unreachable or the table cannot be created.
    """
    provider = credential_provider or SecretsManagerCredentialProvider(region_name=settings.aws_region)
    # boto3 blocks; run it off the event loop
    credentials = await asyncio.to_thread(provider.get_db_credentials, settings.db_secret_arn)

    url = build_database_url(
        settings,
        username=credentials.username,
        password=credentials.password.get_secret_value(),
    )
    database = Database(
        url,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
    )
    logger.info(
        "Connecting to database",
        extra={"database": database.display_url, "pool_size": settings.db_pool_size},
    )

    try:
        await database.ensure_schema()
    except BaseException:
        await database.dispose()
        raise
    return database
