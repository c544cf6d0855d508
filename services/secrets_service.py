"""
Service for fetching database credentials from AWS Secrets Manager.

The secret's SecretString must be JSON with "username" and "password" keys.
Credentials are fetched once at startup and never logged.
"""
import json
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, Field, SecretStr, ValidationError

from core.exceptions import CredentialError

logger = logging.getLogger(__name__)


class DatabaseCredentials(BaseModel):
    """Username/password pair for the database."""

    username: str = Field(..., min_length=1)
    password: SecretStr


class SecretsManagerCredentialProvider:
    """Reads database credentials from AWS Secrets Manager."""

    def __init__(self, region_name: str, client: Optional[Any] = None):
        """
        Initialize the provider.

        Args:
            region_name: AWS region of the secret.
            client: A boto3 secretsmanager client. Created lazily if not provided.
        """
        self.region_name = region_name
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("secretsmanager", region_name=self.region_name)
        return self._client

    def get_db_credentials(self, secret_id: str) -> DatabaseCredentials:
        """
        Fetch and parse the credential secret.

        Args:
            secret_id: ARN or name of the secret.

        Returns:
            DatabaseCredentials: The parsed pair.

        Raises:
            CredentialError: If the secret cannot be read or is malformed.
        """
        logger.info(
            "Fetching database credentials from AWS Secrets Manager",
            extra={"region": self.region_name},
        )
        try:
            response = self.client.get_secret_value(SecretId=secret_id)
        except (ClientError, BotoCoreError) as exc:
            logger.critical("Failed to fetch DB credentials from Secrets Manager", exc_info=exc)
            raise CredentialError(f"Failed to fetch DB credentials: {exc}") from exc

        secret_string = response.get("SecretString")
        if not secret_string:
            raise CredentialError("Missing SecretString in Secrets Manager response.")

        try:
            return DatabaseCredentials.model_validate(json.loads(secret_string))
        except (json.JSONDecodeError, ValidationError):
            # The parse error would echo the payload, which holds the password.
            raise CredentialError(
                "Secret must be a JSON object with 'username' and 'password'."
            ) from None
