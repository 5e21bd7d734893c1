"""Service account key file."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, ValidationError

from gcstorage.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


class ServiceAccount(BaseModel):
    """A parsed ``service-account-*.json`` key file.

    The service account needs the ``Storage Object Admin`` role to manage objects and
    ``Service Account Token Creator`` to mint tokens.
    """

    type: Literal["service_account"]
    project_id: str | None = None
    private_key_id: str
    private_key: SecretStr
    client_email: str
    client_id: str | None = None
    auth_uri: str | None = None
    token_uri: str = Field(default=DEFAULT_TOKEN_URI)
    auth_provider_x509_cert_url: str | None = None
    client_x509_cert_url: str | None = None

    @classmethod
    def from_file(cls, path: Path) -> "ServiceAccount":
        """Load a service account key file.

        Args:
            path: Path to the key file.

        Raises:
            ConfigurationError: If the file cannot be read or is not a service account key.

        """
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read service account file {path}: {e}") from e

        try:
            account = cls.model_validate_json(raw)
        except ValidationError as e:
            raise ConfigurationError(f"Service account file {path} is not a valid service account key") from e

        logger.info("Loaded service account %s from %s", account.client_email, path)
        return account
