"""Storage config."""

from datetime import timedelta
from pathlib import Path

from pydantic import AliasChoices, AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://www.googleapis.com/storage/v1"
DEFAULT_UPLOAD_URL = "https://www.googleapis.com/upload/storage/v1"
DEFAULT_METADATA_URL = "http://metadata.google.internal"
FULL_CONTROL_SCOPE = "https://www.googleapis.com/auth/devstorage.full_control"


class StorageConfig(BaseSettings):
    """Storage configuration.

    This config is used to configure the storage client.

    Attributes:
        credentials_path (Path | None): Path to a service account key file.
            Can be set via SERVICE_ACCOUNT or GOOGLE_APPLICATION_CREDENTIALS environment variable.
            Defaults to None, in which case the metadata server is used.
        project_id (str | None): The project that owns buckets and HMAC keys.
            Can be set via GOOGLE_CLOUD_PROJECT environment variable.
            Defaults to None, in which case it is taken from the credentials or the metadata server.
        service_account_email (str | None): The service account HMAC keys are created for.
            Defaults to None, in which case the email from the key file is used.
        base_url (AnyHttpUrl): The JSON API base URL. Override it to talk to an emulator.
        upload_url (AnyHttpUrl): The media upload base URL.
        token_uri (str | None): Overrides the token endpoint declared in the key file.
        metadata_url (AnyHttpUrl): The metadata server root.
        use_metadata_server (bool): Whether the metadata server may be used when no key file is configured.
            Defaults to True.
        scopes (list[str]): OAuth scopes requested for the bearer token.
            Defaults to the full control storage scope.
        timeout_seconds (float): Timeout of a single HTTP request. Defaults to 30 seconds.
        token_refresh_margin (timedelta): How long before expiry a cached token is refreshed.
            Defaults to 1 minute.

    """

    model_config = SettingsConfigDict(populate_by_name=True)

    credentials_path: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("credentials_path", "SERVICE_ACCOUNT", "GOOGLE_APPLICATION_CREDENTIALS"),
        description="Path to a service account key file.",
    )
    project_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("project_id", "GOOGLE_CLOUD_PROJECT"),
        description="The project that owns buckets and HMAC keys.",
    )
    service_account_email: str | None = Field(
        default=None, description="The service account HMAC keys are created for."
    )
    base_url: AnyHttpUrl = Field(
        default=DEFAULT_BASE_URL,
        validation_alias=AliasChoices("base_url", "STORAGE_BASE_URL"),
        description="The JSON API base URL.",
    )
    upload_url: AnyHttpUrl = Field(
        default=DEFAULT_UPLOAD_URL,
        validation_alias=AliasChoices("upload_url", "STORAGE_UPLOAD_URL"),
        description="The media upload base URL.",
    )
    token_uri: str | None = Field(default=None, description="Overrides the token endpoint declared in the key file.")
    metadata_url: AnyHttpUrl = Field(
        default=DEFAULT_METADATA_URL,
        validation_alias=AliasChoices("metadata_url", "STORAGE_METADATA_URL"),
        description="The metadata server root.",
    )
    use_metadata_server: bool = Field(
        default=True, description="Whether the metadata server may be used when no key file is configured."
    )
    scopes: list[str] = Field(
        default_factory=lambda: [FULL_CONTROL_SCOPE], description="OAuth scopes requested for the bearer token."
    )
    timeout_seconds: float = Field(default=30.0, description="Timeout of a single HTTP request.")
    token_refresh_margin: timedelta = Field(
        default=timedelta(minutes=1), description="How long before expiry a cached token is refreshed."
    )

    @property
    def api_root(self) -> str:
        """JSON API base URL without a trailing slash."""
        return str(self.base_url).rstrip("/")

    @property
    def upload_root(self) -> str:
        """Upload base URL without a trailing slash."""
        return str(self.upload_url).rstrip("/")

    @property
    def metadata_root(self) -> str:
        """Metadata server root without a trailing slash."""
        return str(self.metadata_url).rstrip("/")
