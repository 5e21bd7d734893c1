"""Storage client."""

import asyncio
import logging
from types import TracebackType
from typing import Self

import httpx

from gcstorage.auth.abstract import AbstractTokenSource
from gcstorage.auth.sources import resolve_token_source
from gcstorage.auth.tokens import TokenProvider
from gcstorage.clients.access_controls import (
    BucketAccessControlsClient,
    DefaultObjectAccessControlsClient,
    ObjectAccessControlsClient,
)
from gcstorage.clients.buckets import BucketsClient
from gcstorage.clients.hmac_keys import HmacKeysClient
from gcstorage.clients.objects import ObjectsClient
from gcstorage.configs.storage import StorageConfig
from gcstorage.exceptions import ConfigurationError
from gcstorage.http.transport import StorageHttpClient

logger = logging.getLogger(__name__)


class StorageClient:
    """Client of the Cloud Storage JSON API.

    Credentials are resolved once, at construction: a service account key file when
    `StorageConfig.credentials_path` is set, the metadata server otherwise.

    Example:
    ```
        async with StorageClient(StorageConfig(credentials_path="service-account.json")) as client:
            bucket = await client.buckets.read("mybucket")
            await client.objects.create(bucket.name, b"hello", "hello.txt", "text/plain")
    ```

    """

    def __init__(
        self,
        config: StorageConfig | None = None,
        *,
        token_source: AbstractTokenSource | None = None,
        token_provider: TokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: The storage config. If None, it is read from the environment.
            token_source: Overrides the credential source resolved from the config.
            token_provider: A token provider shared with other clients. Wins over `token_source`.
            http_client: The httpx client to send requests with. If None, the client creates
                and owns one.

        Raises:
            ConfigurationError: If no credential source can be resolved.

        """
        self._config = config or StorageConfig()
        if token_provider is None:
            token_source = token_source or resolve_token_source(self._config)

        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=self._config.timeout_seconds)
        self._token_provider = token_provider or TokenProvider(
            token_source, self._http_client, refresh_margin=self._config.token_refresh_margin
        )
        self._project_id = self._config.project_id
        self._project_lock = asyncio.Lock()

        self.http = StorageHttpClient(self._http_client, self._token_provider)
        self.buckets = BucketsClient(self)
        self.objects = ObjectsClient(self)
        self.bucket_access_controls = BucketAccessControlsClient(self)
        self.default_object_access_controls = DefaultObjectAccessControlsClient(self)
        self.object_access_controls = ObjectAccessControlsClient(self)
        self.hmac_keys = HmacKeysClient(self)

    @property
    def config(self) -> StorageConfig:
        """The storage config."""
        return self._config

    @property
    def token_provider(self) -> TokenProvider:
        """The token provider."""
        return self._token_provider

    async def project_id(self) -> str:
        """The project buckets and HMAC keys belong to.

        Taken from the config, then from the credentials, then from the metadata server.

        Raises:
            ConfigurationError: If no source knows the project.

        """
        if self._project_id is not None:
            return self._project_id

        async with self._project_lock:
            if self._project_id is None:
                project_id = await self._token_provider.source.fetch_project_id(self._http_client)
                if not project_id:
                    raise ConfigurationError(
                        "No project id: set GOOGLE_CLOUD_PROJECT or use credentials with a project"
                    )
                logger.info("Resolved project id %s", project_id)
                self._project_id = project_id

        return self._project_id

    def service_account_email(self) -> str:
        """The service account HMAC keys are created for.

        Raises:
            ConfigurationError: If neither the config nor the credentials name one.

        """
        email = self._config.service_account_email or self._token_provider.source.service_account_email
        if not email:
            raise ConfigurationError("No service account email: configure one or use a service account key file")
        return email

    async def aclose(self) -> None:
        """Close the underlying httpx client if this client created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> Self:
        """Enter the context manager."""
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        """Exit the context manager."""
        await self.aclose()
