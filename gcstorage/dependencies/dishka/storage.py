"""Storage client providers."""

from collections.abc import AsyncGenerator

import httpx
from dishka import Provider, Scope, provide

from gcstorage.auth.sources import resolve_token_source
from gcstorage.auth.tokens import TokenProvider
from gcstorage.client import StorageClient
from gcstorage.configs.storage import StorageConfig


class StorageProvider(Provider):
    """Storage client provider.

    Expects a `StorageConfig` to be provided by the application, see `StorageConfigProvider`.
    """

    @provide(scope=Scope.APP)
    async def http_client(self, storage_config: StorageConfig) -> AsyncGenerator[httpx.AsyncClient]:
        """Get the httpx client shared by the token provider and the storage client."""
        async with httpx.AsyncClient(timeout=storage_config.timeout_seconds) as client:
            yield client

    @provide(scope=Scope.APP)
    async def token_provider(self, storage_config: StorageConfig, http_client: httpx.AsyncClient) -> TokenProvider:
        """Get the token provider.

        Args:
            storage_config (StorageConfig): The storage config.
            http_client (httpx.AsyncClient): The shared httpx client.

        Returns:
            TokenProvider: A token provider for the credentials described by the config.

        """
        return TokenProvider(
            resolve_token_source(storage_config),
            http_client,
            refresh_margin=storage_config.token_refresh_margin,
        )

    @provide(scope=Scope.APP)
    async def storage_client(
        self,
        storage_config: StorageConfig,
        token_provider: TokenProvider,
        http_client: httpx.AsyncClient,
    ) -> StorageClient:
        """Get the storage client."""
        return StorageClient(storage_config, token_provider=token_provider, http_client=http_client)


class StorageConfigProvider(Provider):
    """Provides a `StorageConfig` read from the environment."""

    @provide(scope=Scope.APP)
    async def storage_config(self) -> StorageConfig:
        """Storage config."""
        return StorageConfig()
