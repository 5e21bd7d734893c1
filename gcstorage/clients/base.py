"""Base of the resource clients."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gcstorage.http.paths import url_for

if TYPE_CHECKING:
    from gcstorage.client import StorageClient
    from gcstorage.http.transport import StorageHttpClient


class BaseResourceClient:
    """Shared plumbing of the resource clients."""

    def __init__(self, client: StorageClient) -> None:
        """Initialize the resource client.

        Args:
            client: The storage client that owns the transport and the configuration.

        """
        self._client = client

    @property
    def _http(self) -> StorageHttpClient:
        return self._client.http

    def _url(self, *segments: object) -> str:
        return url_for(self._client.config.api_root, *segments)

    def _upload_url(self, *segments: object) -> str:
        return url_for(self._client.config.upload_root, *segments)

    @staticmethod
    def _params(**kwargs: Any) -> dict[str, Any]:
        """Build query parameters, filtering out None values."""
        return {k: v for k, v in kwargs.items() if v is not None}
