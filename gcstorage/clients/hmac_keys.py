"""HMAC key operations."""

from __future__ import annotations

import logging

from gcstorage.clients.base import BaseResourceClient
from gcstorage.resources.common import ListResponse
from gcstorage.resources.hmac_key import HmacKey, HmacMeta, HmacState, HmacStateUpdate

logger = logging.getLogger(__name__)


class HmacKeysClient(BaseResourceClient):
    """HMAC keys of the project: ``/projects/{project}/hmacKeys``."""

    async def _keys_url(self, *segments: object) -> str:
        return self._url("projects", await self._client.project_id(), "hmacKeys", *segments)

    async def create(self) -> HmacKey:
        """Create a key for the configured service account. The secret is only returned here.

        Raises:
            ConfigurationError: If no service account email is known.

        """
        email = self._client.service_account_email()
        key = await self._http.request(
            "POST",
            await self._keys_url(),
            HmacKey,
            params={"serviceAccountEmail": email},
        )
        logger.info("Created HMAC key %s for %s", key.metadata.access_id, email)
        return key

    async def list(self) -> list[HmacMeta]:
        """List the key metadata of the project.

        An answer without ``items`` is an empty list. Any other shape mismatch raises `DecodeError`.
        """
        response = await self._http.request("GET", await self._keys_url(), ListResponse[HmacMeta])
        return response.items

    async def read(self, access_id: str) -> HmacMeta:
        """Read the metadata of a key."""
        return await self._http.request("GET", await self._keys_url(access_id), HmacMeta)

    async def update(self, access_id: str, state: HmacState) -> HmacMeta:
        """Change the state of a key."""
        return await self._http.request(
            "PUT", await self._keys_url(access_id), HmacMeta, json=HmacStateUpdate(state=state).to_wire()
        )

    async def delete(self, access_id: str) -> None:
        """Delete a key. The key must be INACTIVE."""
        await self._http.request("DELETE", await self._keys_url(access_id), None)
        logger.info("Deleted HMAC key %s", access_id)
