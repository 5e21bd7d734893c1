"""Object operations."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from gcstorage.clients.base import BaseResourceClient
from gcstorage.resources.object import ComposeRequest, ListRequest, Object, ObjectList, ObjectMetadata

logger = logging.getLogger(__name__)


class ObjectsClient(BaseResourceClient):
    """Objects of a bucket: ``/b/{bucket}/o``."""

    async def create(self, bucket: str, data: bytes, name: str, mime_type: str) -> Object:
        """Upload `data` as object `name` in a single request.

        Args:
            bucket: The bucket to store the object in.
            data: The object content.
            name: The object name. May contain ``/`` and any other character.
            mime_type: The content type of the object, e.g. ``text/plain``.

        """
        obj = await self._http.request(
            "POST",
            self._upload_url("b", bucket, "o"),
            Object,
            params={"uploadType": "media", "name": name},
            content=data,
            headers={"Content-Type": mime_type},
        )
        logger.info("Uploaded %s bytes to %s/%s", len(data), bucket, name)
        return obj

    async def read(self, bucket: str, name: str) -> Object:
        """Read the metadata of an object.

        Raises:
            NotFoundError: If the object does not exist.

        """
        return await self._http.request("GET", self._url("b", bucket, "o", name), Object)

    async def download(self, bucket: str, name: str) -> bytes:
        """Download the content of an object."""
        return await self._http.request_bytes("GET", self._url("b", bucket, "o", name), params={"alt": "media"})

    async def list_page(self, bucket: str, request: ListRequest | None = None) -> ObjectList:
        """Fetch a single page of objects."""
        query = (request or ListRequest()).to_query()
        return await self._http.request("GET", self._url("b", bucket, "o"), ObjectList, params=query)

    async def list(self, bucket: str, request: ListRequest | None = None) -> AsyncIterator[ObjectList]:
        """Iterate over every page of objects matching `request`.

        Example:
        ```
            async for page in client.objects.list("my-bucket", ListRequest(prefix="logs/")):
                for obj in page.items:
                    print(obj.name)
        ```

        """
        request = request or ListRequest()
        while True:
            page = await self.list_page(bucket, request)
            yield page
            if not page.next_page_token:
                return
            request = request.model_copy(update={"page_token": page.next_page_token})

    async def update(self, obj: Object) -> Object:
        """Replace the writable metadata of an object with those of `obj`."""
        return await self._http.request(
            "PUT", self._url("b", obj.bucket, "o", obj.name), Object, json=obj.to_wire()
        )

    async def delete(self, bucket: str, name: str) -> None:
        """Delete an object.

        Raises:
            NotFoundError: If the object does not exist.

        """
        await self._http.request("DELETE", self._url("b", bucket, "o", name), None)
        logger.info("Deleted %s/%s", bucket, name)

    async def copy(
        self,
        bucket: str,
        name: str,
        destination_bucket: str,
        destination_name: str,
        metadata: ObjectMetadata | None = None,
    ) -> Object:
        """Copy an object, optionally overriding the metadata of the copy."""
        return await self._http.request(
            "POST",
            self._url("b", bucket, "o", name, "copyTo", "b", destination_bucket, "o", destination_name),
            Object,
            json=metadata.to_wire() if metadata else {},
        )

    async def compose(self, bucket: str, request: ComposeRequest, destination_name: str) -> Object:
        """Concatenate objects of `bucket` into `destination_name`."""
        return await self._http.request(
            "POST",
            self._url("b", bucket, "o", destination_name, "compose"),
            Object,
            json=request.to_wire(),
        )
