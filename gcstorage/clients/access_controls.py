"""Access control list operations.

These endpoints fail with ``400 Bad Request`` on buckets with uniform bucket-level access enabled.
"""

from __future__ import annotations

import logging

from gcstorage.clients.base import BaseResourceClient
from gcstorage.resources.access_control import (
    BucketAccessControl,
    DefaultObjectAccessControl,
    NewBucketAccessControl,
    NewDefaultObjectAccessControl,
    NewObjectAccessControl,
    ObjectAccessControl,
)
from gcstorage.resources.common import Entity, ListResponse

logger = logging.getLogger(__name__)


def _require_bucket(acl: DefaultObjectAccessControl) -> None:
    if not acl.bucket:
        raise ValueError(f"Default object ACL entry of {acl.entity} does not name its bucket")


class BucketAccessControlsClient(BaseResourceClient):
    """ACL of a bucket: ``/b/{bucket}/acl``."""

    async def create(self, bucket: str, new_acl: NewBucketAccessControl) -> BucketAccessControl:
        """Grant `new_acl.role` on the bucket to `new_acl.entity`."""
        return await self._http.request(
            "POST", self._url("b", bucket, "acl"), BucketAccessControl, json=new_acl.to_wire()
        )

    async def list(self, bucket: str) -> list[BucketAccessControl]:
        """List the ACL entries of the bucket."""
        response = await self._http.request(
            "GET", self._url("b", bucket, "acl"), ListResponse[BucketAccessControl]
        )
        return response.items

    async def read(self, bucket: str, entity: Entity) -> BucketAccessControl:
        """Read the ACL entry of `entity`.

        Raises:
            NotFoundError: If the entity has no entry.

        """
        return await self._http.request("GET", self._url("b", bucket, "acl", entity), BucketAccessControl)

    async def update(self, acl: BucketAccessControl) -> BucketAccessControl:
        """Write back a changed ACL entry."""
        return await self._http.request(
            "PUT", self._url("b", acl.bucket, "acl", acl.entity), BucketAccessControl, json=acl.to_wire()
        )

    async def delete(self, acl: BucketAccessControl) -> None:
        """Remove the ACL entry."""
        await self._http.request("DELETE", self._url("b", acl.bucket, "acl", acl.entity), None)
        logger.info("Removed %s from the ACL of bucket %s", acl.entity, acl.bucket)


class DefaultObjectAccessControlsClient(BaseResourceClient):
    """Default ACL of new objects of a bucket: ``/b/{bucket}/defaultObjectAcl``.

    The service does not echo the bucket name, so every returned record gets the bucket the
    request was made for. `update` and `delete` rely on it.
    """

    async def create(self, bucket: str, new_acl: NewDefaultObjectAccessControl) -> DefaultObjectAccessControl:
        """Add an entry to the default object ACL of the bucket."""
        acl = await self._http.request(
            "POST", self._url("b", bucket, "defaultObjectAcl"), DefaultObjectAccessControl, json=new_acl.to_wire()
        )
        return acl.model_copy(update={"bucket": bucket})

    async def list(self, bucket: str) -> list[DefaultObjectAccessControl]:
        """List the default object ACL entries of the bucket."""
        response = await self._http.request(
            "GET", self._url("b", bucket, "defaultObjectAcl"), ListResponse[DefaultObjectAccessControl]
        )
        return [item.model_copy(update={"bucket": bucket}) for item in response.items]

    async def read(self, bucket: str, entity: Entity) -> DefaultObjectAccessControl:
        """Read the default object ACL entry of `entity`."""
        acl = await self._http.request(
            "GET", self._url("b", bucket, "defaultObjectAcl", entity), DefaultObjectAccessControl
        )
        return acl.model_copy(update={"bucket": bucket})

    async def update(self, acl: DefaultObjectAccessControl) -> DefaultObjectAccessControl:
        """Write back a changed default object ACL entry.

        Raises:
            ValueError: If the entry does not name its bucket.

        """
        _require_bucket(acl)
        updated = await self._http.request(
            "PUT",
            self._url("b", acl.bucket, "defaultObjectAcl", acl.entity),
            DefaultObjectAccessControl,
            json=acl.to_wire(),
        )
        return updated.model_copy(update={"bucket": acl.bucket})

    async def delete(self, acl: DefaultObjectAccessControl) -> None:
        """Remove the default object ACL entry."""
        _require_bucket(acl)
        await self._http.request("DELETE", self._url("b", acl.bucket, "defaultObjectAcl", acl.entity), None)


class ObjectAccessControlsClient(BaseResourceClient):
    """ACL of an object: ``/b/{bucket}/o/{object}/acl``."""

    async def create(self, bucket: str, object_name: str, new_acl: NewObjectAccessControl) -> ObjectAccessControl:
        """Grant `new_acl.role` on the object to `new_acl.entity`."""
        return await self._http.request(
            "POST", self._url("b", bucket, "o", object_name, "acl"), ObjectAccessControl, json=new_acl.to_wire()
        )

    async def list(self, bucket: str, object_name: str) -> list[ObjectAccessControl]:
        """List the ACL entries of the object."""
        response = await self._http.request(
            "GET", self._url("b", bucket, "o", object_name, "acl"), ListResponse[ObjectAccessControl]
        )
        return response.items

    async def read(self, bucket: str, object_name: str, entity: Entity) -> ObjectAccessControl:
        """Read the ACL entry of `entity` on the object.

        Raises:
            NotFoundError: If the entity has no entry.

        """
        return await self._http.request(
            "GET", self._url("b", bucket, "o", object_name, "acl", entity), ObjectAccessControl
        )

    async def update(self, acl: ObjectAccessControl) -> ObjectAccessControl:
        """Write back a changed ACL entry."""
        return await self._http.request(
            "PUT",
            self._url("b", acl.bucket, "o", acl.object, "acl", acl.entity),
            ObjectAccessControl,
            json=acl.to_wire(),
        )

    async def delete(self, acl: ObjectAccessControl) -> None:
        """Remove the ACL entry."""
        await self._http.request("DELETE", self._url("b", acl.bucket, "o", acl.object, "acl", acl.entity), None)
