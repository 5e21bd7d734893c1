"""Bucket operations."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gcstorage.clients.base import BaseResourceClient
from gcstorage.resources.bucket import Bucket, IamPermissions, IamPolicy, NewBucket
from gcstorage.resources.common import ListResponse

logger = logging.getLogger(__name__)


def _with_acl_bucket(bucket: Bucket) -> Bucket:
    """Fill the bucket name into the default object ACL entries, which the service returns without it."""
    if not bucket.default_object_acl:
        return bucket
    acl = [entry.model_copy(update={"bucket": bucket.name}) for entry in bucket.default_object_acl]
    return bucket.model_copy(update={"default_object_acl": acl})


class BucketsClient(BaseResourceClient):
    """Buckets of the configured project: ``/b``."""

    async def create(self, new_bucket: NewBucket) -> Bucket:
        """Create a bucket in the project.

        Example:
        ```
            bucket = await client.buckets.create(NewBucket(name="doctest-bucket"))
        ```

        Raises:
            ConflictError: If the name is taken.

        """
        project_id = await self._client.project_id()
        bucket = await self._http.request(
            "POST",
            self._url("b"),
            Bucket,
            params={"project": project_id},
            json=new_bucket.to_wire(),
        )
        logger.info("Created bucket %s", bucket.name)
        return _with_acl_bucket(bucket)

    async def list(self) -> list[Bucket]:
        """List every bucket of the project, following all pages."""
        project_id = await self._client.project_id()
        buckets: list[Bucket] = []
        page_token: str | None = None

        while True:
            page = await self._http.request(
                "GET",
                self._url("b"),
                ListResponse[Bucket],
                params=self._params(project=project_id, pageToken=page_token),
            )
            buckets.extend(_with_acl_bucket(bucket) for bucket in page.items)
            page_token = page.next_page_token
            if not page_token:
                return buckets

    async def read(self, name: str) -> Bucket:
        """Read a bucket by name.

        Raises:
            NotFoundError: If the bucket does not exist.

        """
        return _with_acl_bucket(await self._http.request("GET", self._url("b", name), Bucket))

    async def update(self, bucket: Bucket) -> Bucket:
        """Replace the writable fields of a bucket with those of `bucket`."""
        updated = await self._http.request("PUT", self._url("b", bucket.name), Bucket, json=bucket.to_wire())
        return _with_acl_bucket(updated)

    async def delete(self, name: str) -> None:
        """Delete an empty bucket.

        Raises:
            ConflictError: If the bucket still holds objects.

        """
        await self._http.request("DELETE", self._url("b", name), None)
        logger.info("Deleted bucket %s", name)

    async def get_iam_policy(self, name: str) -> IamPolicy:
        """Read the IAM policy of a bucket."""
        return await self._http.request("GET", self._url("b", name, "iam"), IamPolicy)

    async def set_iam_policy(self, name: str, policy: IamPolicy) -> IamPolicy:
        """Replace the IAM policy of a bucket."""
        return await self._http.request("PUT", self._url("b", name, "iam"), IamPolicy, json=policy.to_wire())

    async def test_iam_permissions(self, name: str, permissions: Sequence[str]) -> list[str]:
        """Return the subset of `permissions` the caller holds on the bucket."""
        result = await self._http.request(
            "GET",
            self._url("b", name, "iam", "testPermissions"),
            IamPermissions,
            params={"permissions": list(permissions)},
        )
        return list(result.permissions)
