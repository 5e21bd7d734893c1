"""Access control entries of buckets and objects.

Important: the access control endpoints fail with ``400 Bad Request`` for buckets with uniform
bucket-level access enabled. Use the bucket IAM policy to control access there instead.
"""

from gcstorage.resources.common import Entity, ProjectTeam, Role, StorageModel


class BucketAccessControl(StorageModel):
    """An access control entry of a bucket.

    READERs can get the bucket and list its objects. WRITERs are READERs that can also
    insert and delete objects. OWNERs are WRITERs that can also read and change the ACL.
    """

    kind: str = "storage#bucketAccessControl"
    id: str | None = None
    self_link: str | None = None
    bucket: str
    entity: Entity
    role: Role
    email: str | None = None
    entity_id: str | None = None
    domain: str | None = None
    project_team: ProjectTeam | None = None
    etag: str | None = None


class NewBucketAccessControl(StorageModel):
    """Request body for creating a bucket access control entry."""

    entity: Entity
    role: Role


class DefaultObjectAccessControl(StorageModel):
    """An entry of the ACL template applied to new objects of a bucket.

    The service does not return the owning bucket, the client fills `bucket` in from the request.
    """

    kind: str = "storage#objectAccessControl"
    entity: Entity
    role: Role
    email: str | None = None
    entity_id: str | None = None
    domain: str | None = None
    project_team: ProjectTeam | None = None
    etag: str | None = None
    bucket: str = ""


class NewDefaultObjectAccessControl(StorageModel):
    """Request body for creating a default object access control entry."""

    entity: Entity
    role: Role


class ObjectAccessControl(StorageModel):
    """An access control entry of an object.

    READERs can get the object. OWNERs can also read and change the ACL and update the object.
    """

    kind: str = "storage#objectAccessControl"
    id: str | None = None
    self_link: str | None = None
    bucket: str
    object: str
    generation: str | None = None
    entity: Entity
    role: Role
    email: str | None = None
    entity_id: str | None = None
    domain: str | None = None
    project_team: ProjectTeam | None = None
    etag: str | None = None


class NewObjectAccessControl(StorageModel):
    """Request body for creating an object access control entry."""

    entity: Entity
    role: Role
