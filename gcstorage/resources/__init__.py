"""Resource records as represented by the JSON API."""

from gcstorage.resources.access_control import (
    BucketAccessControl,
    DefaultObjectAccessControl,
    NewBucketAccessControl,
    NewDefaultObjectAccessControl,
    NewObjectAccessControl,
    ObjectAccessControl,
)
from gcstorage.resources.bucket import (
    Billing,
    Binding,
    Bucket,
    Cors,
    IamConfiguration,
    IamPermissions,
    IamPolicy,
    Lifecycle,
    NewBucket,
    StorageClass,
    Versioning,
)
from gcstorage.resources.common import Entity, EntityKind, ListResponse, ProjectTeam, Role, Team
from gcstorage.resources.hmac_key import HmacKey, HmacMeta, HmacState
from gcstorage.resources.object import ComposeRequest, ListRequest, Object, ObjectList, ObjectMetadata, SourceObject

__all__ = [
    "Billing",
    "Binding",
    "Bucket",
    "BucketAccessControl",
    "ComposeRequest",
    "Cors",
    "DefaultObjectAccessControl",
    "Entity",
    "EntityKind",
    "HmacKey",
    "HmacMeta",
    "HmacState",
    "IamConfiguration",
    "IamPermissions",
    "IamPolicy",
    "Lifecycle",
    "ListRequest",
    "ListResponse",
    "NewBucket",
    "NewBucketAccessControl",
    "NewDefaultObjectAccessControl",
    "NewObjectAccessControl",
    "Object",
    "ObjectAccessControl",
    "ObjectList",
    "ObjectMetadata",
    "ProjectTeam",
    "Role",
    "SourceObject",
    "StorageClass",
    "Team",
    "Versioning",
]
