"""Bucket resource."""

from collections.abc import Sequence
from datetime import date, datetime
from enum import StrEnum

from pydantic import Field

from gcstorage.resources.access_control import (
    BucketAccessControl,
    DefaultObjectAccessControl,
    NewBucketAccessControl,
    NewDefaultObjectAccessControl,
)
from gcstorage.resources.common import Int64, Owner, StorageModel


class StorageClass(StrEnum):
    """Storage class of a bucket or an object."""

    STANDARD = "STANDARD"
    NEARLINE = "NEARLINE"
    COLDLINE = "COLDLINE"
    ARCHIVE = "ARCHIVE"
    MULTI_REGIONAL = "MULTI_REGIONAL"
    REGIONAL = "REGIONAL"
    DURABLE_REDUCED_AVAILABILITY = "DURABLE_REDUCED_AVAILABILITY"


class Versioning(StorageModel):
    """Object versioning settings."""

    enabled: bool


class Website(StorageModel):
    """Static website settings."""

    main_page_suffix: str | None = None
    not_found_page: str | None = None


class Logging(StorageModel):
    """Access and storage log settings."""

    log_bucket: str
    log_object_prefix: str | None = None


class Cors(StorageModel):
    """A CORS rule."""

    origin: list[str] = Field(default_factory=list)
    method: list[str] = Field(default_factory=list)
    response_header: list[str] = Field(default_factory=list)
    max_age_seconds: int | None = None


class ActionType(StrEnum):
    """Lifecycle action type."""

    DELETE = "Delete"
    SET_STORAGE_CLASS = "SetStorageClass"
    ABORT_INCOMPLETE_MULTIPART_UPLOAD = "AbortIncompleteMultipartUpload"


class Action(StorageModel):
    """Lifecycle action."""

    type: ActionType
    storage_class: StorageClass | None = None


class Condition(StorageModel):
    """Lifecycle condition. All set fields must match for the action to run."""

    age: int | None = None
    created_before: date | None = None
    is_live: bool | None = None
    matches_storage_class: list[StorageClass] | None = None
    matches_prefix: list[str] | None = None
    matches_suffix: list[str] | None = None
    num_newer_versions: int | None = None
    days_since_noncurrent_time: int | None = None
    noncurrent_time_before: date | None = None


class Rule(StorageModel):
    """Lifecycle rule."""

    action: Action
    condition: Condition


class Lifecycle(StorageModel):
    """Lifecycle configuration."""

    rule: list[Rule] = Field(default_factory=list)


class RetentionPolicy(StorageModel):
    """Minimum retention of objects in the bucket."""

    retention_period: Int64
    effective_time: datetime | None = None
    is_locked: bool | None = None


class UniformBucketLevelAccess(StorageModel):
    """Uniform bucket-level access settings."""

    enabled: bool
    locked_time: datetime | None = None


class IamConfiguration(StorageModel):
    """IAM settings."""

    uniform_bucket_level_access: UniformBucketLevelAccess | None = None
    public_access_prevention: str | None = None


class Encryption(StorageModel):
    """Default KMS key of the bucket."""

    default_kms_key_name: str


class Billing(StorageModel):
    """Billing settings."""

    requester_pays: bool


class Bucket(StorageModel):
    """A bucket: a named container of objects with a globally unique name."""

    kind: str = "storage#bucket"
    id: str | None = None
    self_link: str | None = None
    project_number: str | None = None
    name: str
    time_created: datetime | None = None
    updated: datetime | None = None
    default_event_based_hold: bool | None = None
    retention_policy: RetentionPolicy | None = None
    metageneration: str | None = None
    acl: list[BucketAccessControl] | None = None
    default_object_acl: list[DefaultObjectAccessControl] | None = None
    iam_configuration: IamConfiguration | None = None
    encryption: Encryption | None = None
    owner: Owner | None = None
    location: str | None = None
    location_type: str | None = None
    website: Website | None = None
    logging: Logging | None = None
    versioning: Versioning | None = None
    cors: list[Cors] | None = None
    lifecycle: Lifecycle | None = None
    labels: dict[str, str] | None = None
    storage_class: StorageClass | None = None
    billing: Billing | None = None
    etag: str | None = None


class NewBucket(StorageModel):
    """Request body for creating a bucket. Only `name` is required."""

    name: str
    default_event_based_hold: bool | None = None
    acl: list[NewBucketAccessControl] | None = None
    default_object_acl: list[NewDefaultObjectAccessControl] | None = None
    iam_configuration: IamConfiguration | None = None
    encryption: Encryption | None = None
    location: str | None = None
    website: Website | None = None
    logging: Logging | None = None
    versioning: Versioning | None = None
    cors: list[Cors] | None = None
    lifecycle: Lifecycle | None = None
    labels: dict[str, str] | None = None
    storage_class: StorageClass | None = None
    billing: Billing | None = None
    retention_policy: RetentionPolicy | None = None


class BindingCondition(StorageModel):
    """Condition of an IAM binding."""

    title: str
    description: str | None = None
    expression: str


class Binding(StorageModel):
    """An IAM binding of members to a role."""

    role: str
    members: list[str] = Field(default_factory=list)
    condition: BindingCondition | None = None


class IamPolicy(StorageModel):
    """IAM policy of a bucket."""

    kind: str = "storage#policy"
    resource_id: str | None = None
    version: int | None = None
    bindings: list[Binding] = Field(default_factory=list)
    etag: str | None = None


class IamPermissions(StorageModel):
    """Result of an IAM permission check: the subset of permissions the caller holds."""

    kind: str = "storage#testIamPermissionsResponse"
    permissions: Sequence[str] = Field(default_factory=list)
