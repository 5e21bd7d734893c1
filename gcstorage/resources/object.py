"""Object resource."""

from datetime import datetime

from pydantic import Field

from gcstorage.resources.access_control import ObjectAccessControl
from gcstorage.resources.bucket import StorageClass
from gcstorage.resources.common import Int64, Owner, StorageModel


class CustomerEncryption(StorageModel):
    """Customer-supplied encryption key metadata."""

    encryption_algorithm: str
    key_sha256: str


class Object(StorageModel):
    """An object: a piece of data and its metadata stored in a bucket."""

    kind: str = "storage#object"
    id: str | None = None
    self_link: str | None = None
    name: str
    bucket: str
    generation: str | None = None
    metageneration: str | None = None
    content_type: str | None = None
    time_created: datetime | None = None
    updated: datetime | None = None
    time_deleted: datetime | None = None
    temporary_hold: bool | None = None
    event_based_hold: bool | None = None
    retention_expiration_time: datetime | None = None
    storage_class: StorageClass | None = None
    time_storage_class_updated: datetime | None = None
    size: Int64 = 0
    md5_hash: str | None = None
    media_link: str | None = None
    content_encoding: str | None = None
    content_disposition: str | None = None
    content_language: str | None = None
    cache_control: str | None = None
    metadata: dict[str, str] | None = None
    acl: list[ObjectAccessControl] | None = None
    owner: Owner | None = None
    crc32c: str | None = None
    component_count: int | None = None
    etag: str | None = None
    customer_encryption: CustomerEncryption | None = None
    kms_key_name: str | None = None
    custom_time: datetime | None = None


class ObjectMetadata(StorageModel):
    """Writable metadata of an object, used as the destination of copy and compose."""

    content_type: str | None = None
    content_encoding: str | None = None
    content_disposition: str | None = None
    content_language: str | None = None
    cache_control: str | None = None
    metadata: dict[str, str] | None = None
    storage_class: StorageClass | None = None


class ObjectList(StorageModel):
    """A page of objects.

    `prefixes` holds the "directories" collapsed by the list `delimiter`.
    """

    kind: str = "storage#objects"
    items: list[Object] = Field(default_factory=list)
    prefixes: list[str] = Field(default_factory=list)
    next_page_token: str | None = None


class ListRequest(StorageModel):
    """Query parameters of an object listing."""

    prefix: str | None = None
    delimiter: str | None = None
    max_results: int | None = None
    page_token: str | None = None
    versions: bool | None = None
    start_offset: str | None = None
    end_offset: str | None = None
    include_trailing_delimiter: bool | None = None
    projection: str | None = None

    def to_query(self) -> dict[str, str]:
        """Render the request as query parameters."""
        return {
            key: str(value).lower() if isinstance(value, bool) else str(value)
            for key, value in self.to_wire().items()
        }


class ObjectPrecondition(StorageModel):
    """Precondition of a compose source."""

    if_generation_match: Int64


class SourceObject(StorageModel):
    """A source of a compose request."""

    name: str
    generation: Int64 | None = None
    object_preconditions: ObjectPrecondition | None = None


class ComposeRequest(StorageModel):
    """Request body for composing objects of one bucket into a new object."""

    kind: str = "storage#composeRequest"
    source_objects: list[SourceObject]
    destination: ObjectMetadata | None = None
