"""HMAC key resource.

An HMAC key is an access id and secret pair a service account uses for the interoperability API.
The secret is only returned once, when the key is created. Every other call returns `HmacMeta`.
"""

from datetime import datetime
from enum import StrEnum

from gcstorage.resources.common import StorageModel


class HmacState(StrEnum):
    """Lifecycle state of an HMAC key. A key must be INACTIVE before it can be deleted."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"


class HmacMeta(StorageModel):
    """Metadata of an HMAC key."""

    kind: str = "storage#hmacKeyMetadata"
    id: str
    self_link: str | None = None
    access_id: str
    project_id: str
    service_account_email: str
    state: HmacState
    time_created: datetime
    updated: datetime | None = None
    etag: str | None = None


class HmacKey(StorageModel):
    """A freshly created HMAC key, including its secret."""

    kind: str = "storage#hmacKey"
    metadata: HmacMeta
    secret: str


class HmacStateUpdate(StorageModel):
    """Request body for changing the state of an HMAC key."""

    state: HmacState
    etag: str | None = None
