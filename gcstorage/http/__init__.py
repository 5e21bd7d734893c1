"""HTTP plumbing: envelope decoding, URLs and the authenticated transport."""

from gcstorage.http.envelope import (
    Envelope,
    ErrorDetail,
    Failure,
    FieldError,
    Success,
    decode_envelope,
    unwrap_envelope,
)
from gcstorage.http.paths import encode_segment, url_for
from gcstorage.http.transport import StorageHttpClient

__all__ = [
    "Envelope",
    "ErrorDetail",
    "Failure",
    "FieldError",
    "StorageHttpClient",
    "Success",
    "decode_envelope",
    "encode_segment",
    "unwrap_envelope",
    "url_for",
]
