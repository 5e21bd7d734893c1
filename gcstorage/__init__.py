"""Typed async client for the Cloud Storage JSON API."""

from gcstorage.client import StorageClient
from gcstorage.configs.storage import StorageConfig
from gcstorage.exceptions import (
    AuthError,
    BadRequestError,
    ConfigurationError,
    ConflictError,
    DecodeError,
    ForbiddenError,
    NotFoundError,
    PreconditionFailedError,
    RemoteError,
    ServiceUnavailableError,
    StorageClientException,
    TooManyRequestsError,
    TransportError,
    UnauthorizedError,
)

__all__ = [
    "AuthError",
    "BadRequestError",
    "ConfigurationError",
    "ConflictError",
    "DecodeError",
    "ForbiddenError",
    "NotFoundError",
    "PreconditionFailedError",
    "RemoteError",
    "ServiceUnavailableError",
    "StorageClient",
    "StorageClientException",
    "StorageConfig",
    "TooManyRequestsError",
    "TransportError",
    "UnauthorizedError",
]
