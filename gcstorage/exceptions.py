"""Storage client exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gcstorage.http.envelope import ErrorDetail, FieldError


class StorageClientException(Exception):
    """Base exception for storage client errors."""


class ConfigurationError(StorageClientException):
    """Raised when no credential source or project can be resolved."""


class AuthError(StorageClientException):
    """Raised when the identity provider rejects token issuance."""


class TransportError(StorageClientException):
    """Raised when the request could not be delivered or the response could not be read."""


class DecodeError(StorageClientException):
    """Raised when a response body does not match any expected shape."""


class RemoteError(StorageClientException):
    """Raised when the service answers with a structured error.

    Attributes:
        code: The HTTP status code reported by the service.
        message: The human-readable message reported by the service.
        field_errors: Per-field error reasons.

    """

    def __init__(self, code: int, message: str, field_errors: list[FieldError] | None = None) -> None:
        """Initialize the exception.

        Args:
            code: The HTTP status code reported by the service.
            message: The human-readable message reported by the service.
            field_errors: Per-field error reasons.

        """
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.field_errors = field_errors or []

    @property
    def reasons(self) -> list[str]:
        """Reasons of the field errors, e.g. ``notFound`` or ``conflict``."""
        return [error.reason for error in self.field_errors if error.reason]


class BadRequestError(RemoteError):
    """Raised when the service rejects the request as invalid (400)."""


class UnauthorizedError(RemoteError):
    """Raised when the bearer token is missing or invalid (401)."""


class ForbiddenError(RemoteError):
    """Raised when the caller lacks permission for the resource (403)."""


class NotFoundError(RemoteError):
    """Raised when the resource does not exist (404)."""


class ConflictError(RemoteError):
    """Raised when the resource already exists or is in a conflicting state (409)."""


class PreconditionFailedError(RemoteError):
    """Raised when a precondition check fails (412)."""


class TooManyRequestsError(RemoteError):
    """Raised when the caller is rate limited (429)."""


class ServiceUnavailableError(RemoteError):
    """Raised when the service reports a server-side failure (5xx)."""


_REMOTE_ERRORS: dict[int, type[RemoteError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    412: PreconditionFailedError,
    429: TooManyRequestsError,
}


def remote_error_from_detail(detail: ErrorDetail) -> RemoteError:
    """Map an error payload to the matching remote error.

    Args:
        detail: The decoded error payload.

    Returns:
        The most specific remote error for the payload code.

    """
    exception_class = _REMOTE_ERRORS.get(detail.code)
    if exception_class is None:
        exception_class = ServiceUnavailableError if detail.code >= 500 else RemoteError  # noqa: PLR2004
    return exception_class(detail.code, detail.message, list(detail.errors))
