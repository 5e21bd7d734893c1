"""Response envelope decoding.

The JSON API answers either with the resource itself or with an error body of the form::

    {"error": {"code": 404, "message": "Not Found", "errors": [{"domain": "global", "reason": "notFound", ...}]}}

The HTTP status code alone does not discriminate the two shapes, so the decoder parses the body
into a generic JSON value first and inspects it for an ``error`` object before validating the
success shape.
"""

import json
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from gcstorage.exceptions import DecodeError, remote_error_from_detail

HTTP_ERROR_THRESHOLD = 400

T = TypeVar("T")


class FieldError(BaseModel):
    """A single error reason of an error payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    domain: str | None = None
    reason: str | None = None
    message: str | None = None
    location: str | None = None
    location_type: str | None = None


class ErrorDetail(BaseModel):
    """Error payload of a failed response."""

    code: int
    message: str = ""
    errors: list[FieldError] = Field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """A decoded success payload."""

    value: T


@dataclass(frozen=True, slots=True)
class Failure:
    """A decoded error payload."""

    detail: ErrorDetail


Envelope = Success[T] | Failure


def _is_error_payload(payload: Any) -> bool:
    return isinstance(payload, dict) and isinstance(payload.get("error"), dict)


def decode_envelope(body: bytes | str, shape: type[T] | Any, status_code: int | None = None) -> Envelope[T]:
    """Decode a response body into a success or an error envelope.

    Args:
        body: The raw response body.
        shape: The expected success shape. Anything `pydantic.TypeAdapter` accepts.
        status_code: The HTTP status code of the response, if known.

    Returns:
        `Success` with the validated value or `Failure` with the error payload.

    Raises:
        DecodeError: If the body is not JSON or matches neither shape.

    """
    failed = status_code is not None and status_code >= HTTP_ERROR_THRESHOLD
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body

    if not text.strip():
        if failed:
            return Failure(ErrorDetail(code=status_code or 0, message="empty error response"))
        payload: Any = None
    else:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            if failed:
                return Failure(ErrorDetail(code=status_code or 0, message=text[:512]))
            raise DecodeError(f"Response body is not valid JSON: {e}") from e

    if _is_error_payload(payload):
        try:
            return Failure(ErrorDetail.model_validate(payload["error"]))
        except ValidationError as e:
            raise DecodeError(f"Malformed error payload: {e}") from e

    if failed:
        return Failure(ErrorDetail(code=status_code or 0, message=text[:512]))

    try:
        return Success(TypeAdapter(shape).validate_python(payload))
    except ValidationError as e:
        raise DecodeError(f"Response does not match {getattr(shape, '__name__', shape)}: {e}") from e


def unwrap_envelope(envelope: Envelope[T]) -> T:
    """Return the success value or raise the remote error of the envelope.

    Raises:
        RemoteError: If the envelope is a failure.

    """
    match envelope:
        case Success(value=value):
            return value
        case Failure(detail=detail):
            raise remote_error_from_detail(detail)
