"""Authenticated HTTP transport."""

import logging
from typing import Any, TypeVar

import httpx
from opentelemetry import trace

from gcstorage.auth.tokens import TokenProvider
from gcstorage.exceptions import StorageClientException, TransportError
from gcstorage.http.envelope import decode_envelope, unwrap_envelope
from gcstorage.observability.utils import observe_exception

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


class StorageHttpClient:
    """Sends authenticated requests and decodes their response envelopes.

    Every request gets a bearer token from the token provider. Nothing is retried: a failed
    attempt is reported to the caller as is.
    """

    def __init__(self, http_client: httpx.AsyncClient, token_provider: TokenProvider) -> None:
        """Initialize the transport.

        Args:
            http_client: The underlying httpx client. Its lifetime is managed by the caller.
            token_provider: Where bearer tokens come from.

        """
        self._http_client = http_client
        self._token_provider = token_provider

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request with the authorization header attached.

        Raises:
            TransportError: If the request could not be delivered.

        """
        token = await self._token_provider.get_token()
        request_headers = {"Authorization": token.header_value} | (headers or {})

        with tracer.start_as_current_span(
            f"storage {method}", attributes={"http.request.method": method, "url.full": url}
        ) as span:
            try:
                response = await self._http_client.request(
                    method, url, params=params, json=json, content=content, headers=request_headers
                )
            except httpx.HTTPError as e:
                observe_exception(e, span)
                raise TransportError(f"{method} {url} failed: {e}") from e

            span.set_attribute("http.response.status_code", response.status_code)

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    async def request(self, method: str, url: str, shape: type[T] | Any, **kwargs: Any) -> T:
        """Send a request and decode the response into `shape`.

        Raises:
            TransportError: If the request could not be delivered.
            DecodeError: If the response matches neither the error nor the success shape.
            RemoteError: If the service answered with an error payload.

        """
        response = await self.send(method, url, **kwargs)
        try:
            return unwrap_envelope(decode_envelope(response.content, shape, response.status_code))
        except StorageClientException as e:
            logger.debug("%s %s failed: %s", method, url, e)
            raise

    async def request_bytes(self, method: str, url: str, **kwargs: Any) -> bytes:
        """Send a request whose success body is raw bytes, e.g. a media download.

        Raises:
            TransportError: If the request could not be delivered.
            RemoteError: If the service answered with an error.

        """
        response = await self.send(method, url, **kwargs)
        if response.is_error:
            unwrap_envelope(decode_envelope(response.content, None, response.status_code))
        return response.content
