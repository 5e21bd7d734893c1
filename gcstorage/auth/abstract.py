"""Credential abstractions."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

import httpx


@dataclass(frozen=True, slots=True)
class Token:
    """A bearer token and the moment it stops being valid."""

    access_token: str
    expires_at: datetime
    token_type: str = "Bearer"

    def expires_within(self, margin: timedelta, now: datetime | None = None) -> bool:
        """Whether the token is expired or expires within `margin` from `now`."""
        return (now or datetime.now(UTC)) + margin >= self.expires_at

    @property
    def header_value(self) -> str:
        """Value of the ``Authorization`` header."""
        return f"{self.token_type} {self.access_token}"

    def __repr__(self) -> str:
        return f"Token(access_token='...', expires_at={self.expires_at!r}, token_type={self.token_type!r})"


class AbstractTokenSource(Protocol):
    """Something that can mint a fresh bearer token."""

    async def fetch_token(self, http_client: httpx.AsyncClient) -> Token:
        """Mint a new token.

        Args:
            http_client: The client to reach the identity provider with.

        Raises:
            AuthError: If the identity provider rejects the request.
            ConfigurationError: If the credential source cannot be used at all.
            TransportError: If the identity provider cannot be reached.

        """
        ...

    async def fetch_project_id(self, http_client: httpx.AsyncClient) -> str | None:
        """Return the project the credentials belong to, if the source knows it."""
        ...

    @property
    def service_account_email(self) -> str | None:
        """Email of the identity the tokens are issued for, if known without a request."""
        ...
