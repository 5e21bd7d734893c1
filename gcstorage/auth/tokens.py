"""Bearer token cache."""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx

from gcstorage.auth.abstract import AbstractTokenSource, Token

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


class TokenProvider:
    """Caches the token of a source and refreshes it on demand.

    Concurrent callers that find the cached token expired share a single refresh: the refresh runs
    under a lock and the cache is checked again once the lock is held. The cached token is replaced
    as a whole, never mutated.
    """

    def __init__(
        self,
        source: AbstractTokenSource,
        http_client: httpx.AsyncClient,
        refresh_margin: timedelta = timedelta(minutes=1),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the provider.

        Args:
            source: Where fresh tokens come from.
            http_client: The client passed to the source.
            refresh_margin: A cached token expiring within this margin is refreshed. For a token living
                shorter than twice the margin, half of its lifetime is used instead.
            clock: Returns the current time. Replaceable in tests.

        """
        self._source = source
        self._http_client = http_client
        self._refresh_margin = refresh_margin
        self._clock = clock
        self._token: Token | None = None
        self._token_margin = refresh_margin
        self._lock = asyncio.Lock()

    @property
    def source(self) -> AbstractTokenSource:
        """The token source."""
        return self._source

    def _usable(self, token: Token | None) -> bool:
        return token is not None and not token.expires_within(self._token_margin, self._clock())

    async def get_token(self) -> Token:
        """Return a token valid for at least the refresh margin.

        Raises:
            AuthError: If the identity provider rejects the refresh.
            ConfigurationError: If the credential source is unusable.
            TransportError: If the identity provider cannot be reached.

        """
        token = self._token
        if token is not None and self._usable(token):
            return token

        async with self._lock:
            token = self._token
            if token is not None and self._usable(token):
                return token

            token = await self._source.fetch_token(self._http_client)
            lifetime = token.expires_at - self._clock()
            self._token_margin = max(timedelta(0), min(self._refresh_margin, lifetime / 2))
            self._token = token
            logger.info("Refreshed access token, valid until %s", token.expires_at.isoformat())
            return token

    def invalidate(self) -> None:
        """Drop the cached token so the next call refreshes it."""
        self._token = None
