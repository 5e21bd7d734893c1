"""Token sources."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from jwt import encode as jwt_encode
from jwt.exceptions import PyJWTError

from gcstorage.auth.abstract import AbstractTokenSource, Token
from gcstorage.auth.service_account import ServiceAccount
from gcstorage.configs.storage import StorageConfig
from gcstorage.exceptions import AuthError, ConfigurationError, TransportError

logger = logging.getLogger(__name__)

JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME = timedelta(hours=1)
METADATA_HEADERS = {"Metadata-Flavor": "Google"}


def _token_from_response(response: httpx.Response, issuer: str) -> Token:
    """Build a token from an OAuth token endpoint response.

    Raises:
        AuthError: If the response is an error or lacks the access token.

    """
    try:
        payload: Any = response.json()
    except ValueError as e:
        raise AuthError(f"{issuer} answered {response.status_code} with a non JSON body") from e

    if not isinstance(payload, dict):
        raise AuthError(f"{issuer} answered {response.status_code} with an unexpected body")

    if response.is_error or "access_token" not in payload:
        error = payload.get("error")
        if isinstance(error, dict):
            error = error.get("message")
        description = payload.get("error_description") or ""
        raise AuthError(f"{issuer} rejected the token request ({response.status_code}): {error} {description}".strip())

    return Token(
        access_token=payload["access_token"],
        expires_at=datetime.now(UTC) + timedelta(seconds=int(payload.get("expires_in", 3600))),
        token_type=payload.get("token_type", "Bearer"),
    )


class ServiceAccountTokenSource:
    """Mints tokens by exchanging a JWT signed with a service account key."""

    def __init__(self, account: ServiceAccount, scopes: list[str], token_uri: str | None = None) -> None:
        """Initialize the source.

        Args:
            account: The service account key.
            scopes: OAuth scopes to request.
            token_uri: Token endpoint override. Defaults to the one of the key file.

        """
        self._account = account
        self._scopes = scopes
        self._token_uri = token_uri or account.token_uri

    @property
    def account(self) -> ServiceAccount:
        """The service account key."""
        return self._account

    @property
    def service_account_email(self) -> str | None:
        """Email of the service account."""
        return self._account.client_email

    def build_assertion(self, now: datetime | None = None) -> str:
        """Build the signed JWT assertion exchanged for a token.

        Raises:
            ConfigurationError: If the private key cannot sign.

        """
        issued_at = now or datetime.now(UTC)
        claims = {
            "iss": self._account.client_email,
            "scope": " ".join(self._scopes),
            "aud": self._token_uri,
            "iat": issued_at,
            "exp": issued_at + ASSERTION_LIFETIME,
        }
        try:
            return jwt_encode(
                claims,
                key=self._account.private_key.get_secret_value(),
                algorithm="RS256",
                headers={"kid": self._account.private_key_id},
            )
        except (ValueError, TypeError, PyJWTError) as e:
            raise ConfigurationError(f"Private key of {self._account.client_email} cannot sign tokens") from e

    async def fetch_token(self, http_client: httpx.AsyncClient) -> Token:
        """Exchange a fresh assertion for a bearer token."""
        data = {"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": self.build_assertion()}
        try:
            response = await http_client.post(self._token_uri, data=data)
        except httpx.HTTPError as e:
            raise TransportError(f"Token endpoint {self._token_uri} is unreachable: {e}") from e

        return _token_from_response(response, self._token_uri)

    async def fetch_project_id(self, http_client: httpx.AsyncClient) -> str | None:  # noqa: ARG002
        """Project of the key file."""
        return self._account.project_id


class MetadataTokenSource:
    """Mints tokens through the metadata server of the platform the process runs on."""

    def __init__(self, metadata_root: str, scopes: list[str]) -> None:
        """Initialize the source.

        Args:
            metadata_root: The metadata server root, e.g. ``http://metadata.google.internal``.
            scopes: OAuth scopes to request.

        """
        self._metadata_root = metadata_root.rstrip("/")
        self._scopes = scopes
        self._reached = False

    @property
    def service_account_email(self) -> str | None:
        """Not known without asking the metadata server."""
        return None

    async def _get(
        self, http_client: httpx.AsyncClient, path: str, params: dict[str, str] | None = None
    ) -> httpx.Response:
        """GET a metadata path.

        Raises:
            ConfigurationError: If the metadata server has never answered, so there is no credential source.
            TransportError: If the metadata server answered before and now fails to.

        """
        url = f"{self._metadata_root}/computeMetadata/v1/{path}"
        try:
            response = await http_client.get(url, headers=METADATA_HEADERS, params=params)
        except httpx.HTTPError as e:
            if self._reached:
                raise TransportError(f"Metadata server {self._metadata_root} is unreachable: {e}") from e
            raise ConfigurationError(
                f"No service account file is configured and the metadata server is unreachable: {e}"
            ) from e
        self._reached = True
        return response

    async def fetch_token(self, http_client: httpx.AsyncClient) -> Token:
        """Ask the metadata server for a token of the default service account."""
        response = await self._get(
            http_client, "instance/service-accounts/default/token", params={"scopes": ",".join(self._scopes)}
        )
        return _token_from_response(response, "metadata server")

    async def fetch_project_id(self, http_client: httpx.AsyncClient) -> str | None:
        """Ask the metadata server for the project id."""
        response = await self._get(http_client, "project/project-id")
        if response.is_error:
            logger.warning("Metadata server answered %s for the project id", response.status_code)
            return None
        return response.text.strip() or None


class StaticTokenSource:
    """Hands out a fixed token. Meant for emulators and tests."""

    def __init__(
        self,
        access_token: str,
        lifetime: timedelta = timedelta(hours=1),
        project_id: str | None = None,
        service_account_email: str | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            access_token: The token to hand out.
            lifetime: How long each handed out token is considered valid.
            project_id: The project to report.
            service_account_email: The service account to report.

        """
        self._access_token = access_token
        self._lifetime = lifetime
        self._project_id = project_id
        self._service_account_email = service_account_email

    @property
    def service_account_email(self) -> str | None:
        """The configured service account email."""
        return self._service_account_email

    async def fetch_token(self, http_client: httpx.AsyncClient) -> Token:  # noqa: ARG002
        """Return the fixed token with a fresh expiry."""
        return Token(access_token=self._access_token, expires_at=datetime.now(UTC) + self._lifetime)

    async def fetch_project_id(self, http_client: httpx.AsyncClient) -> str | None:  # noqa: ARG002
        """The configured project."""
        return self._project_id


def resolve_token_source(config: StorageConfig) -> AbstractTokenSource:
    """Pick the credential source described by the config.

    A service account file wins over the metadata server.

    Raises:
        ConfigurationError: If no credential source is configured or the key file is unusable.

    """
    if config.credentials_path is not None:
        account = ServiceAccount.from_file(config.credentials_path)
        return ServiceAccountTokenSource(account, scopes=config.scopes, token_uri=config.token_uri)

    if config.use_metadata_server:
        logger.info("No service account file configured, using the metadata server at %s", config.metadata_root)
        return MetadataTokenSource(config.metadata_root, scopes=config.scopes)

    raise ConfigurationError(
        "No credentials configured: set SERVICE_ACCOUNT or GOOGLE_APPLICATION_CREDENTIALS, "
        "or enable the metadata server"
    )
