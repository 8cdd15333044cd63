"""Identity provider backed by the GitHub ``/user`` endpoint.

The bearer credential a client presents is a GitHub token. The provider asks
GitHub who owns it and uses the numeric account id as the user id, so the
same person keeps the same id across tokens.
"""

from __future__ import annotations

import typing as typ

import httpx
import msgspec

from prscribe.errors import AuthenticationError
from prscribe.identity import Identity

from .errors import GitHubAPIError, GitHubResponseShapeError
from .retry import RetryExecutor

if typ.TYPE_CHECKING:
    from .client import GitHubRestConfig

_HTTP_UNAUTHORIZED = 401
_HTTP_FORBIDDEN = 403
_HTTP_ERROR_STATUS_THRESHOLD = 400


class _AuthenticatedUserPayload(msgspec.Struct):
    id: int
    login: str | None = None


class GitHubIdentityProvider:
    """Resolve GitHub tokens into :class:`Identity` values."""

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        retry_executor: RetryExecutor | None = None,
    ) -> None:
        """Initialise with gateway configuration and an optional client."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._retry = retry_executor or RetryExecutor(config.retry_policy)

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def authenticate(self, credential: str) -> Identity:
        """Return the identity that owns ``credential``.

        Raises
        ------
        AuthenticationError
            If the credential is blank or GitHub answers 401/403.
        GitHubAPIError
            For other upstream failures once retries are exhausted.

        """
        token = credential.strip()
        if not token:
            raise AuthenticationError.missing_credentials()

        try:
            body = await self._retry.execute(
                lambda: self._fetch_user(token), description="GET /user"
            )
        except GitHubAPIError as exc:
            if exc.status_code in {_HTTP_UNAUTHORIZED, _HTTP_FORBIDDEN}:
                raise AuthenticationError.invalid_credentials() from exc
            raise

        try:
            user = msgspec.json.decode(body, type=_AuthenticatedUserPayload)
        except msgspec.DecodeError as exc:
            raise GitHubResponseShapeError.missing("/user: id") from exc
        return Identity(user_id=str(user.id), github_token=token, login=user.login)

    async def _fetch_user(self, token: str) -> bytes:
        try:
            response = await self._client.get(
                f"{self._config.api_url}/user",
                headers={
                    "Authorization": f"Bearer {token}",
                    "Accept": "application/vnd.github+json",
                    "User-Agent": self._config.user_agent,
                },
            )
        except httpx.TimeoutException as exc:
            raise GitHubAPIError.timeout("/user") from exc
        except httpx.RequestError as exc:
            raise GitHubAPIError.network_error("/user", str(exc)) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(response.status_code, "/user")
        return response.content
