"""GitHub REST gateway for pull request data.

Every request goes through a shared :class:`RetryExecutor`, so transient
429/502/503 responses are retried with backoff before surfacing as
:class:`GitHubAPIError`. Credentials are per user: build one
:class:`GitHubRestClient` per request through :class:`GitHubClientFactory`,
which shares a single pooled ``httpx.AsyncClient`` between them.
"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import dataclasses
import datetime as dt  # noqa: TC003
import os
import typing as typ

import httpx
import msgspec

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import (
    PullRequestCommit,
    PullRequestDetail,
    PullRequestFile,
    PullRequestSummary,
)
from .retry import RetryExecutor, RetryPolicy

PullRequestState = typ.Literal["open", "closed", "all"]

_HTTP_ERROR_STATUS_THRESHOLD = 400
_PAGE_SIZE = 50
_API_VERSION = "2022-11-28"


class PullRequestGateway(typ.Protocol):
    """Read-only pull request operations against the PR provider."""

    async def list_pull_requests(
        self, owner: str, name: str, *, state: PullRequestState = "closed"
    ) -> list[PullRequestSummary]:
        """Return merged PRs for ``state``, most recently updated first."""
        ...

    async def get_pull_request(
        self, owner: str, name: str, number: int
    ) -> PullRequestSummary:
        """Return one PR including its change statistics."""
        ...

    async def list_pull_request_files(
        self, owner: str, name: str, number: int
    ) -> list[PullRequestFile]:
        """Return the changed files of one PR."""
        ...

    async def list_pull_request_commits(
        self, owner: str, name: str, number: int
    ) -> list[PullRequestCommit]:
        """Return the commits of one PR."""
        ...

    async def get_pull_requests_by_numbers(
        self, owner: str, name: str, numbers: cabc.Sequence[int]
    ) -> list[PullRequestDetail]:
        """Return detail plus files for each number, in input order."""
        ...


GatewayFactory = cabc.Callable[[str], PullRequestGateway]


def _read_float(
    env_var: str, default: float | None, *, allow_zero: bool = False
) -> float | None:
    raw = os.environ.get(env_var, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise GitHubConfigError.invalid_value(
            env_var, raw, "Must be a number"
        ) from exc
    if allow_zero and value < 0:
        raise GitHubConfigError.invalid_value(env_var, raw, "Must not be negative")
    if not allow_zero and value <= 0:
        raise GitHubConfigError.invalid_value(env_var, raw, "Must be positive")
    return value


def _read_positive_int(env_var: str, default: int) -> int:
    raw = os.environ.get(env_var, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise GitHubConfigError.invalid_value(
            env_var, raw, "Must be an integer"
        ) from exc
    if value < 1:
        raise GitHubConfigError.invalid_value(env_var, raw, "Must be positive")
    return value


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST gateway.

    Attributes
    ----------
    api_url
        Base URL of the REST API (GitHub Enterprise hosts differ).
    timeout_s
        HTTP client timeout applied to every request.
    user_agent
        ``User-Agent`` header value; GitHub rejects requests without one.
    page_size
        Fixed ``per_page`` value; only the first page is read.
    max_attempts
        Total attempts per request, including the first.
    initial_delay_s
        Backoff before the first retry.
    attempt_timeout_s
        Optional deadline for each attempt on top of ``timeout_s``.

    """

    api_url: str = "https://api.github.com"
    timeout_s: float = 20.0
    user_agent: str = "prscribe/0.1"
    page_size: int = _PAGE_SIZE
    max_attempts: int = 3
    initial_delay_s: float = 1.0
    attempt_timeout_s: float | None = None

    @property
    def retry_policy(self) -> RetryPolicy:
        """Return the retry policy described by this configuration."""
        return RetryPolicy(
            max_attempts=self.max_attempts,
            initial_delay_s=self.initial_delay_s,
            attempt_timeout_s=self.attempt_timeout_s,
        )

    @classmethod
    def from_env(cls) -> GitHubRestConfig:
        """Build configuration from ``PRSCRIBE_GITHUB_*`` variables.

        Reads ``PRSCRIBE_GITHUB_API_URL``, ``PRSCRIBE_GITHUB_TIMEOUT_S``,
        ``PRSCRIBE_GITHUB_MAX_ATTEMPTS``, ``PRSCRIBE_GITHUB_RETRY_DELAY_S``,
        and ``PRSCRIBE_GITHUB_ATTEMPT_TIMEOUT_S``; unset values keep their
        defaults.

        Raises
        ------
        GitHubConfigError
            If a numeric variable is malformed or out of range.

        """
        defaults = cls()
        api_url = os.environ.get("PRSCRIBE_GITHUB_API_URL", "").strip()
        timeout_s = _read_float("PRSCRIBE_GITHUB_TIMEOUT_S", defaults.timeout_s)
        initial_delay_s = _read_float(
            "PRSCRIBE_GITHUB_RETRY_DELAY_S", defaults.initial_delay_s, allow_zero=True
        )
        return cls(
            api_url=api_url.rstrip("/") or defaults.api_url,
            timeout_s=timeout_s if timeout_s is not None else defaults.timeout_s,
            max_attempts=_read_positive_int(
                "PRSCRIBE_GITHUB_MAX_ATTEMPTS", defaults.max_attempts
            ),
            initial_delay_s=(
                initial_delay_s
                if initial_delay_s is not None
                else defaults.initial_delay_s
            ),
            attempt_timeout_s=_read_float("PRSCRIBE_GITHUB_ATTEMPT_TIMEOUT_S", None),
        )


class _UserPayload(msgspec.Struct):
    login: str | None = None


class _PullRequestPayload(msgspec.Struct, kw_only=True):
    id: int
    number: int
    title: str
    html_url: str
    body: str | None = None
    merged_at: dt.datetime | None = None
    user: _UserPayload | None = None
    additions: int | None = None
    deletions: int | None = None
    changed_files: int | None = None

    def to_summary(self) -> PullRequestSummary:
        return PullRequestSummary(
            id=self.id,
            number=self.number,
            title=self.title,
            html_url=self.html_url,
            body=self.body,
            merged_at=self.merged_at,
            author_login=self.user.login if self.user else None,
            additions=self.additions,
            deletions=self.deletions,
            changed_files=self.changed_files,
        )


class _FilePayload(msgspec.Struct, kw_only=True):
    filename: str
    status: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: str | None = None


class _CommitAuthorPayload(msgspec.Struct):
    name: str | None = None


class _CommitBodyPayload(msgspec.Struct):
    message: str = ""
    author: _CommitAuthorPayload | None = None


class _CommitPayload(msgspec.Struct):
    sha: str
    commit: _CommitBodyPayload


def _merged_only(pulls: cabc.Iterable[PullRequestSummary]) -> list[PullRequestSummary]:
    """Keep PRs with a merge timestamp.

    GitHub's ``state`` parameter has no ``merged`` value, so the listing asks
    for ``state`` as given and filters here.
    """
    return [pr for pr in pulls if pr.is_merged]


def _file_from_payload(payload: _FilePayload) -> PullRequestFile:
    return PullRequestFile(
        filename=payload.filename,
        status=payload.status,
        additions=payload.additions,
        deletions=payload.deletions,
        changes=payload.changes,
        patch=payload.patch,
    )


def _commit_from_payload(payload: _CommitPayload) -> PullRequestCommit:
    author = payload.commit.author
    return PullRequestCommit(
        sha=payload.sha,
        message=payload.commit.message,
        author_name=author.name if author else None,
    )


def _with_files(
    summary: PullRequestSummary, files: cabc.Sequence[PullRequestFile]
) -> PullRequestDetail:
    return PullRequestDetail(**msgspec.structs.asdict(summary), files=tuple(files))


def _first_failure[T](gathered: list[T | BaseException]) -> list[T]:
    """Return gathered results, raising the first failure in input order.

    System-level exceptions (e.g., ``KeyboardInterrupt``) are re-raised ahead
    of ordinary failures.
    """
    for result in gathered:
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
    for result in gathered:
        if isinstance(result, Exception):
            raise result
    return typ.cast("list[T]", gathered)


class GitHubRestClient:
    """GitHub REST implementation of :class:`PullRequestGateway`.

    Parameters
    ----------
    config
        Gateway configuration.
    token
        Bearer credential of the user the calls are made for.
    http_client
        Optional shared ``httpx.AsyncClient``. When omitted, the instance
        creates and owns its own client.
    retry_executor
        Optional executor; defaults to one built from ``config``.

    """

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        token: str,
        http_client: httpx.AsyncClient | None = None,
        retry_executor: RetryExecutor | None = None,
    ) -> None:
        """Initialise the client for a single user's credential."""
        if not token.strip():
            raise GitHubConfigError.empty_token()

        self._config = config
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": _API_VERSION,
            "User-Agent": config.user_agent,
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._retry = retry_executor or RetryExecutor(config.retry_policy)

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def list_pull_requests(
        self, owner: str, name: str, *, state: PullRequestState = "closed"
    ) -> list[PullRequestSummary]:
        """Return merged PRs of one page, most recently updated first.

        The ``state`` is passed to GitHub unchanged; the merged-only filter
        is applied afterwards regardless of its value.
        """
        payloads = await self._get(
            f"/repos/{owner}/{name}/pulls",
            list[_PullRequestPayload],
            params={
                "state": state,
                "sort": "updated",
                "direction": "desc",
                "per_page": self._config.page_size,
            },
        )
        return _merged_only(payload.to_summary() for payload in payloads)

    async def get_pull_request(
        self, owner: str, name: str, number: int
    ) -> PullRequestSummary:
        """Return one PR including additions, deletions, and changed files."""
        payload = await self._get(
            f"/repos/{owner}/{name}/pulls/{number}", _PullRequestPayload
        )
        return payload.to_summary()

    async def list_pull_request_files(
        self, owner: str, name: str, number: int
    ) -> list[PullRequestFile]:
        """Return the first page of changed files for one PR."""
        payloads = await self._get(
            f"/repos/{owner}/{name}/pulls/{number}/files",
            list[_FilePayload],
            params={"per_page": self._config.page_size},
        )
        return [_file_from_payload(payload) for payload in payloads]

    async def list_pull_request_commits(
        self, owner: str, name: str, number: int
    ) -> list[PullRequestCommit]:
        """Return the first page of commits for one PR."""
        payloads = await self._get(
            f"/repos/{owner}/{name}/pulls/{number}/commits",
            list[_CommitPayload],
            params={"per_page": self._config.page_size},
        )
        return [_commit_from_payload(payload) for payload in payloads]

    async def get_pull_requests_by_numbers(
        self, owner: str, name: str, numbers: cabc.Sequence[int]
    ) -> list[PullRequestDetail]:
        """Fetch detail and files for every number concurrently.

        Results follow the order of ``numbers``. The batch is all-or-nothing:
        once every fetch has settled, the first failure (in input order) is
        raised unchanged and no partial list is returned.
        """
        gathered = await asyncio.gather(
            *(self._fetch_detail(owner, name, number) for number in numbers),
            return_exceptions=True,
        )
        return _first_failure(gathered)

    async def _fetch_detail(
        self, owner: str, name: str, number: int
    ) -> PullRequestDetail:
        summary, files = _first_failure(
            await asyncio.gather(
                self.get_pull_request(owner, name, number),
                self.list_pull_request_files(owner, name, number),
                return_exceptions=True,
            )
        )
        return _with_files(
            typ.cast("PullRequestSummary", summary),
            typ.cast("list[PullRequestFile]", files),
        )

    async def _get[T](
        self,
        path: str,
        response_type: type[T],
        *,
        params: dict[str, str | int] | None = None,
    ) -> T:
        """GET ``path`` under the retry policy and decode the JSON body."""

        async def _request() -> bytes:
            try:
                response = await self._client.get(
                    f"{self._config.api_url}{path}",
                    params=params,
                    headers=self._headers,
                )
            except httpx.TimeoutException as exc:
                raise GitHubAPIError.timeout(path) from exc
            except httpx.RequestError as exc:
                raise GitHubAPIError.network_error(path, str(exc)) from exc
            if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
                raise GitHubAPIError.http_error(response.status_code, path)
            return response.content

        body = await self._retry.execute(_request, description=f"GET {path}")
        try:
            return msgspec.json.decode(body, type=response_type)
        except msgspec.DecodeError as exc:
            raise GitHubResponseShapeError.missing(f"{path}: {exc}") from exc


class GitHubClientFactory:
    """Build per-user :class:`GitHubRestClient` instances on a shared pool.

    The factory owns the pooled ``httpx.AsyncClient`` (unless one is passed
    in) and a single :class:`RetryExecutor`; call :meth:`aclose` on shutdown.
    """

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        retry_executor: RetryExecutor | None = None,
    ) -> None:
        """Initialise the shared transport and retry policy."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._retry = retry_executor or RetryExecutor(config.retry_policy)

    def __call__(self, token: str) -> GitHubRestClient:
        """Return a gateway that authenticates as the holder of ``token``."""
        return GitHubRestClient(
            self._config,
            token=token,
            http_client=self._client,
            retry_executor=self._retry,
        )

    async def aclose(self) -> None:
        """Close the shared HTTP client when owned."""
        if self._owns_client:
            await self._client.aclose()
