"""Article generation from selected pull requests.

This module provides :class:`ArticleGenerationService`, which coordinates:

1. Resolving the repository, either a registered one owned by the caller or
   a raw ``owner/repo`` reference
2. Reading the selected pull requests from the PR cache when every id is
   present, otherwise fetching them from GitHub
3. Asking the article writer for content and then a title
4. Storing the article

Nothing is stored unless every step succeeds.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import time
import typing as typ

from prscribe.common.ids import new_article_id
from prscribe.common.slug import parse_repo_slug, repo_slug
from prscribe.common.time import utcnow
from prscribe.errors import InvalidInputError, NoValidPullRequestsError
from prscribe.registry.service import require_owned_repository
from prscribe.storage.models import ArticleRecord

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from prscribe.articles.observability import ArticleEventLogger
    from prscribe.common.time import Clock
    from prscribe.github.client import GatewayFactory
    from prscribe.github.models import PullRequestSummary
    from prscribe.identity import Identity
    from prscribe.storage.protocol import (
        ArticleStore,
        PullRequestCacheStore,
        RepositoryStore,
    )
    from prscribe.writer.protocol import ArticleWriter


@dc.dataclass(frozen=True, slots=True)
class ArticleServiceDependencies:
    """Core collaborators of :class:`ArticleGenerationService`.

    Attributes
    ----------
    repositories
        Registered repositories, for ownership checks.
    articles
        Destination for generated articles.
    cache
        PR cache consulted before calling GitHub.
    gateway_factory
        Builds a GitHub gateway bound to the caller's token.
    writer
        Language model article writer.

    """

    repositories: RepositoryStore
    articles: ArticleStore
    cache: PullRequestCacheStore
    gateway_factory: GatewayFactory
    writer: ArticleWriter


@dc.dataclass(frozen=True, slots=True)
class ArticleGenerationResult:
    """Stored article plus the pull requests it was written from."""

    article: ArticleRecord
    pull_requests: tuple[PullRequestSummary, ...]


@dc.dataclass(frozen=True, slots=True)
class _RepositoryRef:
    owner: str
    repo: str
    repository_id: str | None = None

    @property
    def slug(self) -> str:
        return repo_slug(self.owner, self.repo)


def _select_cached(
    cached: cabc.Sequence[PullRequestSummary],
    pull_request_ids: cabc.Sequence[int],
) -> list[PullRequestSummary] | None:
    """Return the requested PRs in request order if all are cached."""
    by_id = {pr.id: pr for pr in cached}
    if any(pr_id not in by_id for pr_id in pull_request_ids):
        return None
    return [by_id[pr_id] for pr_id in pull_request_ids]


class ArticleGenerationService:
    """Generate and store articles for a user's pull request selection.

    Parameters
    ----------
    dependencies
        Stores, cache, gateway factory, and writer.
    clock
        Source of article timestamps.
    event_logger
        Optional structured event logger for generation lifecycle events.

    """

    def __init__(
        self,
        dependencies: ArticleServiceDependencies,
        *,
        clock: Clock = utcnow,
        event_logger: ArticleEventLogger | None = None,
    ) -> None:
        """Configure the service with dependencies."""
        self._repositories = dependencies.repositories
        self._articles = dependencies.articles
        self._cache = dependencies.cache
        self._gateway_factory = dependencies.gateway_factory
        self._writer = dependencies.writer
        self._clock = clock
        self._event_logger = event_logger

    def _log_to_event_logger(
        self,
        event_method_name: str,
        **kwargs: typ.Any,  # noqa: ANN401
    ) -> None:
        """Delegate to an event logger method if the logger is configured."""
        if self._event_logger is None:
            return
        method = getattr(self._event_logger, event_method_name)
        method(**kwargs)

    async def generate(
        self,
        identity: Identity,
        pull_request_ids: cabc.Sequence[int],
        *,
        repository_id: str | None = None,
        repository_name: str | None = None,
        custom_prompt: str | None = None,
    ) -> ArticleGenerationResult:
        """Generate, store, and return an article.

        Parameters
        ----------
        identity
            Authenticated caller; becomes the article owner.
        pull_request_ids
            Selected PR ids in the order the article should cover them.
        repository_id
            Registered repository id. Takes precedence over
            ``repository_name``.
        repository_name
            Raw ``owner/repo`` reference used when no id is given.
        custom_prompt
            Optional writer instructions replacing the default requirements.

        Raises
        ------
        InvalidInputError
            If the selection is empty, no repository reference is usable, or
            none of the selected ids resolve upstream.
        RepositoryNotFoundError
            If ``repository_id`` is not registered.
        AccessDeniedError
            If another user registered ``repository_id``.
        GitHubAPIError
            If fetching pull requests fails after retries.
        ArticleWriterError
            If the writer fails.

        """
        if not pull_request_ids:
            raise InvalidInputError(
                "pull request ids are required", field="pullRequestIds"
            )
        ref = self._resolve_repository(identity, repository_id, repository_name)

        started_at = time.monotonic()
        self._log_to_event_logger(
            "log_generation_started",
            user_id=identity.user_id,
            repo_slug=ref.slug,
            pull_request_count=len(pull_request_ids),
        )
        try:
            result = await self._generate_and_store(
                identity, ref, pull_request_ids, custom_prompt
            )
        except Exception as exc:
            duration = dt.timedelta(seconds=time.monotonic() - started_at)
            self._log_to_event_logger(
                "log_generation_failed",
                repo_slug=ref.slug,
                error=exc,
                duration=duration,
            )
            raise
        self._log_to_event_logger(
            "log_generation_completed",
            article_id=result.article.id,
            repo_slug=ref.slug,
            writer=self._get_writer_identifier(),
            metrics=getattr(self._writer, "last_invocation_metrics", None),
        )
        return result

    def _resolve_repository(
        self,
        identity: Identity,
        repository_id: str | None,
        repository_name: str | None,
    ) -> _RepositoryRef:
        if repository_id:
            record = require_owned_repository(
                self._repositories, identity, repository_id
            )
            return _RepositoryRef(record.owner, record.repo, record.id)

        if not repository_name:
            raise InvalidInputError(
                "repository id or owner/repo name is required",
                field="repositoryName",
            )
        try:
            owner, repo = parse_repo_slug(repository_name)
        except ValueError as exc:
            raise InvalidInputError(str(exc), field="repositoryName") from exc
        return _RepositoryRef(owner, repo)

    async def _generate_and_store(
        self,
        identity: Identity,
        ref: _RepositoryRef,
        pull_request_ids: cabc.Sequence[int],
        custom_prompt: str | None,
    ) -> ArticleGenerationResult:
        pulls = self._read_cache(ref, pull_request_ids)
        if pulls is None:
            pulls = await self._fetch_upstream(identity, ref, pull_request_ids)

        content = await self._writer.generate_content(pulls, ref.slug, custom_prompt)
        title = await self._writer.generate_title(content)

        now = self._clock()
        article = ArticleRecord(
            id=new_article_id(),
            title=title,
            content=content,
            repository_id=ref.repository_id,
            repository_name=ref.slug,
            owner_user_id=identity.user_id,
            pull_request_ids=tuple(pull_request_ids),
            created_at=now,
            updated_at=now,
        )
        self._articles.put(article)
        return ArticleGenerationResult(article=article, pull_requests=tuple(pulls))

    def _read_cache(
        self,
        ref: _RepositoryRef,
        pull_request_ids: cabc.Sequence[int],
    ) -> list[PullRequestSummary] | None:
        """Return the selection from the cache, or ``None`` on any miss."""
        if ref.repository_id is None:
            self._log_to_event_logger(
                "log_cache_miss", repo_slug=ref.slug, reason="no_repository_id"
            )
            return None

        cached = self._cache.get(ref.repository_id)
        if not cached:
            self._log_to_event_logger(
                "log_cache_miss", repo_slug=ref.slug, reason="absent_or_stale"
            )
            return None

        selected = _select_cached(cached, pull_request_ids)
        if selected is None:
            self._log_to_event_logger(
                "log_cache_miss", repo_slug=ref.slug, reason="incomplete"
            )
            return None

        self._log_to_event_logger(
            "log_cache_hit",
            repository_id=ref.repository_id,
            pull_request_count=len(selected),
        )
        return selected

    async def _fetch_upstream(
        self,
        identity: Identity,
        ref: _RepositoryRef,
        pull_request_ids: cabc.Sequence[int],
    ) -> list[PullRequestSummary]:
        """Map ids to PR numbers via a full listing, then fetch details."""
        gateway = self._gateway_factory(identity.github_token)
        listing = await gateway.list_pull_requests(ref.owner, ref.repo, state="all")
        numbers_by_id = {pr.id: pr.number for pr in listing}

        numbers = [numbers_by_id[i] for i in pull_request_ids if i in numbers_by_id]
        unmatched = [i for i in pull_request_ids if i not in numbers_by_id]
        if unmatched:
            self._log_to_event_logger(
                "log_pulls_unmatched", repo_slug=ref.slug, pull_request_ids=unmatched
            )
        if not numbers:
            raise NoValidPullRequestsError(ref.slug)

        details = await gateway.get_pull_requests_by_numbers(
            ref.owner, ref.repo, numbers
        )
        return list(details)

    def _get_writer_identifier(self) -> str:
        """Return the model name the writer is configured with."""
        config = getattr(self._writer, "config", None)
        model = getattr(config, "model", None)
        if model is not None:
            return str(model)
        return type(self._writer).__name__
