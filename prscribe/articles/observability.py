"""Emit structured observability events for article generation.

``ArticleGenerationService`` reports start, PR-source selection, success,
and failure through :class:`ArticleEventLogger`.

Usage
-----
>>> event_logger = ArticleEventLogger()
>>> event_logger.log_generation_started(
...     user_id="1001",
...     repo_slug="acme/widgets",
...     pull_request_count=2,
... )

"""

from __future__ import annotations

import enum
import typing as typ

from prscribe.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from prscribe.writer.metrics import ModelInvocationMetrics

logger = get_logger(__name__)


class ArticleEventType(enum.StrEnum):
    """Structured log event types for article generation."""

    GENERATION_STARTED = "articles.generation.started"
    CACHE_HIT = "articles.pulls.cache_hit"
    CACHE_MISS = "articles.pulls.cache_miss"
    PULLS_UNMATCHED = "articles.pulls.unmatched"
    GENERATION_COMPLETED = "articles.generation.completed"
    GENERATION_FAILED = "articles.generation.failed"


class ArticleEventLogger:
    """Emit structured article generation events via femtologging."""

    def log_generation_started(
        self,
        *,
        user_id: str,
        repo_slug: str,
        pull_request_count: int,
    ) -> None:
        """Log the start of one article generation."""
        log_info(
            logger,
            "[%s] user_id=%s repo_slug=%s pull_request_count=%d",
            ArticleEventType.GENERATION_STARTED,
            user_id,
            repo_slug,
            pull_request_count,
        )

    def log_cache_hit(self, *, repository_id: str, pull_request_count: int) -> None:
        """Log that the selection was served from the PR cache."""
        log_info(
            logger,
            "[%s] repository_id=%s pull_request_count=%d",
            ArticleEventType.CACHE_HIT,
            repository_id,
            pull_request_count,
        )

    def log_cache_miss(self, *, repo_slug: str, reason: str) -> None:
        """Log that the selection has to be fetched from GitHub.

        Parameters
        ----------
        repo_slug
            Repository slug in ``owner/name`` format.
        reason
            ``no_repository_id``, ``absent_or_stale``, or ``incomplete``.

        """
        log_info(
            logger,
            "[%s] repo_slug=%s reason=%s",
            ArticleEventType.CACHE_MISS,
            repo_slug,
            reason,
        )

    def log_pulls_unmatched(
        self, *, repo_slug: str, pull_request_ids: cabc.Iterable[int]
    ) -> None:
        """Log selected ids that matched no merged pull request upstream."""
        log_warning(
            logger,
            "[%s] repo_slug=%s pull_request_ids=%s",
            ArticleEventType.PULLS_UNMATCHED,
            repo_slug,
            ",".join(str(pr_id) for pr_id in pull_request_ids),
        )

    def log_generation_completed(
        self,
        *,
        article_id: str,
        repo_slug: str,
        writer: str,
        metrics: ModelInvocationMetrics | None,
    ) -> None:
        """Log a stored article with the writer's token counts.

        Parameters
        ----------
        article_id
            Identifier of the stored article.
        repo_slug
            Repository slug in ``owner/name`` format.
        writer
            Writer model identifier.
        metrics
            Metrics from the writer's last invocation, if it reports any.

        """
        total_tokens = metrics.total_tokens if metrics is not None else None
        log_info(
            logger,
            "[%s] article_id=%s repo_slug=%s writer=%s total_tokens=%s",
            ArticleEventType.GENERATION_COMPLETED,
            article_id,
            repo_slug,
            writer,
            total_tokens,
        )

    def log_generation_failed(
        self,
        *,
        repo_slug: str,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a failed generation with error details."""
        log_error(
            logger,
            "[%s] repo_slug=%s duration_seconds=%.3f error_type=%s error_message=%s",
            ArticleEventType.GENERATION_FAILED,
            repo_slug,
            duration.total_seconds(),
            type(error).__name__,
            str(error),
            exc_info=error,
        )
