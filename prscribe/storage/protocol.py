"""Store interfaces used by the prscribe services.

Services depend on these protocols rather than on the in-memory classes, so
a durable backend can replace them without touching orchestration code.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from prscribe.github.models import PullRequestSummary
    from prscribe.storage.models import ArticleRecord, RepositoryRecord


@typ.runtime_checkable
class RepositoryStore(typ.Protocol):
    """Registered repositories keyed by id."""

    def get(self, repository_id: str) -> RepositoryRecord | None:
        """Return the repository with ``repository_id``, if any."""
        ...

    def put(self, record: RepositoryRecord) -> None:
        """Insert or replace ``record``."""
        ...

    def list_by_owner(self, owner_user_id: str) -> list[RepositoryRecord]:
        """Return the user's repositories in registration order."""
        ...


@typ.runtime_checkable
class ArticleStore(typ.Protocol):
    """Generated articles keyed by id."""

    def get(self, article_id: str) -> ArticleRecord | None:
        """Return the article with ``article_id``, if any."""
        ...

    def put(self, record: ArticleRecord) -> None:
        """Insert or replace ``record``."""
        ...

    def list_by_owner(self, owner_user_id: str) -> list[ArticleRecord]:
        """Return the user's articles in creation order."""
        ...


@typ.runtime_checkable
class PullRequestCacheStore(typ.Protocol):
    """Short-lived merged-PR listings keyed by repository id."""

    def get(self, repository_id: str) -> list[PullRequestSummary] | None:
        """Return the fresh cached listing, or ``None`` when absent or stale."""
        ...

    def put(
        self,
        repository_id: str,
        pull_requests: cabc.Sequence[PullRequestSummary],
    ) -> None:
        """Replace the listing for ``repository_id``."""
        ...
