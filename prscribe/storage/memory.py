"""Process-lifetime implementations of the repository and article stores."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from prscribe.storage.models import ArticleRecord, RepositoryRecord


class InMemoryRepositoryStore:
    """Dict-backed :class:`~prscribe.storage.protocol.RepositoryStore`."""

    def __init__(self) -> None:
        """Start with no repositories."""
        self._records: dict[str, RepositoryRecord] = {}

    def get(self, repository_id: str) -> RepositoryRecord | None:
        """Return the repository with ``repository_id``, if any."""
        return self._records.get(repository_id)

    def put(self, record: RepositoryRecord) -> None:
        """Insert or replace ``record``."""
        self._records[record.id] = record

    def list_by_owner(self, owner_user_id: str) -> list[RepositoryRecord]:
        """Return the user's repositories in registration order."""
        return [r for r in self._records.values() if r.owner_user_id == owner_user_id]


class InMemoryArticleStore:
    """Dict-backed :class:`~prscribe.storage.protocol.ArticleStore`."""

    def __init__(self) -> None:
        """Start with no articles."""
        self._records: dict[str, ArticleRecord] = {}

    def get(self, article_id: str) -> ArticleRecord | None:
        """Return the article with ``article_id``, if any."""
        return self._records.get(article_id)

    def put(self, record: ArticleRecord) -> None:
        """Insert or replace ``record``."""
        self._records[record.id] = record

    def list_by_owner(self, owner_user_id: str) -> list[ArticleRecord]:
        """Return the user's articles in creation order."""
        return [a for a in self._records.values() if a.owner_user_id == owner_user_id]
