"""Owner-scoped reads of stored articles."""

from __future__ import annotations

import typing as typ

from prscribe.errors import AccessDeniedError, ArticleNotFoundError

if typ.TYPE_CHECKING:
    from prscribe.identity import Identity
    from prscribe.storage.models import ArticleRecord
    from prscribe.storage.protocol import ArticleStore


class ArticleQueryService:
    """List and fetch articles on behalf of their owner."""

    def __init__(self, store: ArticleStore) -> None:
        """Configure the service with its article store."""
        self._store = store

    def list_for_owner(self, identity: Identity) -> list[ArticleRecord]:
        """Return the caller's articles, newest first."""
        articles = self._store.list_by_owner(identity.user_id)
        return sorted(articles, key=lambda a: (a.created_at, a.id), reverse=True)

    def get_owned(self, identity: Identity, article_id: str) -> ArticleRecord:
        """Return ``article_id`` if the caller owns it.

        Raises
        ------
        ArticleNotFoundError
            If no article has ``article_id``.
        AccessDeniedError
            If the article belongs to another user.

        """
        article = self._store.get(article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)
        if article.owner_user_id != identity.user_id:
            raise AccessDeniedError("article", article_id)
        return article
