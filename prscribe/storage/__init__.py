"""Process-lifetime stores for repositories, articles, and PR listings."""

from __future__ import annotations

from .cache import DEFAULT_CACHE_TTL, InMemoryPullRequestCache
from .memory import InMemoryArticleStore, InMemoryRepositoryStore
from .models import ArticleRecord, PullRequestCacheEntry, RepositoryRecord
from .protocol import ArticleStore, PullRequestCacheStore, RepositoryStore

__all__ = [
    "DEFAULT_CACHE_TTL",
    "ArticleRecord",
    "ArticleStore",
    "InMemoryArticleStore",
    "InMemoryPullRequestCache",
    "InMemoryRepositoryStore",
    "PullRequestCacheEntry",
    "PullRequestCacheStore",
    "RepositoryRecord",
    "RepositoryStore",
]
