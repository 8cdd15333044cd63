"""Article generation and retrieval."""

from __future__ import annotations

from .observability import ArticleEventLogger, ArticleEventType
from .queries import ArticleQueryService
from .service import (
    ArticleGenerationResult,
    ArticleGenerationService,
    ArticleServiceDependencies,
)

__all__ = [
    "ArticleEventLogger",
    "ArticleEventType",
    "ArticleGenerationResult",
    "ArticleGenerationService",
    "ArticleQueryService",
    "ArticleServiceDependencies",
]
