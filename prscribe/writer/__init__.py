"""Article writers turning pull request data into blog posts."""

from __future__ import annotations

from .config import OpenAIArticleWriterConfig
from .errors import (
    ArticleWriterAPIError,
    ArticleWriterError,
    ArticleWriterInputError,
    ArticleWriterResponseShapeError,
    OpenAIConfigError,
    WriterBackendConfigError,
)
from .factory import create_article_writer
from .metrics import ModelInvocationMetrics
from .mock import MockArticleWriter
from .openai_client import OpenAIArticleWriter
from .protocol import ArticleWriter

__all__ = [
    "ArticleWriter",
    "ArticleWriterAPIError",
    "ArticleWriterError",
    "ArticleWriterInputError",
    "ArticleWriterResponseShapeError",
    "MockArticleWriter",
    "ModelInvocationMetrics",
    "OpenAIArticleWriter",
    "OpenAIArticleWriterConfig",
    "OpenAIConfigError",
    "WriterBackendConfigError",
    "create_article_writer",
]
