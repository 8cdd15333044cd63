"""Factory for creating ArticleWriter implementations from the environment."""

from __future__ import annotations

import os
import typing as typ

from prscribe.writer.errors import WriterBackendConfigError
from prscribe.writer.mock import MockArticleWriter

if typ.TYPE_CHECKING:
    from prscribe.writer.protocol import ArticleWriter

VALID_BACKENDS = frozenset({"mock", "openai"})


def create_article_writer() -> ArticleWriter:
    """Create an ArticleWriter based on environment configuration.

    Reads ``PRSCRIBE_WRITER_BACKEND`` (``mock`` or ``openai``). The
    ``openai`` backend additionally reads the ``PRSCRIBE_OPENAI_*``
    variables documented on
    :meth:`~prscribe.writer.config.OpenAIArticleWriterConfig.from_env`.

    Raises
    ------
    WriterBackendConfigError
        If the backend variable is missing or names an unknown backend.
    OpenAIConfigError
        If the OpenAI backend is selected without an API key.

    Examples
    --------
    >>> import os
    >>> os.environ["PRSCRIBE_WRITER_BACKEND"] = "mock"
    >>> isinstance(create_article_writer(), MockArticleWriter)
    True

    """
    raw_backend = os.environ.get("PRSCRIBE_WRITER_BACKEND")
    if raw_backend is None:
        raise WriterBackendConfigError.missing_backend()

    backend = raw_backend.strip().lower()
    if backend not in VALID_BACKENDS:
        raise WriterBackendConfigError.invalid_backend(raw_backend, VALID_BACKENDS)

    if backend == "mock":
        return MockArticleWriter()

    from prscribe.writer.config import OpenAIArticleWriterConfig
    from prscribe.writer.openai_client import OpenAIArticleWriter

    return OpenAIArticleWriter(OpenAIArticleWriterConfig.from_env())
