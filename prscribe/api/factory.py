"""Build the application's services from environment configuration.

All stores are in-memory and live as long as the process. One pooled
``httpx.AsyncClient`` serves GitHub calls for every user; it is closed via
the app's shutdown hooks.

Usage
-----
Build dependencies for the API layer::

    from prscribe.api.factory import build_app_dependencies

    app = create_app(build_app_dependencies())

"""

from __future__ import annotations

import httpx

from prscribe.api.app import AppDependencies
from prscribe.articles import (
    ArticleEventLogger,
    ArticleGenerationService,
    ArticleQueryService,
    ArticleServiceDependencies,
)
from prscribe.github import (
    GitHubClientFactory,
    GitHubIdentityProvider,
    GitHubRestConfig,
    RetryExecutor,
)
from prscribe.pulls import PullRequestListingService
from prscribe.registry import RepositoryRegistryService
from prscribe.storage import (
    InMemoryArticleStore,
    InMemoryPullRequestCache,
    InMemoryRepositoryStore,
)
from prscribe.writer import create_article_writer

__all__ = ["build_app_dependencies"]


def build_app_dependencies() -> AppDependencies:
    """Assemble every domain service from the environment.

    Reads ``PRSCRIBE_GITHUB_*`` for the gateway and identity provider and
    ``PRSCRIBE_WRITER_BACKEND`` plus ``PRSCRIBE_OPENAI_*`` for the writer.

    Raises
    ------
    GitHubConfigError
        If a GitHub setting is invalid.
    WriterBackendConfigError
        If the writer backend is missing or invalid.
    OpenAIConfigError
        If the OpenAI backend is selected without an API key.

    """
    github_config = GitHubRestConfig.from_env()
    writer = create_article_writer()

    http_client = httpx.AsyncClient(timeout=github_config.timeout_s)
    retry_executor = RetryExecutor(github_config.retry_policy)
    gateway_factory = GitHubClientFactory(
        github_config, http_client=http_client, retry_executor=retry_executor
    )
    identity_provider = GitHubIdentityProvider(
        github_config, http_client=http_client, retry_executor=retry_executor
    )

    repositories = InMemoryRepositoryStore()
    articles = InMemoryArticleStore()
    cache = InMemoryPullRequestCache()

    generation = ArticleGenerationService(
        ArticleServiceDependencies(
            repositories=repositories,
            articles=articles,
            cache=cache,
            gateway_factory=gateway_factory,
            writer=writer,
        ),
        event_logger=ArticleEventLogger(),
    )

    shutdown_hooks = [http_client.aclose]
    writer_close = getattr(writer, "aclose", None)
    if writer_close is not None:
        shutdown_hooks.append(writer_close)

    return AppDependencies(
        identity_provider=identity_provider,
        registry=RepositoryRegistryService(repositories),
        listing=PullRequestListingService(
            repositories=repositories,
            cache=cache,
            gateway_factory=gateway_factory,
        ),
        generation=generation,
        queries=ArticleQueryService(articles),
        shutdown_hooks=tuple(shutdown_hooks),
    )
