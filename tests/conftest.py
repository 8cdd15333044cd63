"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import falcon.testing
import pytest

from prscribe.api import AppDependencies, create_app
from prscribe.articles import (
    ArticleGenerationService,
    ArticleQueryService,
    ArticleServiceDependencies,
)
from prscribe.pulls import PullRequestListingService
from prscribe.registry import RepositoryRegistryService
from prscribe.storage import (
    InMemoryArticleStore,
    InMemoryPullRequestCache,
    InMemoryRepositoryStore,
)
from prscribe.writer import MockArticleWriter
from tests.helpers.fakes import (
    ALICE,
    BOB,
    FakeGateway,
    FakeIdentityProvider,
    MutableClock,
)


@pytest.fixture
def clock() -> MutableClock:
    """Provide a clock that tests advance explicitly."""
    return MutableClock()


@pytest.fixture
def repository_store() -> InMemoryRepositoryStore:
    """Provide an empty repository store."""
    return InMemoryRepositoryStore()


@pytest.fixture
def article_store() -> InMemoryArticleStore:
    """Provide an empty article store."""
    return InMemoryArticleStore()


@pytest.fixture
def pr_cache(clock: MutableClock) -> InMemoryPullRequestCache:
    """Provide a PR cache driven by the test clock."""
    return InMemoryPullRequestCache(clock=clock)


@pytest.fixture
def gateway() -> FakeGateway:
    """Provide a gateway with no canned data."""
    return FakeGateway()


@pytest.fixture
def writer() -> MockArticleWriter:
    """Provide the deterministic article writer."""
    return MockArticleWriter()


@pytest.fixture
def registry(
    repository_store: InMemoryRepositoryStore, clock: MutableClock
) -> RepositoryRegistryService:
    """Provide a registry over the shared repository store."""
    return RepositoryRegistryService(repository_store, clock=clock)


@pytest.fixture
def listing(
    repository_store: InMemoryRepositoryStore,
    pr_cache: InMemoryPullRequestCache,
    gateway: FakeGateway,
) -> PullRequestListingService:
    """Provide a listing service wired to the fake gateway."""
    return PullRequestListingService(
        repositories=repository_store,
        cache=pr_cache,
        gateway_factory=gateway.factory,
    )


@pytest.fixture
def generation(
    repository_store: InMemoryRepositoryStore,
    article_store: InMemoryArticleStore,
    pr_cache: InMemoryPullRequestCache,
    gateway: FakeGateway,
    writer: MockArticleWriter,
    clock: MutableClock,
) -> ArticleGenerationService:
    """Provide an article generation service wired to the fakes."""
    return ArticleGenerationService(
        ArticleServiceDependencies(
            repositories=repository_store,
            articles=article_store,
            cache=pr_cache,
            gateway_factory=gateway.factory,
            writer=writer,
        ),
        clock=clock,
    )


@pytest.fixture
def queries(article_store: InMemoryArticleStore) -> ArticleQueryService:
    """Provide article queries over the shared article store."""
    return ArticleQueryService(article_store)


@pytest.fixture
def app_dependencies(
    registry: RepositoryRegistryService,
    listing: PullRequestListingService,
    generation: ArticleGenerationService,
    queries: ArticleQueryService,
) -> AppDependencies:
    """Provide app dependencies over the shared fakes, for Alice and Bob."""
    return AppDependencies(
        identity_provider=FakeIdentityProvider([ALICE, BOB]),
        registry=registry,
        listing=listing,
        generation=generation,
        queries=queries,
    )


@pytest.fixture
def api_client(app_dependencies: AppDependencies) -> falcon.testing.TestClient:
    """Provide a test client for the full application."""
    return falcon.testing.TestClient(create_app(app_dependencies))
