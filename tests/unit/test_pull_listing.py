"""Unit tests for PullRequestListingService."""

from __future__ import annotations

import typing as typ

import pytest

from prscribe.errors import AccessDeniedError, RepositoryNotFoundError
from prscribe.github.errors import GitHubAPIError
from prscribe.pulls import PullRequestListingService
from tests.helpers.builders import pull_request
from tests.helpers.fakes import ALICE, BOB, FakeGateway

if typ.TYPE_CHECKING:
    from prscribe.registry import RepositoryRegistryService
    from prscribe.storage import InMemoryPullRequestCache, InMemoryRepositoryStore
    from tests.helpers.fakes import MutableClock


@pytest.mark.asyncio
async def test_lists_closed_pulls_with_callers_token(
    registry: RepositoryRegistryService,
    listing: PullRequestListingService,
    gateway: FakeGateway,
) -> None:
    """The gateway is built for the caller and asked for closed PRs."""
    gateway.listing = [pull_request(102), pull_request(101)]
    repository = registry.register(ALICE, "https://github.com/acme/widgets")

    pulls = await listing.list_merged(ALICE, repository.id)

    assert [pr.id for pr in pulls] == [102, 101]
    assert gateway.tokens == [ALICE.github_token]
    (call,) = gateway.calls_to("list_pull_requests")
    assert (call.owner, call.name, call.argument) == ("acme", "widgets", "closed")


@pytest.mark.asyncio
async def test_listing_refreshes_cache(
    registry: RepositoryRegistryService,
    listing: PullRequestListingService,
    gateway: FakeGateway,
    pr_cache: InMemoryPullRequestCache,
    clock: MutableClock,
) -> None:
    """Each listing replaces the repository's cache entry."""
    gateway.listing = [pull_request(101)]
    repository = registry.register(ALICE, "https://github.com/acme/widgets")

    await listing.list_merged(ALICE, repository.id)

    entry = pr_cache.entry(repository.id)
    assert entry is not None
    assert [pr.id for pr in entry.pull_requests] == [101]
    assert entry.last_updated == clock.now


@pytest.mark.asyncio
async def test_empty_listing_is_cached_too(
    registry: RepositoryRegistryService,
    listing: PullRequestListingService,
    pr_cache: InMemoryPullRequestCache,
) -> None:
    """A repository with no merged PRs caches an empty listing."""
    repository = registry.register(ALICE, "https://github.com/acme/widgets")

    assert await listing.list_merged(ALICE, repository.id) == []
    assert pr_cache.get(repository.id) == []


@pytest.mark.asyncio
async def test_other_users_repository_is_denied_before_upstream(
    registry: RepositoryRegistryService,
    listing: PullRequestListingService,
    gateway: FakeGateway,
) -> None:
    """Ownership is checked before any gateway call."""
    repository = registry.register(ALICE, "https://github.com/acme/widgets")

    with pytest.raises(AccessDeniedError):
        await listing.list_merged(BOB, repository.id)

    assert gateway.calls == []


@pytest.mark.asyncio
async def test_unknown_repository_is_not_found(
    listing: PullRequestListingService,
) -> None:
    """Unregistered ids raise RepositoryNotFoundError."""
    with pytest.raises(RepositoryNotFoundError):
        await listing.list_merged(ALICE, "missing")


@pytest.mark.asyncio
async def test_upstream_failure_leaves_cache_untouched(
    registry: RepositoryRegistryService,
    repository_store: InMemoryRepositoryStore,
    pr_cache: InMemoryPullRequestCache,
) -> None:
    """A failed listing neither raises a different error nor writes the cache."""
    failing = FakeGateway(error=GitHubAPIError.http_error(503, "/repos"))
    service = PullRequestListingService(
        repositories=repository_store, cache=pr_cache, gateway_factory=failing.factory
    )
    repository = registry.register(ALICE, "https://github.com/acme/widgets")

    with pytest.raises(GitHubAPIError):
        await service.list_merged(ALICE, repository.id)

    assert pr_cache.entry(repository.id) is None
