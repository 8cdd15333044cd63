"""Listing of merged pull requests for registered repositories.

Each successful listing is written to the PR cache so a following article
generation for the same repository can skip the upstream round trip.
"""

from __future__ import annotations

import typing as typ

from prscribe.logging import get_logger, log_info
from prscribe.registry.service import require_owned_repository

if typ.TYPE_CHECKING:
    from prscribe.github.client import GatewayFactory
    from prscribe.github.models import PullRequestSummary
    from prscribe.identity import Identity
    from prscribe.storage.protocol import PullRequestCacheStore, RepositoryStore

logger = get_logger(__name__)


class PullRequestListingService:
    """List merged PRs of an owned repository and refresh the cache.

    Parameters
    ----------
    repositories
        Registered repositories, used for the ownership check.
    cache
        PR cache written after every successful listing.
    gateway_factory
        Builds a gateway bound to the caller's GitHub token.

    """

    def __init__(
        self,
        *,
        repositories: RepositoryStore,
        cache: PullRequestCacheStore,
        gateway_factory: GatewayFactory,
    ) -> None:
        """Configure the service with its collaborators."""
        self._repositories = repositories
        self._cache = cache
        self._gateway_factory = gateway_factory

    async def list_merged(
        self, identity: Identity, repository_id: str
    ) -> list[PullRequestSummary]:
        """Fetch the merged PRs of ``repository_id`` from GitHub.

        Raises
        ------
        RepositoryNotFoundError
            If the repository is not registered.
        AccessDeniedError
            If another user registered the repository.
        GitHubAPIError
            If the upstream call fails after retries.

        """
        repository = require_owned_repository(
            self._repositories, identity, repository_id
        )
        gateway = self._gateway_factory(identity.github_token)
        pulls = await gateway.list_pull_requests(
            repository.owner, repository.repo, state="closed"
        )
        self._cache.put(repository.id, pulls)
        log_info(
            logger,
            "Cached %d merged pull requests for %s",
            len(pulls),
            repository.name,
        )
        return pulls
