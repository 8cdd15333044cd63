"""Resources for registering repositories and listing their pull requests."""

from __future__ import annotations

import typing as typ

import falcon

from prscribe.api.resources.body import (
    read_json_object,
    request_identity,
    required_string,
)
from prscribe.api.resources.serializers import (
    serialize_pull_request,
    serialize_repository,
)

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from prscribe.pulls.service import PullRequestListingService
    from prscribe.registry.service import RepositoryRegistryService

__all__ = ["PullRequestCollectionResource", "RepositoryCollectionResource"]


class RepositoryCollectionResource:
    """``GET`` and ``POST /repositories``."""

    def __init__(self, registry: RepositoryRegistryService) -> None:
        """Configure the resource with the registry service."""
        self._registry = registry

    async def on_get(self, req: Request, resp: Response) -> None:
        """List the caller's registered repositories."""
        identity = request_identity(req)
        records = self._registry.list_for_owner(identity)
        resp.media = {"repositories": [serialize_repository(r) for r in records]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: Request, resp: Response) -> None:
        """Register the repository at ``{"url": ...}``."""
        identity = request_identity(req)
        body = await read_json_object(req)
        record = self._registry.register(identity, required_string(body, "url"))
        resp.media = {"repository": serialize_repository(record)}
        resp.status = falcon.HTTP_201


class PullRequestCollectionResource:
    """``GET /repositories/{repository_id}/pulls``.

    Listing refreshes the PR cache for the repository, so an article
    generated within the cache window reuses this response.
    """

    def __init__(self, listing: PullRequestListingService) -> None:
        """Configure the resource with the listing service."""
        self._listing = listing

    async def on_get(
        self, req: Request, resp: Response, *, repository_id: str
    ) -> None:
        """List merged pull requests of an owned repository."""
        identity = request_identity(req)
        pulls = await self._listing.list_merged(identity, repository_id)
        resp.media = {"pullRequests": [serialize_pull_request(pr) for pr in pulls]}
        resp.status = falcon.HTTP_200
