"""Resources for generating and reading articles."""

from __future__ import annotations

import typing as typ

import falcon

from prscribe.api.resources.body import (
    optional_string,
    read_json_object,
    request_identity,
)
from prscribe.api.resources.serializers import (
    serialize_article,
    serialize_article_summary,
    serialize_pull_request,
)
from prscribe.common.ids import parse_pull_request_ids

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from prscribe.articles.queries import ArticleQueryService
    from prscribe.articles.service import ArticleGenerationService

__all__ = ["ArticleCollectionResource", "ArticleResource"]


class ArticleCollectionResource:
    """``GET`` and ``POST /articles``.

    The ``POST`` body is::

        {
            "pullRequestIds": [101, "102"],
            "repositoryId": "3f2a9c1b7e40",
            "repositoryName": "acme/widgets",
            "customPrompt": "Focus on performance work."
        }

    where ``repositoryId`` takes precedence over ``repositoryName`` and
    ``customPrompt`` is optional.
    """

    def __init__(
        self,
        generation: ArticleGenerationService,
        queries: ArticleQueryService,
    ) -> None:
        """Configure the resource with generation and query services."""
        self._generation = generation
        self._queries = queries

    async def on_get(self, req: Request, resp: Response) -> None:
        """List the caller's articles, newest first."""
        identity = request_identity(req)
        articles = self._queries.list_for_owner(identity)
        resp.media = {"articles": [serialize_article_summary(a) for a in articles]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: Request, resp: Response) -> None:
        """Generate and store an article for the selected pull requests."""
        identity = request_identity(req)
        body = await read_json_object(req)
        pull_request_ids = parse_pull_request_ids(body.get("pullRequestIds"))

        result = await self._generation.generate(
            identity,
            pull_request_ids,
            repository_id=optional_string(body, "repositoryId"),
            repository_name=optional_string(body, "repositoryName"),
            custom_prompt=optional_string(body, "customPrompt"),
        )
        resp.media = {
            "article": serialize_article(result.article),
            "pullRequests": [serialize_pull_request(pr) for pr in result.pull_requests],
        }
        resp.status = falcon.HTTP_201


class ArticleResource:
    """``GET /articles/{article_id}``."""

    def __init__(self, queries: ArticleQueryService) -> None:
        """Configure the resource with the query service."""
        self._queries = queries

    async def on_get(self, req: Request, resp: Response, *, article_id: str) -> None:
        """Return one of the caller's articles."""
        identity = request_identity(req)
        article = self._queries.get_owned(identity, article_id)
        resp.media = {"article": serialize_article(article)}
        resp.status = falcon.HTTP_200
