"""Records held by the prscribe stores.

Records are frozen ``msgspec`` structs; stores hand out the same instances
they hold, which is safe because nothing can mutate them. Cross-references
between records are by id only.
"""

from __future__ import annotations

import datetime as dt  # noqa: TC003

import msgspec

from prscribe.common.slug import repo_slug
from prscribe.github.models import PullRequestSummary  # noqa: TC001


class RepositoryRecord(msgspec.Struct, kw_only=True, frozen=True):
    """A GitHub repository registered by a user.

    Attributes
    ----------
    id
        Opaque repository id minted at registration.
    url
        URL the user registered.
    owner
        GitHub owner (user or organisation) parsed from the URL.
    repo
        GitHub repository name parsed from the URL.
    owner_user_id
        Id of the prscribe user that registered the repository.
    created_at
        Registration timestamp.

    """

    id: str
    url: str
    owner: str
    repo: str
    owner_user_id: str
    created_at: dt.datetime

    @property
    def name(self) -> str:
        """Return the ``owner/repo`` display name."""
        return repo_slug(self.owner, self.repo)


class ArticleRecord(msgspec.Struct, kw_only=True, frozen=True):
    """A generated article.

    Attributes
    ----------
    id
        Article id; sorts in generation order.
    title
        Generated title.
    content
        Generated article body (Markdown).
    repository_id
        Registered repository id, or ``None`` when the article was generated
        against a raw ``owner/repo`` reference.
    repository_name
        ``owner/repo`` display name.
    owner_user_id
        Id of the user who generated the article.
    pull_request_ids
        PR ids the article was generated from, in request order.
    created_at
        Creation timestamp.
    updated_at
        Last modification timestamp; equal to ``created_at``.

    """

    id: str
    title: str
    content: str
    repository_id: str | None
    repository_name: str
    owner_user_id: str
    pull_request_ids: tuple[int, ...]
    created_at: dt.datetime
    updated_at: dt.datetime


class PullRequestCacheEntry(msgspec.Struct, kw_only=True, frozen=True):
    """Most recent merged-PR listing for one repository."""

    repository_id: str
    pull_requests: tuple[PullRequestSummary, ...]
    last_updated: dt.datetime
