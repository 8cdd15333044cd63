"""JSON shapes of the records returned by the HTTP API.

Keys are camelCase and timestamps ISO 8601 strings.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import datetime as dt

    from prscribe.github.models import PullRequestSummary
    from prscribe.storage.models import ArticleRecord, RepositoryRecord


def _iso(value: dt.datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def serialize_repository(record: RepositoryRecord) -> dict[str, typ.Any]:
    """Serialise a registered repository."""
    return {
        "id": record.id,
        "url": record.url,
        "name": record.name,
        "owner": record.owner,
        "ownerUserId": record.owner_user_id,
        "createdAt": _iso(record.created_at),
    }


def serialize_pull_request(pr: PullRequestSummary) -> dict[str, typ.Any]:
    """Serialise a pull request summary (or detail, without files)."""
    return {
        "id": pr.id,
        "number": pr.number,
        "title": pr.title,
        "body": pr.body,
        "mergedAt": _iso(pr.merged_at),
        "authorLogin": pr.author_login,
        "htmlUrl": pr.html_url,
        "additions": pr.additions,
        "deletions": pr.deletions,
        "changedFilesCount": pr.changed_files,
    }


def serialize_article_summary(article: ArticleRecord) -> dict[str, typ.Any]:
    """Serialise the listing fields of an article."""
    return {
        "id": article.id,
        "title": article.title,
        "repositoryName": article.repository_name,
        "pullRequestIds": list(article.pull_request_ids),
        "createdAt": _iso(article.created_at),
        "updatedAt": _iso(article.updated_at),
    }


def serialize_article(article: ArticleRecord) -> dict[str, typ.Any]:
    """Serialise every field of an article."""
    return serialize_article_summary(article) | {
        "content": article.content,
        "repositoryId": article.repository_id,
        "ownerUserId": article.owner_user_id,
    }
