"""Pull request records read from the GitHub REST API."""

from __future__ import annotations

import datetime as dt  # noqa: TC003

import msgspec


class PullRequestFile(msgspec.Struct, kw_only=True, frozen=True):
    """Per-file change statistics for a pull request.

    Attributes
    ----------
    filename
        Repository-relative path of the changed file.
    status
        GitHub change status (``added``, ``modified``, ``removed``, ...).
    additions
        Lines added in the file.
    deletions
        Lines removed from the file.
    changes
        Total changed lines.
    patch
        Unified diff hunk, omitted by GitHub for large or binary files.

    """

    filename: str
    status: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: str | None = None


class PullRequestCommit(msgspec.Struct, kw_only=True, frozen=True):
    """A commit that belongs to a pull request."""

    sha: str
    message: str
    author_name: str | None = None


class PullRequestSummary(msgspec.Struct, kw_only=True, frozen=True):
    """Pull request fields shown in listings and cached per repository.

    Attributes
    ----------
    id
        GitHub database id; the identifier clients select PRs by.
    number
        Repository-scoped PR number used in API paths.
    title
        PR title.
    body
        PR description, when one was written.
    merged_at
        Merge timestamp; ``None`` for unmerged PRs.
    author_login
        Login of the PR author, when the account still exists.
    html_url
        Browser URL of the PR.
    additions
        Lines added; only populated by the detail endpoint.
    deletions
        Lines removed; only populated by the detail endpoint.
    changed_files
        Number of changed files; only populated by the detail endpoint.

    """

    id: int
    number: int
    title: str
    html_url: str
    body: str | None = None
    merged_at: dt.datetime | None = None
    author_login: str | None = None
    additions: int | None = None
    deletions: int | None = None
    changed_files: int | None = None

    @property
    def is_merged(self) -> bool:
        """Return True when the PR carries a merge timestamp."""
        return self.merged_at is not None


class PullRequestDetail(PullRequestSummary, kw_only=True, frozen=True):
    """Pull request detail merged with its changed-file list."""

    files: tuple[PullRequestFile, ...] = ()
