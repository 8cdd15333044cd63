"""Prompt templates for the article writer."""

from __future__ import annotations

import typing as typ

from prscribe.github.models import PullRequestDetail
from prscribe.writer.constants import (
    MAX_TITLE_CHARS,
    PR_BODY_EXCERPT_CHARS,
    TITLE_CONTENT_EXCERPT_CHARS,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from prscribe.github.models import PullRequestFile, PullRequestSummary

SYSTEM_PROMPT = """\
You are a specialist technical blog writer. You turn GitHub pull request \
information into technical articles that follow the user's requirements.
"""

DEFAULT_REQUIREMENTS = """\
## Requirements

- Write clearly and concisely.
- Explain the technical content concretely.
- Aim for roughly 1000 characters.
- Describe what each pull request changed.
- Stick to the facts in the pull request information.
"""

_FILE_STATUS_LABELS = {
    "added": "added",
    "modified": "modified",
    "removed": "deleted",
    "deleted": "deleted",
}


def _excerpt(text: str | None, limit: int, *, fallback: str) -> str:
    """Return the first ``limit`` characters of ``text`` with an ellipsis."""
    if not text:
        return fallback
    return f"{text[:limit]}..."


def _format_file(file: PullRequestFile) -> str:
    label = _FILE_STATUS_LABELS.get(file.status, file.status)
    return (
        f"  - {file.filename} ({label}: +{file.additions} lines, "
        f"-{file.deletions} lines)"
    )


def _format_changes(pr: PullRequestSummary) -> list[str]:
    """Format the change statistics line, omitted when nothing is known."""
    if not pr.additions and not pr.deletions:
        return []
    return [
        f"- Changes: +{pr.additions or 0} lines added, "
        f"-{pr.deletions or 0} lines removed, "
        f"{pr.changed_files or 0} files changed"
    ]


def format_pull_request(pr: PullRequestSummary) -> str:
    """Format one pull request as a prompt section.

    Examples
    --------
    >>> section = format_pull_request(pr)
    >>> section.splitlines()[0]
    '## PR #42: Add retry support'

    """
    merged = pr.merged_at.date().isoformat() if pr.merged_at else "not merged"
    lines = [
        f"## PR #{pr.number}: {pr.title}",
        f"- Author: {pr.author_login or 'Unknown'}",
        f"- Merged: {merged}",
        "- Description: "
        + _excerpt(pr.body, PR_BODY_EXCERPT_CHARS, fallback="No description"),
    ]
    lines.extend(_format_changes(pr))
    if isinstance(pr, PullRequestDetail) and pr.files:
        lines.append("- Changed files:")
        lines.extend(_format_file(file) for file in pr.files)
    lines.append(f"- URL: {pr.html_url}")
    return "\n".join(lines)


def build_content_prompt(
    pull_requests: cabc.Sequence[PullRequestSummary],
    repository_name: str,
    custom_prompt: str | None = None,
) -> str:
    """Build the user prompt for article content.

    A non-blank ``custom_prompt`` replaces the default requirements block;
    the pull request sections are always included.
    """
    summaries = "\n\n".join(format_pull_request(pr) for pr in pull_requests)
    if custom_prompt and custom_prompt.strip():
        intro = (
            f"Write an article based on the pull requests of the GitHub "
            f'repository "{repository_name}" below.'
        )
        requirements = f"## Custom requirements\n\n{custom_prompt.strip()}\n"
    else:
        intro = (
            f'Using the pull requests of the GitHub repository "{repository_name}" '
            "below, write a concise, easy to follow technical article."
        )
        requirements = DEFAULT_REQUIREMENTS

    return f"{intro}\n\n{requirements}\n# Pull requests\n\n{summaries}\n"


def build_title_prompt(content: str) -> str:
    """Build the prompt asking for a title for ``content``."""
    excerpt = content[:TITLE_CONTENT_EXCERPT_CHARS]
    return (
        "Write an engaging title for the technical article below.\n\n"
        "## Requirements\n\n"
        f"- At most {MAX_TITLE_CHARS} characters\n"
        "- Draw the reader in\n"
        "- Reflect the content accurately\n"
        "- Reply with the title only\n\n"
        f"## Article\n\n{excerpt}...\n"
    )
