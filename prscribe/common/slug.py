"""Repository slug and URL utilities.

Repository slugs are GitHub identifiers in ``owner/name`` format. They are not
filesystem paths, even though they use ``/`` as a separator, so they should be
parsed using these helpers rather than ``pathlib``.
"""

from __future__ import annotations

import re

_GITHUB_URL_PATTERN = re.compile(r"github\.com[/:]([^/\s]+)/([^/\s?#]+)")
_GIT_SUFFIX = ".git"


def repo_slug(owner: str, name: str) -> str:
    """Build a repository slug from owner and name.

    Examples
    --------
    >>> repo_slug("acme", "widgets")
    'acme/widgets'

    """
    return f"{owner}/{name}"


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Parse a repository slug into owner and name.

    Parameters
    ----------
    slug:
        Repository slug in ``owner/name`` format.

    Returns
    -------
    tuple[str, str]
        ``(owner, name)``.

    Raises
    ------
    ValueError
        If the slug is not in ``owner/name`` format.

    Examples
    --------
    >>> parse_repo_slug("acme/widgets")
    ('acme', 'widgets')

    """
    if slug.count("/") != 1:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    owner, name = (part.strip() for part in slug.split("/"))
    if not owner or not name:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    return owner, name


def parse_github_url(url: str) -> tuple[str, str]:
    """Extract ``(owner, name)`` from a GitHub repository URL.

    Accepts HTTPS and SSH forms ending in ``<owner>/<repo>`` with an
    optional ``.git`` suffix; anything after the repository segment is
    ignored.

    Raises
    ------
    ValueError
        If the URL does not reference a GitHub repository.

    Examples
    --------
    >>> parse_github_url("https://github.com/acme/widgets.git")
    ('acme', 'widgets')
    >>> parse_github_url("git@github.com:acme/widgets")
    ('acme', 'widgets')

    """
    match = _GITHUB_URL_PATTERN.search(url.strip())
    if match is None:
        msg = f"Invalid GitHub repository URL: {url!r}"
        raise ValueError(msg)

    owner, name = match.groups()
    name = name.removesuffix(_GIT_SUFFIX)
    if not name:
        msg = f"Invalid GitHub repository URL: {url!r}"
        raise ValueError(msg)
    return owner, name
