"""ArticleWriter protocol for LLM-backed article generation."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from prscribe.github.models import PullRequestSummary


@typ.runtime_checkable
class ArticleWriter(typ.Protocol):
    """Turn pull request data into a blog article and a title.

    Implementations receive either cached summaries or full
    :class:`~prscribe.github.models.PullRequestDetail` records; the latter
    carry per-file change lists that richer prompts can include.

    Examples
    --------
    >>> from prscribe.writer import ArticleWriter, MockArticleWriter
    >>> writer: ArticleWriter = MockArticleWriter()
    >>> isinstance(writer, ArticleWriter)
    True

    """

    async def generate_content(
        self,
        pull_requests: cabc.Sequence[PullRequestSummary],
        repository_name: str,
        custom_prompt: str | None = None,
    ) -> str:
        """Write the article body.

        Parameters
        ----------
        pull_requests
            Non-empty selection, in the order the caller chose them.
        repository_name
            ``owner/repo`` display name mentioned in the article.
        custom_prompt
            Optional caller instructions replacing the default requirements.

        Returns
        -------
        str
            Markdown article content.

        Raises
        ------
        ArticleWriterInputError
            If ``pull_requests`` is empty.
        ArticleWriterError
            If the backend fails.

        """
        ...

    async def generate_title(self, content: str) -> str:
        """Write a short title for ``content``."""
        ...
