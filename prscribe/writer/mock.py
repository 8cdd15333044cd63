"""Deterministic article writer for tests and local development."""

from __future__ import annotations

import typing as typ

from prscribe.writer.constants import MAX_TITLE_CHARS
from prscribe.writer.errors import ArticleWriterInputError
from prscribe.writer.metrics import ModelInvocationMetrics

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from prscribe.github.models import PullRequestSummary


class MockArticleWriter:
    """Article writer that renders a fixed template without calling a model.

    The content lists every pull request in the given order, so tests can
    assert on which PRs reached the writer. The title is the first Markdown
    heading of the content, cut to thirty characters.

    Examples
    --------
    >>> import asyncio
    >>> writer = MockArticleWriter()
    >>> content = asyncio.run(writer.generate_content(pulls, "acme/widgets"))
    >>> content.splitlines()[0]
    '# Recent changes in acme/widgets'

    """

    def __init__(self) -> None:
        """Initialise invocation metrics storage."""
        self._last_invocation_metrics: ModelInvocationMetrics | None = None

    @property
    def last_invocation_metrics(self) -> ModelInvocationMetrics | None:
        """Return metrics captured from the latest invocation."""
        return self._last_invocation_metrics

    async def generate_content(
        self,
        pull_requests: cabc.Sequence[PullRequestSummary],
        repository_name: str,
        custom_prompt: str | None = None,
    ) -> str:
        """Render one bullet per pull request under a fixed heading."""
        if not pull_requests:
            raise ArticleWriterInputError.no_pull_requests()

        self._last_invocation_metrics = ModelInvocationMetrics(
            prompt_tokens=0,
            completion_tokens=0,
            total_tokens=0,
        )
        lines = [f"# Recent changes in {repository_name}", ""]
        if custom_prompt:
            lines.extend([f"_{custom_prompt.strip()}_", ""])
        lines.extend(
            f"- #{pr.number} {pr.title} ({pr.author_login or 'Unknown'})"
            for pr in pull_requests
        )
        return "\n".join(lines) + "\n"

    async def generate_title(self, content: str) -> str:
        """Return the first heading of ``content``, truncated."""
        if not content.strip():
            raise ArticleWriterInputError.empty_content()

        first_line = content.strip().splitlines()[0].lstrip("# ").strip()
        return first_line[:MAX_TITLE_CHARS]
