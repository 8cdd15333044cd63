"""Unit tests for MockArticleWriter."""

from __future__ import annotations

import pytest

from prscribe.writer import ArticleWriter, ArticleWriterInputError, MockArticleWriter
from tests.helpers.builders import pull_request


def test_satisfies_writer_protocol() -> None:
    """The mock writer can stand in for any ArticleWriter."""
    assert isinstance(MockArticleWriter(), ArticleWriter)


@pytest.mark.asyncio
async def test_content_lists_pull_requests_in_order() -> None:
    """Each PR becomes one bullet under the repository heading."""
    writer = MockArticleWriter()

    content = await writer.generate_content(
        [pull_request(102, title="Speed up CI"), pull_request(101, author_login=None)],
        "acme/widgets",
    )

    assert content == (
        "# Recent changes in acme/widgets\n"
        "\n"
        "- #102 Speed up CI (octocat)\n"
        "- #101 Change 101 (Unknown)\n"
    )


@pytest.mark.asyncio
async def test_custom_prompt_is_echoed() -> None:
    """Custom instructions appear as an italic line."""
    writer = MockArticleWriter()

    content = await writer.generate_content(
        [pull_request(101)], "acme/widgets", " Be brief "
    )

    assert content.splitlines()[2] == "_Be brief_"


@pytest.mark.asyncio
async def test_metrics_report_zero_tokens() -> None:
    """The mock writer reports a free invocation."""
    writer = MockArticleWriter()
    assert writer.last_invocation_metrics is None

    await writer.generate_content([pull_request(101)], "acme/widgets")

    metrics = writer.last_invocation_metrics
    assert metrics is not None
    assert metrics.total_tokens == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("content", "expected"),
    [
        (
            "# Recent changes in acme/widgets\n\n- #1",
            "Recent changes in acme/widgets",
        ),
        (
            "# Recent changes in octo-org/hello-world\n",
            "Recent changes in octo-org/hel",
        ),
        ("Plain first line\nmore", "Plain first line"),
    ],
)
async def test_title_is_first_line_capped_at_thirty(
    content: str, expected: str
) -> None:
    """Titles drop the heading marker and keep at most 30 characters."""
    title = await MockArticleWriter().generate_title(content)

    assert title == expected
    assert len(title) <= 30


@pytest.mark.asyncio
async def test_empty_inputs_are_rejected() -> None:
    """Empty selections and blank content raise ArticleWriterInputError."""
    writer = MockArticleWriter()

    with pytest.raises(ArticleWriterInputError):
        await writer.generate_content([], "acme/widgets")
    with pytest.raises(ArticleWriterInputError):
        await writer.generate_title("  \n")
