"""Exceptions raised while generating article text."""

from __future__ import annotations

import typing as typ

from prscribe.writer.constants import MAX_TEMPERATURE, MIN_TEMPERATURE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_CONTENT_PREVIEW_LIMIT = 100


class ArticleWriterError(Exception):
    """Base exception for all article writer errors.

    The HTTP layer maps every subclass raised during generation to a
    ``502 Bad Gateway`` response.
    """


class ArticleWriterAPIError(ArticleWriterError):
    """Raised when the language model endpoint fails.

    Attributes
    ----------
    status_code
        HTTP status code from the API response, if available.

    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise the error with message and optional status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> ArticleWriterAPIError:
        """Create error for HTTP error responses."""
        return cls(f"Language model HTTP error {status_code}", status_code=status_code)

    @classmethod
    def rate_limited(cls, retry_after: int | None = None) -> ArticleWriterAPIError:
        """Create error for rate limit (429) responses.

        Parameters
        ----------
        retry_after
            Seconds to wait before retrying, from the ``Retry-After`` header.

        """
        msg = "Language model rate limited"
        if retry_after is not None:
            msg = f"{msg}, retry after {retry_after}s"
        return cls(msg, status_code=429)

    @classmethod
    def timeout(cls) -> ArticleWriterAPIError:
        """Create error for request timeouts."""
        return cls("Language model request timed out")

    @classmethod
    def network_error(cls, detail: str) -> ArticleWriterAPIError:
        """Create error for network failures (DNS, connection, TLS)."""
        return cls(f"Language model network error: {detail}")


class ArticleWriterResponseShapeError(ArticleWriterError):
    """Raised when a completion response is malformed or empty."""

    @classmethod
    def missing(cls, field: str) -> ArticleWriterResponseShapeError:
        """Create error for a missing or empty response field."""
        return cls(f"Language model response missing expected field: {field}")

    @classmethod
    def invalid_json(cls, content: str) -> ArticleWriterResponseShapeError:
        """Create error for a body that is not valid JSON.

        The body is truncated in the message to keep log lines short.
        """
        if len(content) > _CONTENT_PREVIEW_LIMIT:
            preview = content[:_CONTENT_PREVIEW_LIMIT] + "..."
        else:
            preview = content
        return cls(f"Failed to parse JSON from response: {preview}")


class ArticleWriterInputError(ArticleWriterError):
    """Raised when the writer is called without anything to write about."""

    @classmethod
    def no_pull_requests(cls) -> ArticleWriterInputError:
        """Create error for an empty pull request selection."""
        return cls("No pull requests provided")

    @classmethod
    def empty_content(cls) -> ArticleWriterInputError:
        """Create error for title generation over empty content."""
        return cls("Cannot generate a title for empty content")


class OpenAIConfigError(ArticleWriterError):
    """Raised when OpenAI writer configuration is invalid."""

    @classmethod
    def missing_api_key(cls) -> OpenAIConfigError:
        """Create error for a missing ``PRSCRIBE_OPENAI_API_KEY``."""
        return cls("PRSCRIBE_OPENAI_API_KEY environment variable is required")

    @classmethod
    def empty_api_key(cls) -> OpenAIConfigError:
        """Create error for a blank API key."""
        return cls("OpenAI API key must be non-empty")


class WriterBackendConfigError(Exception):
    """Raised when the writer backend environment configuration is invalid.

    This is a startup error, not a generation failure, so it does not derive
    from :class:`ArticleWriterError`.
    """

    @classmethod
    def missing_backend(cls) -> WriterBackendConfigError:
        """Create error when ``PRSCRIBE_WRITER_BACKEND`` is not set."""
        return cls("PRSCRIBE_WRITER_BACKEND environment variable is required")

    @classmethod
    def invalid_backend(
        cls, name: str, valid_backends: cabc.Iterable[str]
    ) -> WriterBackendConfigError:
        """Create error for an unrecognised backend name."""
        valid_backends_str = ", ".join(f"'{b}'" for b in sorted(valid_backends))
        return cls(
            f"Invalid article writer backend '{name}'. "
            f"Valid options are: {valid_backends_str}"
        )

    @classmethod
    def invalid_parameter(
        cls, parameter_name: str, value: str, constraint: str
    ) -> WriterBackendConfigError:
        """Create error for an invalid configuration parameter value."""
        return cls(f"Invalid {parameter_name} '{value}'. {constraint}")

    @classmethod
    def invalid_temperature(cls, value: str) -> WriterBackendConfigError:
        """Create error for an invalid temperature value."""
        return cls.invalid_parameter(
            "temperature",
            value,
            f"Must be a float between {MIN_TEMPERATURE} and {MAX_TEMPERATURE}",
        )

    @classmethod
    def invalid_max_tokens(cls, value: str) -> WriterBackendConfigError:
        """Create error for an invalid max_tokens value."""
        return cls.invalid_parameter("max_tokens", value, "Must be a positive integer")

    @classmethod
    def invalid_timeout(cls, value: str) -> WriterBackendConfigError:
        """Create error for an invalid timeout value."""
        return cls.invalid_parameter("timeout", value, "Must be a positive number")
