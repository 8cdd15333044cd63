"""OpenAI-compatible implementation of the ArticleWriter protocol."""

from __future__ import annotations

import time
import typing as typ

import httpx
import msgspec

from prscribe.logging import get_logger, log_debug
from prscribe.writer.errors import (
    ArticleWriterAPIError,
    ArticleWriterInputError,
    ArticleWriterResponseShapeError,
    OpenAIConfigError,
)
from prscribe.writer.metrics import ModelInvocationMetrics
from prscribe.writer.prompts import (
    SYSTEM_PROMPT,
    build_content_prompt,
    build_title_prompt,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from prscribe.github.models import PullRequestSummary
    from prscribe.writer.config import OpenAIArticleWriterConfig

_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_RATE_LIMITED = 429
_TITLE_STRIP_CHARS = " \t\r\n\"'"

logger = get_logger(__name__)


class _Message(msgspec.Struct):
    content: str | None = None


class _Choice(msgspec.Struct):
    message: _Message | None = None


class _Usage(msgspec.Struct):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class _ChatCompletion(msgspec.Struct):
    choices: list[_Choice] = msgspec.field(default_factory=list)
    usage: _Usage | None = None


def _get_retry_after(response: httpx.Response) -> int | None:
    """Extract Retry-After header value if present and numeric."""
    retry_after = response.headers.get("Retry-After")
    if retry_after and retry_after.isdigit():
        return int(retry_after)
    return None


class OpenAIArticleWriter:
    """Article writer backed by an OpenAI-compatible chat completions API.

    Parameters
    ----------
    config
        Endpoint, model, and sampling configuration.
    http_client
        Optional ``httpx.AsyncClient`` for testing. If not provided, the
        instance creates and owns its own client.

    Examples
    --------
    >>> import asyncio
    >>> from prscribe.writer import OpenAIArticleWriter, OpenAIArticleWriterConfig
    >>> writer = OpenAIArticleWriter(OpenAIArticleWriterConfig(api_key="sk-..."))
    >>> asyncio.run(writer.aclose())

    """

    def __init__(
        self,
        config: OpenAIArticleWriterConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the writer with configuration."""
        if not config.api_key.strip():
            raise OpenAIConfigError.empty_api_key()

        self._config = config
        self._headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._last_invocation_metrics: ModelInvocationMetrics | None = None

    @property
    def config(self) -> OpenAIArticleWriterConfig:
        """Read-only access to the writer configuration."""
        return self._config

    @property
    def last_invocation_metrics(self) -> ModelInvocationMetrics | None:
        """Return metrics captured from the most recent invocation."""
        return self._last_invocation_metrics

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def generate_content(
        self,
        pull_requests: cabc.Sequence[PullRequestSummary],
        repository_name: str,
        custom_prompt: str | None = None,
    ) -> str:
        """Write the article body for ``pull_requests``.

        Raises
        ------
        ArticleWriterInputError
            If ``pull_requests`` is empty.
        ArticleWriterAPIError
            If the API returns an error response or times out.
        ArticleWriterResponseShapeError
            If the response carries no usable content.

        """
        if not pull_requests:
            raise ArticleWriterInputError.no_pull_requests()

        prompt = build_content_prompt(pull_requests, repository_name, custom_prompt)
        payload = self._build_payload(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=self._config.max_tokens,
        )
        return await self._complete(payload)

    async def generate_title(self, content: str) -> str:
        """Write a title of at most thirty characters for ``content``."""
        if not content.strip():
            raise ArticleWriterInputError.empty_content()

        payload = self._build_payload(
            [{"role": "user", "content": build_title_prompt(content)}],
            max_tokens=self._config.title_max_tokens,
        )
        title = (await self._complete(payload)).strip(_TITLE_STRIP_CHARS)
        if not title:
            raise ArticleWriterResponseShapeError.missing("choices[0].message.content")
        return title

    def _build_payload(
        self, messages: list[dict[str, str]], *, max_tokens: int
    ) -> dict[str, object]:
        """Construct the chat completion request payload."""
        return {
            "model": self._config.model,
            "messages": messages,
            "temperature": self._config.temperature,
            "max_tokens": max_tokens,
        }

    async def _complete(self, payload: dict[str, object]) -> str:
        """Send ``payload`` and return the assistant message content."""
        started = time.perf_counter()
        response = await self._send_request(payload)
        self._check_response_errors(response)
        completion = self._decode(response)
        latency_ms = (time.perf_counter() - started) * 1000
        self._last_invocation_metrics = self._extract_usage_metrics(
            completion, latency_ms
        )
        log_debug(
            logger,
            "Chat completion from %s finished in %.0f ms",
            self._config.model,
            latency_ms,
        )
        return self._extract_content(completion)

    async def _send_request(self, payload: dict[str, object]) -> httpx.Response:
        """POST ``payload`` to the chat completions endpoint.

        Raises
        ------
        ArticleWriterAPIError
            If a timeout or network error occurs.

        """
        try:
            return await self._client.post(
                self._config.endpoint, json=payload, headers=self._headers
            )
        except httpx.TimeoutException as exc:
            raise ArticleWriterAPIError.timeout() from exc
        except httpx.RequestError as exc:
            raise ArticleWriterAPIError.network_error(str(exc)) from exc

    def _check_response_errors(self, response: httpx.Response) -> None:
        """Raise for rate limiting or any other HTTP error status."""
        if response.status_code == _HTTP_RATE_LIMITED:
            raise ArticleWriterAPIError.rate_limited(_get_retry_after(response))

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise ArticleWriterAPIError.http_error(response.status_code)

    def _decode(self, response: httpx.Response) -> _ChatCompletion:
        try:
            return msgspec.json.decode(response.content, type=_ChatCompletion)
        except msgspec.DecodeError as exc:
            raise ArticleWriterResponseShapeError.invalid_json(response.text) from exc

    def _extract_usage_metrics(
        self, completion: _ChatCompletion, latency_ms: float
    ) -> ModelInvocationMetrics:
        usage = completion.usage
        if usage is None:
            return ModelInvocationMetrics(latency_ms=latency_ms)
        return ModelInvocationMetrics(
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
            latency_ms=latency_ms,
        )

    def _extract_content(self, completion: _ChatCompletion) -> str:
        """Return the first choice's content.

        Raises
        ------
        ArticleWriterResponseShapeError
            If there are no choices or the first one has no content.

        """
        if not completion.choices:
            raise ArticleWriterResponseShapeError.missing("choices")

        message = completion.choices[0].message
        if message is None or not message.content or not message.content.strip():
            raise ArticleWriterResponseShapeError.missing("choices[0].message.content")

        return message.content
