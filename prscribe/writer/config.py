"""Configuration for the OpenAI article writer."""

from __future__ import annotations

import dataclasses
import os

from prscribe.writer.constants import MAX_TEMPERATURE, MIN_TEMPERATURE
from prscribe.writer.errors import OpenAIConfigError, WriterBackendConfigError

_DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
_DEFAULT_MODEL = "gpt-4o-mini"
_DEFAULT_TIMEOUT_S = 60.0
_DEFAULT_TEMPERATURE = 0.7
_DEFAULT_MAX_TOKENS = 2000
_DEFAULT_TITLE_MAX_TOKENS = 100


@dataclasses.dataclass(frozen=True, slots=True)
class OpenAIArticleWriterConfig:
    """Configuration for the OpenAI-compatible article writer.

    Attributes
    ----------
    api_key
        API key for the chat completions endpoint.
    endpoint
        Chat completions endpoint URL.
    model
        Model identifier used for both article and title completions.
    timeout_s
        Request timeout in seconds.
    temperature
        Sampling temperature (0.0 to 2.0).
    max_tokens
        Completion token cap for article content.
    title_max_tokens
        Completion token cap for titles.

    """

    api_key: str
    endpoint: str = _DEFAULT_ENDPOINT
    model: str = _DEFAULT_MODEL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    temperature: float = _DEFAULT_TEMPERATURE
    max_tokens: int = _DEFAULT_MAX_TOKENS
    title_max_tokens: int = _DEFAULT_TITLE_MAX_TOKENS

    @staticmethod
    def _parse_temperature_from_env() -> float:
        """Parse and validate ``PRSCRIBE_OPENAI_TEMPERATURE``."""
        raw_temperature = os.environ.get("PRSCRIBE_OPENAI_TEMPERATURE")
        if raw_temperature is None:
            return _DEFAULT_TEMPERATURE

        try:
            temperature = float(raw_temperature)
        except ValueError as exc:
            raise WriterBackendConfigError.invalid_temperature(
                raw_temperature
            ) from exc

        if not MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE:
            raise WriterBackendConfigError.invalid_temperature(raw_temperature)

        return temperature

    @staticmethod
    def _parse_max_tokens_from_env() -> int:
        """Parse and validate ``PRSCRIBE_OPENAI_MAX_TOKENS``."""
        raw_max_tokens = os.environ.get("PRSCRIBE_OPENAI_MAX_TOKENS")
        if raw_max_tokens is None:
            return _DEFAULT_MAX_TOKENS

        try:
            max_tokens = int(raw_max_tokens)
        except ValueError as exc:
            raise WriterBackendConfigError.invalid_max_tokens(raw_max_tokens) from exc

        if max_tokens <= 0:
            raise WriterBackendConfigError.invalid_max_tokens(raw_max_tokens)

        return max_tokens

    @staticmethod
    def _parse_timeout_from_env() -> float:
        """Parse and validate ``PRSCRIBE_OPENAI_TIMEOUT_S``."""
        raw_timeout = os.environ.get("PRSCRIBE_OPENAI_TIMEOUT_S")
        if raw_timeout is None:
            return _DEFAULT_TIMEOUT_S

        try:
            timeout_s = float(raw_timeout)
        except ValueError as exc:
            raise WriterBackendConfigError.invalid_timeout(raw_timeout) from exc

        if timeout_s <= 0:
            raise WriterBackendConfigError.invalid_timeout(raw_timeout)

        return timeout_s

    @classmethod
    def from_env(cls) -> OpenAIArticleWriterConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``PRSCRIBE_OPENAI_API_KEY``: Required API key
        - ``PRSCRIBE_OPENAI_ENDPOINT``: Optional endpoint override
        - ``PRSCRIBE_OPENAI_MODEL``: Optional model override
        - ``PRSCRIBE_OPENAI_TEMPERATURE``: Optional temperature (0.0 to 2.0)
        - ``PRSCRIBE_OPENAI_MAX_TOKENS``: Optional max tokens (positive integer)
        - ``PRSCRIBE_OPENAI_TIMEOUT_S``: Optional request timeout in seconds

        Raises
        ------
        OpenAIConfigError
            If the API key is missing or blank.
        WriterBackendConfigError
            If a numeric setting is invalid.

        """
        raw_api_key = os.environ.get("PRSCRIBE_OPENAI_API_KEY")
        if raw_api_key is None:
            raise OpenAIConfigError.missing_api_key()
        api_key = raw_api_key.strip()
        if not api_key:
            raise OpenAIConfigError.empty_api_key()

        return cls(
            api_key=api_key,
            endpoint=os.environ.get("PRSCRIBE_OPENAI_ENDPOINT", _DEFAULT_ENDPOINT),
            model=os.environ.get("PRSCRIBE_OPENAI_MODEL", _DEFAULT_MODEL),
            timeout_s=cls._parse_timeout_from_env(),
            temperature=cls._parse_temperature_from_env(),
            max_tokens=cls._parse_max_tokens_from_env(),
        )
