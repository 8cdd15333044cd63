"""Bounded exponential-backoff retry for outbound GitHub calls.

``RetryExecutor.execute`` wraps one awaitable-producing callable.
:class:`GitHubAPIError` failures with status 429, 502, or 503 are retried after
``initial_delay_s * 2**attempt_index`` seconds; every other failure, and the
failure of the final attempt, propagates unchanged.

Usage
-----
>>> executor = RetryExecutor(RetryPolicy(max_attempts=3, initial_delay_s=1.0))
>>> data = await executor.execute(lambda: client.get(url), description=url)

"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import dataclasses as dc

from prscribe.logging import get_logger, log_warning

from .errors import GitHubAPIError

logger = get_logger(__name__)

Sleep = cabc.Callable[[float], cabc.Awaitable[None]]

_DEFAULT_MAX_ATTEMPTS = 3
_DEFAULT_INITIAL_DELAY_S = 1.0


def is_transient_failure(exc: BaseException) -> bool:
    """Return True for a GitHubAPIError with a rate-limit or gateway status."""
    return isinstance(exc, GitHubAPIError) and exc.is_transient


@dc.dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry limits for a single outbound call.

    Attributes
    ----------
    max_attempts
        Total attempts including the first one. Must be at least 1.
    initial_delay_s
        Delay before the first retry; doubled before each later retry.
    attempt_timeout_s
        Optional deadline for each attempt. ``None`` leaves attempts bounded
        only by the HTTP client's own timeout.

    """

    max_attempts: int = _DEFAULT_MAX_ATTEMPTS
    initial_delay_s: float = _DEFAULT_INITIAL_DELAY_S
    attempt_timeout_s: float | None = None

    def __post_init__(self) -> None:
        """Reject limits that would never attempt or wait negatively."""
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.initial_delay_s < 0:
            msg = f"initial_delay_s must be non-negative, got {self.initial_delay_s}"
            raise ValueError(msg)
        if self.attempt_timeout_s is not None and self.attempt_timeout_s <= 0:
            msg = f"attempt_timeout_s must be positive, got {self.attempt_timeout_s}"
            raise ValueError(msg)

    def delay_for(self, attempt_index: int) -> float:
        """Return the backoff delay that follows the zero-based ``attempt_index``."""
        return self.initial_delay_s * (2**attempt_index)


class RetryExecutor:
    """Run outbound operations under a :class:`RetryPolicy`.

    The executor holds no per-call state, so one instance can be shared by
    concurrent tasks. Backoff suspends only the calling task; cancelling that
    task cancels the in-flight attempt or the pending sleep.

    Parameters
    ----------
    policy
        Retry limits; defaults to three attempts starting at one second.
    sleep
        Awaitable sleep used for backoff. Tests inject a recorder here.

    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Configure the executor with a policy and sleep function."""
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        """Return the retry policy in force."""
        return self._policy

    async def execute[T](
        self,
        operation: cabc.Callable[[], cabc.Awaitable[T]],
        *,
        description: str = "operation",
    ) -> T:
        """Run ``operation`` until it succeeds or fails terminally.

        Parameters
        ----------
        operation
            Zero-argument callable returning a fresh awaitable per attempt.
        description
            Short label used in retry log lines and timeout errors.

        Returns
        -------
        T
            The value produced by the first successful attempt.

        Raises
        ------
        Exception
            The terminal failure, or the last transient failure once attempts
            are exhausted, re-raised as-is.
        GitHubAPIError
            When an attempt exceeds ``attempt_timeout_s``.

        """
        attempt_index = 0
        while True:
            try:
                return await self._attempt(operation, description)
            except Exception as exc:
                is_last = attempt_index + 1 >= self._policy.max_attempts
                if is_last or not is_transient_failure(exc):
                    raise
                delay = self._policy.delay_for(attempt_index)
                log_warning(
                    logger,
                    "Request %s failed with %s, retrying in %.3fs (attempt %d/%d)",
                    description,
                    getattr(exc, "status_code", None),
                    delay,
                    attempt_index + 1,
                    self._policy.max_attempts,
                )
            await self._sleep(delay)
            attempt_index += 1

    async def _attempt[T](
        self,
        operation: cabc.Callable[[], cabc.Awaitable[T]],
        description: str,
    ) -> T:
        timeout_s = self._policy.attempt_timeout_s
        if timeout_s is None:
            return await operation()
        try:
            async with asyncio.timeout(timeout_s):
                return await operation()
        except TimeoutError as exc:
            raise GitHubAPIError.timeout(description) from exc


__all__ = ["RetryExecutor", "RetryPolicy", "Sleep", "is_transient_failure"]
