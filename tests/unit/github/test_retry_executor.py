"""Unit tests for the GitHub retry executor.

Run with:
    pytest tests/unit/github/test_retry_executor.py
"""

from __future__ import annotations

import asyncio
import typing as typ

import pytest

from prscribe.github.errors import GitHubAPIError
from prscribe.github.retry import RetryExecutor, RetryPolicy, is_transient_failure
from tests.helpers.femtologging_capture import capture_femto_logs


class _ForeignStatusError(RuntimeError):
    """Non-GitHub error that happens to carry a status code."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class _RecordingSleep:
    """Sleep replacement recording requested delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class _ScriptedOperation:
    """Operation returning or raising scripted outcomes in order."""

    def __init__(self, outcomes: list[object]) -> None:
        self._outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self) -> object:
        self.calls += 1
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _http_error(status: int) -> GitHubAPIError:
    return GitHubAPIError.http_error(status, "/repos/acme/widgets/pulls")


@pytest.fixture
def sleep() -> _RecordingSleep:
    """Provide a recording sleep."""
    return _RecordingSleep()


@pytest.fixture
def executor(sleep: _RecordingSleep) -> RetryExecutor:
    """Provide an executor with the default policy and recording sleep."""
    return RetryExecutor(RetryPolicy(max_attempts=3, initial_delay_s=1.0), sleep=sleep)


class TestRetryExecutor:
    """Behaviour of RetryExecutor.execute."""

    @pytest.mark.asyncio
    async def test_returns_first_success_without_sleeping(
        self, executor: RetryExecutor, sleep: _RecordingSleep
    ) -> None:
        """A successful first attempt returns immediately."""
        operation = _ScriptedOperation(["ok"])

        result = await executor.execute(operation)

        assert result == "ok"
        assert operation.calls == 1, "expected a single attempt"
        assert sleep.delays == [], "expected no backoff"

    @pytest.mark.asyncio
    async def test_retries_transient_failures_with_doubling_delay(
        self, executor: RetryExecutor, sleep: _RecordingSleep
    ) -> None:
        """503, 503, then success sleeps 1s then 2s."""
        operation = _ScriptedOperation([_http_error(503), _http_error(503), "ok"])

        result = await executor.execute(operation)

        assert result == "ok"
        assert operation.calls == 3, "expected three attempts"
        assert sleep.delays == [1.0, 2.0], "expected exponential backoff"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [429, 502, 503])
    async def test_each_transient_status_is_retried(
        self, executor: RetryExecutor, status: int
    ) -> None:
        """Rate limiting and gateway statuses are retryable."""
        operation = _ScriptedOperation([_http_error(status), "ok"])

        assert await executor.execute(operation) == "ok"
        assert operation.calls == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422, 500])
    async def test_terminal_status_propagates_without_retry(
        self, executor: RetryExecutor, sleep: _RecordingSleep, status: int
    ) -> None:
        """Non-transient statuses fail after exactly one attempt."""
        error = _http_error(status)
        operation = _ScriptedOperation([error, "unused"])

        with pytest.raises(GitHubAPIError) as excinfo:
            await executor.execute(operation)

        assert excinfo.value is error, "expected the original failure"
        assert operation.calls == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_exhausted_attempts_raise_last_failure(
        self, executor: RetryExecutor, sleep: _RecordingSleep
    ) -> None:
        """After max_attempts transient failures the last one propagates."""
        last = _http_error(502)
        operation = _ScriptedOperation([_http_error(503), _http_error(429), last])

        with pytest.raises(GitHubAPIError) as excinfo:
            await executor.execute(operation)

        assert excinfo.value is last, "expected the final attempt's failure"
        assert operation.calls == 3
        assert sleep.delays == [1.0, 2.0], "expected no sleep after the last attempt"

    @pytest.mark.asyncio
    async def test_errors_without_status_are_terminal(
        self, executor: RetryExecutor
    ) -> None:
        """Exceptions that carry no status code are not retried."""
        operation = _ScriptedOperation([ValueError("bad payload"), "unused"])

        with pytest.raises(ValueError, match="bad payload"):
            await executor.execute(operation)

        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_single_attempt_policy_never_retries(
        self, sleep: _RecordingSleep
    ) -> None:
        """max_attempts=1 disables retries even for transient failures."""
        executor = RetryExecutor(RetryPolicy(max_attempts=1), sleep=sleep)
        operation = _ScriptedOperation([_http_error(503)])

        with pytest.raises(GitHubAPIError):
            await executor.execute(operation)

        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_attempt_timeout_raises_terminal_timeout(
        self, sleep: _RecordingSleep
    ) -> None:
        """An attempt exceeding attempt_timeout_s fails without retry."""
        executor = RetryExecutor(
            RetryPolicy(max_attempts=3, attempt_timeout_s=0.01), sleep=sleep
        )
        calls = 0

        async def _hang() -> str:
            nonlocal calls
            calls += 1
            await asyncio.sleep(10)
            return "never"

        with pytest.raises(GitHubAPIError, match="timed out for GET /user"):
            await executor.execute(_hang, description="GET /user")

        assert calls == 1, "timeouts are terminal"
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_logs_warning_per_retry(self, executor: RetryExecutor) -> None:
        """Each retry emits a warning naming the status and attempt."""
        operation = _ScriptedOperation([_http_error(503), "ok"])

        with capture_femto_logs("prscribe.github.retry") as capture:
            await executor.execute(operation, description="GET /repos/acme/widgets")
            capture.wait_for_count(1)

        record = capture.records[0]
        assert record.level == "WARN"
        assert "GET /repos/acme/widgets" in record.message
        assert "503" in record.message
        assert "attempt 1/3" in record.message


class TestRetryPolicy:
    """Validation and delay computation for RetryPolicy."""

    def test_delay_doubles_per_attempt(self) -> None:
        """delay_for returns initial * 2**index."""
        policy = RetryPolicy(initial_delay_s=0.5)
        assert [policy.delay_for(i) for i in range(4)] == [0.5, 1.0, 2.0, 4.0]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"initial_delay_s": -1.0},
            {"attempt_timeout_s": 0.0},
        ],
    )
    def test_rejects_invalid_limits(self, kwargs: dict[str, typ.Any]) -> None:
        """Policies that could never run or would wait negatively are rejected."""
        with pytest.raises(ValueError, match="must be"):
            RetryPolicy(**kwargs)


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (GitHubAPIError("x", status_code=429), True),
        (GitHubAPIError("x", status_code=404), False),
        (GitHubAPIError("x"), False),
        (RuntimeError("x"), False),
        (_ForeignStatusError(503), False),
    ],
)
def test_is_transient_failure(error: BaseException, *, expected: bool) -> None:
    """Only GitHub errors with 429/502/503 status codes are transient."""
    assert is_transient_failure(error) is expected
    if isinstance(error, GitHubAPIError):
        assert error.is_transient is expected
