"""Errors raised by the GitHub gateway."""

from __future__ import annotations

# Statuses GitHub emits for rate limiting and transient proxy failures.
HTTP_TOO_MANY_REQUESTS = 429
HTTP_BAD_GATEWAY = 502
HTTP_SERVICE_UNAVAILABLE = 503

TRANSIENT_STATUS_CODES = frozenset(
    {HTTP_TOO_MANY_REQUESTS, HTTP_BAD_GATEWAY, HTTP_SERVICE_UNAVAILABLE}
)


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns an error response or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_transient(self) -> bool:
        """Return True when the status code signals a retryable failure."""
        return self.status_code in TRANSIENT_STATUS_CODES

    @classmethod
    def http_error(cls, status_code: int, path: str) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        msg = f"GitHub API HTTP {status_code} for {path}"
        return cls(msg, status_code=status_code)

    @classmethod
    def timeout(cls, path: str) -> GitHubAPIError:
        """Return an error for a request that exceeded its deadline."""
        return cls(f"GitHub API request timed out for {path}")

    @classmethod
    def network_error(cls, path: str, detail: str) -> GitHubAPIError:
        """Return an error for DNS, connection, or TLS failures."""
        return cls(f"GitHub API network error for {path}: {detail}")


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub responses are missing expected fields."""

    @classmethod
    def missing(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a missing response field."""
        return cls(f"GitHub response missing expected field: {field}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def invalid_value(
        cls, env_var: str, value: str, constraint: str
    ) -> GitHubConfigError:
        """Return an error for an environment value that fails validation."""
        return cls(f"Invalid {env_var} {value!r}. {constraint}")

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")
