"""GitHub gateway, retry executor, and identity provider."""

from __future__ import annotations

from .client import (
    GatewayFactory,
    GitHubClientFactory,
    GitHubRestClient,
    GitHubRestConfig,
    PullRequestGateway,
    PullRequestState,
)
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .identity import GitHubIdentityProvider
from .models import (
    PullRequestCommit,
    PullRequestDetail,
    PullRequestFile,
    PullRequestSummary,
)
from .retry import RetryExecutor, RetryPolicy, is_transient_failure

__all__ = [
    "GatewayFactory",
    "GitHubAPIError",
    "GitHubClientFactory",
    "GitHubConfigError",
    "GitHubIdentityProvider",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "PullRequestCommit",
    "PullRequestDetail",
    "PullRequestFile",
    "PullRequestGateway",
    "PullRequestState",
    "PullRequestSummary",
    "RetryExecutor",
    "RetryPolicy",
    "is_transient_failure",
]
