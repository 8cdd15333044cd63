"""Domain errors shared by the prscribe services and the HTTP layer.

Upstream failures live in :mod:`prscribe.github.errors` and text generation
failures in :mod:`prscribe.writer.errors`; this module covers the caller
facing conditions (identity, ownership, lookup, and input validation).
"""

from __future__ import annotations


class PrscribeError(Exception):
    """Base class for prscribe domain errors."""


class AuthenticationError(PrscribeError):
    """Raised when a request carries no usable identity."""

    @classmethod
    def missing_credentials(cls) -> AuthenticationError:
        """Return an error for requests without a bearer credential."""
        return cls("Authentication credentials were not provided")

    @classmethod
    def invalid_credentials(cls) -> AuthenticationError:
        """Return an error for credentials the identity provider rejected."""
        return cls("Authentication credentials are invalid or expired")


class AccessDeniedError(PrscribeError):
    """Raised when an authenticated user touches a resource they do not own.

    Attributes
    ----------
    resource
        Kind of resource that was requested (``repository``, ``article``).
    resource_id
        Identifier of the requested resource.

    """

    def __init__(self, resource: str, resource_id: str) -> None:
        """Initialise with the resource kind and identifier."""
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"Access to {resource} '{resource_id}' is denied")


class NotFoundError(PrscribeError):
    """Raised when a requested record does not exist."""


class RepositoryNotFoundError(NotFoundError):
    """Raised when no registered repository matches an id."""

    def __init__(self, repository_id: str) -> None:
        """Initialise with the missing repository id."""
        self.repository_id = repository_id
        super().__init__(f"No repository with id '{repository_id}' exists.")


class ArticleNotFoundError(NotFoundError):
    """Raised when no stored article matches an id."""

    def __init__(self, article_id: str) -> None:
        """Initialise with the missing article id."""
        self.article_id = article_id
        super().__init__(f"No article with id '{article_id}' exists.")


class InvalidInputError(PrscribeError):
    """Raised for caller validation errors.

    Use this instead of ``ValueError`` so that only intentional validation
    failures are surfaced to the caller, while programmer mistakes still
    propagate as unhandled errors.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.
    field
        Optional name of the input field that failed validation.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialise with a validation reason and optional field name."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


class NoValidPullRequestsError(InvalidInputError):
    """Raised when none of the selected pull request ids resolve upstream."""

    def __init__(self, repository_slug: str) -> None:
        """Initialise with the repository the selection was made against."""
        self.repository_slug = repository_slug
        super().__init__(
            f"No valid pull requests found in {repository_slug}",
            field="pullRequestIds",
        )
