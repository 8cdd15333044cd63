"""Registration and owner-scoped lookup of GitHub repositories."""

from __future__ import annotations

import typing as typ

from prscribe.common.ids import new_repository_id
from prscribe.common.slug import parse_github_url
from prscribe.common.time import utcnow
from prscribe.errors import (
    AccessDeniedError,
    InvalidInputError,
    RepositoryNotFoundError,
)
from prscribe.logging import get_logger, log_info
from prscribe.storage.models import RepositoryRecord

if typ.TYPE_CHECKING:
    from prscribe.common.time import Clock
    from prscribe.identity import Identity
    from prscribe.storage.protocol import RepositoryStore

logger = get_logger(__name__)


def require_owned_repository(
    store: RepositoryStore, identity: Identity, repository_id: str
) -> RepositoryRecord:
    """Return the repository if ``identity`` owns it.

    Raises
    ------
    RepositoryNotFoundError
        If no repository has ``repository_id``.
    AccessDeniedError
        If the repository belongs to another user.

    """
    record = store.get(repository_id)
    if record is None:
        raise RepositoryNotFoundError(repository_id)
    if record.owner_user_id != identity.user_id:
        raise AccessDeniedError("repository", repository_id)
    return record


class RepositoryRegistryService:
    """Register repositories and serve them back to their owners.

    Parameters
    ----------
    store
        Repository storage backend.
    clock
        Source of registration timestamps.

    """

    def __init__(self, store: RepositoryStore, *, clock: Clock = utcnow) -> None:
        """Configure the service with its store and clock."""
        self._store = store
        self._clock = clock

    def register(self, identity: Identity, url: str) -> RepositoryRecord:
        """Register the GitHub repository at ``url`` for ``identity``.

        Raises
        ------
        InvalidInputError
            If ``url`` does not reference a GitHub repository.

        """
        try:
            owner, repo = parse_github_url(url)
        except ValueError as exc:
            raise InvalidInputError(str(exc), field="url") from exc

        record = RepositoryRecord(
            id=new_repository_id(),
            url=url.strip(),
            owner=owner,
            repo=repo,
            owner_user_id=identity.user_id,
            created_at=self._clock(),
        )
        self._store.put(record)
        log_info(
            logger,
            "Registered repository %s as %s for user %s",
            record.name,
            record.id,
            identity.user_id,
        )
        return record

    def list_for_owner(self, identity: Identity) -> list[RepositoryRecord]:
        """Return the repositories ``identity`` registered."""
        return self._store.list_by_owner(identity.user_id)

    def get_owned(self, identity: Identity, repository_id: str) -> RepositoryRecord:
        """Return ``repository_id`` if ``identity`` owns it."""
        return require_owned_repository(self._store, identity, repository_id)
