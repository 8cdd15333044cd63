"""Time-boxed cache of merged-PR listings per repository.

Listing a repository's pull requests stores the result here so that an
article generated shortly afterwards can reuse it instead of calling GitHub
again. Entries are replaced wholesale on each ``put`` and read back only
while ``now - last_updated <= ttl``.

Usage
-----
>>> cache = InMemoryPullRequestCache()
>>> cache.put("r1", pulls)
>>> cache.get("r1") == pulls
True

"""

from __future__ import annotations

import datetime as dt
import typing as typ

from prscribe.common.time import utcnow
from prscribe.storage.models import PullRequestCacheEntry

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from prscribe.common.time import Clock
    from prscribe.github.models import PullRequestSummary

DEFAULT_CACHE_TTL = dt.timedelta(minutes=10)


class InMemoryPullRequestCache:
    """Dict-backed :class:`~prscribe.storage.protocol.PullRequestCacheStore`.

    There is no capacity bound and no active purge: a stale entry stays in
    the dict, invisible to ``get``, until the next ``put`` for its id.

    Parameters
    ----------
    ttl
        Freshness window; defaults to ten minutes.
    clock
        Source of the current time, injectable for tests.

    """

    def __init__(
        self,
        *,
        ttl: dt.timedelta = DEFAULT_CACHE_TTL,
        clock: Clock = utcnow,
    ) -> None:
        """Configure the freshness window and clock."""
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, PullRequestCacheEntry] = {}

    @property
    def ttl(self) -> dt.timedelta:
        """Return the freshness window."""
        return self._ttl

    def put(
        self,
        repository_id: str,
        pull_requests: cabc.Sequence[PullRequestSummary],
    ) -> None:
        """Replace the entry for ``repository_id`` with a freshly stamped one."""
        self._entries[repository_id] = PullRequestCacheEntry(
            repository_id=repository_id,
            pull_requests=tuple(pull_requests),
            last_updated=self._clock(),
        )

    def get(self, repository_id: str) -> list[PullRequestSummary] | None:
        """Return the cached listing while fresh, else ``None``."""
        entry = self._entries.get(repository_id)
        if entry is None:
            return None
        if self._clock() - entry.last_updated > self._ttl:
            return None
        return list(entry.pull_requests)

    def entry(self, repository_id: str) -> PullRequestCacheEntry | None:
        """Return the raw entry for ``repository_id``, fresh or not."""
        return self._entries.get(repository_id)
