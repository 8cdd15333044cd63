"""Identifier types and boundary parsing.

Pull request ids arrive from clients as JSON numbers or strings. They are
parsed once, here, into :data:`PullRequestId` so the rest of the code
compares plain integers.
"""

from __future__ import annotations

import reprlib
import time
import typing as typ
import uuid

from prscribe.errors import InvalidInputError

PullRequestId = typ.NewType("PullRequestId", int)

# GitHub ids are 64-bit integers.
_MAX_PULL_REQUEST_ID = 2**63 - 1
_MAX_ID_DIGITS = len(str(_MAX_PULL_REQUEST_ID))


def _is_ascii_decimal(text: str) -> bool:
    return (
        0 < len(text) <= _MAX_ID_DIGITS and text.isascii() and text.isdecimal()
    )


def parse_pull_request_id(
    raw: object, *, field: str = "pullRequestIds"
) -> PullRequestId:
    """Parse a client supplied pull request id.

    Parameters
    ----------
    raw
        An ``int`` or a string of decimal digits.
    field
        Field name reported on validation failure.

    Returns
    -------
    PullRequestId
        The canonical positive integer id.

    Raises
    ------
    InvalidInputError
        If ``raw`` is a boolean, not integral, or outside the 64-bit
        positive range.

    Examples
    --------
    >>> parse_pull_request_id("1024")
    1024

    """
    if isinstance(raw, bool):
        raise InvalidInputError(f"invalid pull request id {raw!r}", field=field)
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _is_ascii_decimal(raw.strip()):
        value = int(raw.strip())
    else:
        raise InvalidInputError(
            f"invalid pull request id {reprlib.repr(raw)}", field=field
        )

    if not 0 < value <= _MAX_PULL_REQUEST_ID:
        # Huge ints cannot be rendered with repr.
        raise InvalidInputError("pull request id out of range", field=field)
    return PullRequestId(value)


def parse_pull_request_ids(
    raw: object, *, field: str = "pullRequestIds"
) -> tuple[PullRequestId, ...]:
    """Parse a non-empty list of pull request ids, preserving order.

    Duplicates are collapsed to their first occurrence.

    Raises
    ------
    InvalidInputError
        If ``raw`` is not a non-empty list or any element is invalid.

    """
    if not isinstance(raw, list) or not raw:
        raise InvalidInputError("pull request ids are required", field=field)

    parsed = (parse_pull_request_id(item, field=field) for item in raw)
    return tuple(dict.fromkeys(parsed))


def new_repository_id() -> str:
    """Return a fresh opaque repository identifier."""
    return uuid.uuid4().hex[:12]


def new_article_id() -> str:
    """Return a fresh article identifier.

    The zero-padded nanosecond prefix makes ids sort in generation order;
    the random suffix keeps ids unique when two land on the same tick.
    """
    return f"article_{time.time_ns():020d}_{uuid.uuid4().hex[:8]}"
