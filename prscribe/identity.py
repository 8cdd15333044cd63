"""Caller identity resolved from a bearer credential."""

from __future__ import annotations

import dataclasses as dc
import typing as typ


@dc.dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated caller.

    Attributes
    ----------
    user_id
        Stable identifier of the user; ownership checks compare this value.
    github_token
        Credential used for GitHub calls made on the user's behalf.
    login
        Display login, when the provider reports one.

    """

    user_id: str
    github_token: str = dc.field(repr=False)
    login: str | None = None


@typ.runtime_checkable
class IdentityProvider(typ.Protocol):
    """Resolve bearer credentials into identities."""

    async def authenticate(self, credential: str) -> Identity:
        """Return the identity behind ``credential``.

        Raises
        ------
        AuthenticationError
            If the credential is unknown, expired, or revoked.

        """
        ...
