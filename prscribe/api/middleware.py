"""Falcon middleware for bearer authentication and shutdown cleanup.

``AuthenticationMiddleware`` resolves the ``Authorization: Bearer`` header
into an :class:`~prscribe.identity.Identity` on ``req.context.identity``
before any domain resource runs. Health probes are exempt.

``ShutdownMiddleware`` awaits the registered close hooks when the ASGI
server sends ``lifespan.shutdown``, releasing pooled HTTP clients.

Usage
-----
Register the middleware when creating the Falcon app::

    app = falcon.asgi.App(
        middleware=[
            AuthenticationMiddleware(identity_provider),
            ShutdownMiddleware([gateway_factory.aclose]),
        ]
    )

"""

from __future__ import annotations

import typing as typ

from prscribe.errors import AuthenticationError
from prscribe.logging import get_logger, log_exception

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from falcon.asgi import Request, Response

    from prscribe.identity import IdentityProvider

__all__ = ["DEFAULT_EXEMPT_PATHS", "AuthenticationMiddleware", "ShutdownMiddleware"]

DEFAULT_EXEMPT_PATHS = frozenset({"/health", "/ready"})
_BEARER_SCHEME = "bearer"

logger = get_logger(__name__)


def _bearer_credential(header: str | None) -> str:
    """Return the credential from an ``Authorization`` header value.

    Raises
    ------
    AuthenticationError
        If the header is absent, uses another scheme, or is empty.

    """
    if not header:
        raise AuthenticationError.missing_credentials()
    scheme, _, credential = header.strip().partition(" ")
    if scheme.lower() != _BEARER_SCHEME or not credential.strip():
        raise AuthenticationError.missing_credentials()
    return credential.strip()


class AuthenticationMiddleware:
    """Resolve bearer credentials into identities for domain routes.

    Parameters
    ----------
    identity_provider
        Provider consulted once per request.
    exempt_paths
        Paths served without authentication.

    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        *,
        exempt_paths: cabc.Set[str] = DEFAULT_EXEMPT_PATHS,
    ) -> None:
        """Initialise with the identity provider and exempt paths."""
        self._identity_provider = identity_provider
        self._exempt_paths = exempt_paths

    async def process_request(self, req: Request, _resp: Response) -> None:
        """Attach the caller's identity to ``req.context.identity``.

        Raises
        ------
        AuthenticationError
            If the credential is missing or rejected.

        """
        if req.path in self._exempt_paths:
            return
        credential = _bearer_credential(req.get_header("Authorization"))
        req.context.identity = await self._identity_provider.authenticate(credential)


class ShutdownMiddleware:
    """Run close hooks when the ASGI lifespan shuts down."""

    def __init__(
        self, hooks: cabc.Iterable[cabc.Callable[[], cabc.Awaitable[None]]]
    ) -> None:
        """Store the hooks in the order they should run."""
        self._hooks = tuple(hooks)

    async def process_shutdown(
        self,
        _scope: dict[str, typ.Any],
        _event: dict[str, typ.Any],
    ) -> None:
        """Await every hook, logging failures so later hooks still run."""
        for hook in self._hooks:
            try:
                await hook()
            except Exception as exc:  # noqa: BLE001 -- shutdown must visit every hook
                log_exception(logger, "Shutdown hook failed", exc)
