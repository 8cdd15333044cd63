"""Liveness and readiness probe resources.

These resources are stateless and bypass authentication. They are always
registered, including when the app runs without domain dependencies.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource returning ``{"status": "ready"}``.

    Parameters
    ----------
    domain_enabled
        Whether domain routes are mounted; reported so operators can tell a
        health-only deployment apart.

    """

    def __init__(self, *, domain_enabled: bool = False) -> None:
        """Record whether domain routes are mounted."""
        self._domain_enabled = domain_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        resp.media = {"status": "ready", "domain": self._domain_enabled}
        resp.status = HTTPStatus.OK
