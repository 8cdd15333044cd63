"""Falcon error handlers translating domain errors into HTTP responses.

Every handler answers with a ``{"title", "description"}`` JSON body and a
stable status code:

======================================  ======
Error                                   Status
======================================  ======
``AuthenticationError``                 401
``AccessDeniedError``                   403
``NotFoundError``                       404
``InvalidInputError``                   400
``GitHubAPIError`` and shape errors     502
``ArticleWriterError``                  502
======================================  ======

Usage
-----
Register every handler on the Falcon app::

    from prscribe.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from prscribe.errors import (
    AccessDeniedError,
    AuthenticationError,
    InvalidInputError,
    NotFoundError,
)
from prscribe.github.errors import GitHubAPIError, GitHubResponseShapeError
from prscribe.logging import get_logger, log_warning
from prscribe.writer.errors import ArticleWriterError

if typ.TYPE_CHECKING:
    import falcon.asgi
    from falcon.asgi import Request, Response

__all__ = [
    "handle_access_denied",
    "handle_authentication",
    "handle_generation_failure",
    "handle_invalid_input",
    "handle_not_found",
    "handle_upstream_failure",
    "register_error_handlers",
]

logger = get_logger(__name__)


async def handle_authentication(
    _req: Request,
    resp: Response,
    ex: AuthenticationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AuthenticationError`` to an HTTP 401 JSON response."""
    resp.status = falcon.HTTP_401
    resp.set_header("WWW-Authenticate", "Bearer")
    resp.media = {"title": "Unauthorized", "description": str(ex)}


async def handle_access_denied(
    _req: Request,
    resp: Response,
    ex: AccessDeniedError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AccessDeniedError`` to an HTTP 403 JSON response."""
    resp.status = falcon.HTTP_403
    resp.media = {"title": "Access denied", "description": str(ex)}


async def handle_not_found(
    _req: Request,
    resp: Response,
    ex: NotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``NotFoundError`` subclasses to an HTTP 404 JSON response."""
    resp.status = falcon.HTTP_404
    resp.media = {"title": "Not found", "description": str(ex)}


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The validation exception containing reason and optional field.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid input",
        "description": ex.reason,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_upstream_failure(
    req: Request,
    resp: Response,
    ex: GitHubAPIError | GitHubResponseShapeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map GitHub failures to an HTTP 502 JSON response."""
    log_warning(logger, "GitHub failure on %s %s: %s", req.method, req.path, ex)
    resp.status = falcon.HTTP_502
    resp.media = {"title": "Upstream service error", "description": str(ex)}


async def handle_generation_failure(
    req: Request,
    resp: Response,
    ex: ArticleWriterError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``ArticleWriterError`` to an HTTP 502 JSON response."""
    log_warning(logger, "Article writer failure on %s %s: %s", req.method, req.path, ex)
    resp.status = falcon.HTTP_502
    resp.media = {"title": "Article generation failed", "description": str(ex)}


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Install every domain error handler on ``app``."""
    app.add_error_handler(AuthenticationError, handle_authentication)
    app.add_error_handler(AccessDeniedError, handle_access_denied)
    app.add_error_handler(NotFoundError, handle_not_found)
    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(GitHubAPIError, handle_upstream_failure)
    app.add_error_handler(GitHubResponseShapeError, handle_upstream_failure)
    app.add_error_handler(ArticleWriterError, handle_generation_failure)
